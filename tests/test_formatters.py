from datetime import date

from gateway.formatters import (
    allowed_quality_names,
    calendar_window,
    epoch_to_iso,
    first_of,
    first_present,
    format_bytes,
    fraction,
    listing_envelope,
    normalize_limit,
    percent,
    queue_progress,
    sort_library,
    summarize_search,
    truncate_overview,
)


def test_format_bytes():
    assert format_bytes(0) == "0 B"
    assert format_bytes(None) == "0 B"
    assert format_bytes(512) == "512 B"
    assert format_bytes(1536) == "1.5 KB"
    assert format_bytes(1.5 * 1024 ** 3) == "1.5 GB"
    assert format_bytes(5 * 1024 ** 4) == "5 TB"
    # capped at TB
    assert format_bytes(2048 * 1024 ** 4) == "2048 TB"


def test_format_bytes_is_monotonic_within_a_unit():
    for unit, base in (("KB", 1024), ("MB", 1024 ** 2)):
        previous = 0.0
        for n in range(1, 1024, 7):
            value, label = format_bytes(n * base + base // 3).split()
            assert label == unit
            assert float(value) >= previous
            previous = float(value)


def test_percent_rounds_half_up():
    assert percent(1, 8) == 13  # 12.5
    assert percent(0, 10) == 0
    assert percent(5, 0) is None


def test_truncate_overview():
    assert truncate_overview(None) is None
    assert truncate_overview("short") == "short"
    assert truncate_overview("x" * 201) == "x" * 200 + "..."
    assert truncate_overview("x" * 200) == "x" * 200


def test_first_of_vs_first_present():
    assert first_of("", None, "b") == "b"
    assert first_present("", None, "b") == ""
    assert first_of(0, default="-") == "-"
    assert first_present(None, None, default="-") == "-"


def test_epoch_to_iso():
    assert epoch_to_iso(0) == "1970-01-01T00:00:00.000Z"
    assert epoch_to_iso(1700000000) == "2023-11-14T22:13:20.000Z"
    assert epoch_to_iso(None) == "-"
    assert epoch_to_iso("garbage") == "-"


def test_calendar_window():
    assert calendar_window(7, today=date(2024, 2, 25)) == ("2024-02-25", "2024-03-03")


def test_fraction():
    assert fraction(3, 10) == "3/10"
    assert fraction(None, 10) == "?/10"
    assert fraction(None, None) == "?/?"


def test_normalize_limit():
    assert normalize_limit(None) is None
    assert normalize_limit(0) is None
    assert normalize_limit(-3) is None
    assert normalize_limit("abc") is None
    assert normalize_limit(2.9) == 2
    assert normalize_limit(5000) == 1000


def test_sort_library_defaults():
    items = [
        {"id": 1, "added": "2024-03-01", "size": 10},
        {"id": 2, "added": "2023-01-01", "size": 30},
        {"id": 3, "added": "2025-01-01", "size": 20},
    ]
    kw = dict(date_key=lambda i: i["added"], size_key=lambda i: i["size"])

    by_date, d = sort_library(items, "dateAdded", None, **kw)
    assert d == "asc"
    assert [i["id"] for i in by_date] == [2, 1, 3]

    by_size, d = sort_library(items, "sizeOnDisk", None, **kw)
    assert d == "desc"
    assert [i["id"] for i in by_size] == [2, 3, 1]

    by_size_asc, d = sort_library(items, "sizeOnDisk", "asc", **kw)
    assert [i["id"] for i in by_size_asc] == [1, 3, 2]

    same, d = sort_library(items, None, "desc", **kw)
    assert d is None
    assert same == items


def test_listing_envelope_with_limit_and_sort():
    items = [{"id": i} for i in range(5)]
    out = listing_envelope(items, "movies", sort_by="dateAdded", sort_dir="asc", limit=2, total=5, shape=lambda i: i)
    assert out == {
        "totalCount": 5,
        "limitedTo": 2,
        "count": 2,
        "sortBy": "dateAdded",
        "sortDir": "asc",
        "movies": [{"id": 0}, {"id": 1}],
    }

    plain = listing_envelope(items, "movies", sort_by=None, sort_dir=None, limit=None, total=5, shape=lambda i: i)
    assert "limitedTo" not in plain
    assert "sortBy" not in plain
    assert plain["count"] == 5


def test_queue_progress():
    assert queue_progress(100, 25) == "75.0%"
    assert queue_progress(0, 0) == "NaN%"
    assert queue_progress(None, 5) == "NaN%"


def test_summarize_search_caps_results_and_truncates():
    results = [{"title": f"T{i}", "year": 2000 + i, "overview": "o" * 300} for i in range(15)]
    out = summarize_search(results, ("title", "year"))
    assert out["count"] == 15
    assert len(out["results"]) == 10
    assert out["results"][0]["overview"].endswith("...")
    assert set(out["results"][0]) == {"title", "year", "overview"}


def test_allowed_quality_names_handles_groups():
    items = [
        {"allowed": True, "quality": {"name": "Bluray-1080p"}},
        {"allowed": False, "quality": {"name": "SDTV"}},
        {"allowed": True, "name": "WEB 1080p"},
        {"allowed": True, "items": [{"quality": {"name": "WEBDL-720p"}}, {"quality": {"name": "WEBRip-720p"}}]},
    ]
    assert allowed_quality_names(items) == ["Bluray-1080p", "WEB 1080p", "WEBDL-720p, WEBRip-720p"]
