from __future__ import annotations

import math
from datetime import date, datetime, timedelta, timezone
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

_BYTE_UNITS = ("B", "KB", "MB", "GB", "TB")

OVERVIEW_LIMIT = 200
SEARCH_RESULT_LIMIT = 10
MAX_LIST_LIMIT = 1000


def format_bytes(num_bytes: Any) -> str:
    """Human-readable size with base-1024 units and at most two decimals."""
    try:
        value = float(num_bytes or 0)
    except (TypeError, ValueError):
        value = 0.0
    if value == 0:
        return "0 B"
    i = 0
    if abs(value) >= 1:
        i = min(int(math.floor(math.log(abs(value), 1024))), len(_BYTE_UNITS) - 1)
    scaled = round(value / (1024 ** i), 2)
    text = f"{scaled:.2f}".rstrip("0").rstrip(".")
    return f"{text} {_BYTE_UNITS[i]}"


def percent(part: Any, total: Any) -> Optional[int]:
    try:
        total_f = float(total or 0)
        part_f = float(part or 0)
    except (TypeError, ValueError):
        return None
    if total_f <= 0:
        return None
    return int(math.floor(part_f / total_f * 100 + 0.5))


def truncate_overview(text: Optional[str], limit: int = OVERVIEW_LIMIT) -> Optional[str]:
    if text is None:
        return None
    if len(text) > limit:
        return text[:limit] + "..."
    return text


def first_of(*values: Any, default: Any = None) -> Any:
    """First truthy value, else ``default``."""
    for v in values:
        if v:
            return v
    return default


def first_present(*values: Any, default: Any = None) -> Any:
    """First value that is not ``None``, else ``default``."""
    for v in values:
        if v is not None:
            return v
    return default


def epoch_to_iso(seconds: Any) -> str:
    if seconds is None:
        return "-"
    try:
        dt = datetime.fromtimestamp(float(seconds), tz=timezone.utc)
    except (TypeError, ValueError, OverflowError, OSError):
        return "-"
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"


def calendar_window(days: int, today: Optional[date] = None) -> Tuple[str, str]:
    start = today or datetime.now(timezone.utc).date()
    end = start + timedelta(days=days)
    return start.isoformat(), end.isoformat()


def fraction(done: Any, total: Any) -> str:
    return f"{_stat_str(done)}/{_stat_str(total)}"


def _stat_str(value: Any) -> str:
    if value is None:
        return "?"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def normalize_limit(limit: Any) -> Optional[int]:
    """Positive limits are floored and capped; anything else means "no limit"."""
    if limit is None or isinstance(limit, bool):
        return None
    try:
        value = float(limit)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(value) or value <= 0:
        return None
    return min(int(math.floor(value)), MAX_LIST_LIMIT)


def sort_library(
    items: List[Dict[str, Any]],
    sort_by: Optional[str],
    sort_dir: Optional[str],
    *,
    date_key: Callable[[Dict[str, Any]], str],
    size_key: Callable[[Dict[str, Any]], float],
) -> Tuple[List[Dict[str, Any]], Optional[str]]:
    """Sort by ``dateAdded`` (default ascending) or ``sizeOnDisk`` (default descending).

    Returns the sorted copy and the effective direction (``None`` when unsorted).
    """
    if sort_by == "dateAdded":
        direction = sort_dir or "asc"
        ordered = sorted(items, key=lambda it: date_key(it) or "", reverse=direction == "desc")
    elif sort_by == "sizeOnDisk":
        direction = sort_dir or "desc"
        ordered = sorted(items, key=lambda it: size_key(it) or 0, reverse=direction == "desc")
    else:
        return list(items), None
    return ordered, direction


def listing_envelope(
    items: List[Dict[str, Any]],
    key: str,
    *,
    sort_by: Optional[str],
    sort_dir: Optional[str],
    limit: Optional[int],
    total: int,
    shape: Callable[[Dict[str, Any]], Dict[str, Any]],
) -> Dict[str, Any]:
    if limit is not None:
        items = items[:limit]
    out: Dict[str, Any] = {"totalCount": total}
    if limit is not None:
        out["limitedTo"] = limit
    out["count"] = len(items)
    if sort_by:
        out["sortBy"] = sort_by
        out["sortDir"] = sort_dir
    out[key] = [shape(it) for it in items]
    return out


def queue_progress(size: Any, sizeleft: Any) -> str:
    try:
        total = float(size)
        left = float(sizeleft)
        value = (1 - left / total) * 100
    except (TypeError, ValueError, ZeroDivisionError):
        return "NaN%"
    if math.isnan(value) or math.isinf(value):
        return "NaN%"
    return f"{value:.1f}%"


def summarize_queue(queue: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "totalRecords": queue.get("totalRecords"),
        "items": [
            {
                "title": q.get("title"),
                "status": q.get("status"),
                "progress": queue_progress(q.get("size"), q.get("sizeleft")),
                "timeLeft": q.get("timeleft"),
                "downloadClient": q.get("downloadClient"),
            }
            for q in queue.get("records") or []
        ],
    }


def summarize_search(results: List[Dict[str, Any]], fields: Iterable[str]) -> Dict[str, Any]:
    fields = list(fields)
    shaped = []
    for r in results[:SEARCH_RESULT_LIMIT]:
        item = {f: r.get(f) for f in fields}
        item["overview"] = truncate_overview(r.get("overview"))
        shaped.append(item)
    return {"count": len(results), "results": shaped}


def allowed_quality_names(items: List[Dict[str, Any]]) -> List[str]:
    names: List[str] = []
    for it in items or []:
        if not it.get("allowed"):
            continue
        name = first_of((it.get("quality") or {}).get("name"), it.get("name"))
        if not name and it.get("items"):
            name = ", ".join(str((q.get("quality") or {}).get("name")) for q in it["items"])
        if name:
            names.append(name)
    return names


def scored_custom_formats(profile: Dict[str, Any]) -> List[Dict[str, Any]]:
    return [
        {"name": f.get("name"), "score": f.get("score")}
        for f in profile.get("formatItems") or []
        if f.get("score") != 0
    ]


def command_result(command: Optional[Dict[str, Any]], message: str) -> Dict[str, Any]:
    return {"success": True, "message": message, "commandId": (command or {}).get("id")}


def mb_per_min(value: Any) -> str:
    return f"{_stat_str(value)} MB/min"
