from unittest.mock import Mock

import pytest

from config.loader import Backend
from gateway.errors import InvalidArgument
from gateway.tools.arguments import coerce, validate_arguments
from gateway.tools.registry import ToolRegistry, ToolSpec, build_tools_and_registry
from integrations.trash_client import TrashClient


async def _noop(args):
    return {}


@pytest.fixture
def full_catalog(make_registry):
    services = make_registry(**{b.value: Mock() for b in Backend})
    return services, build_tools_and_registry(services, TrashClient())


def test_array_params_have_items(full_catalog):
    _, tools = full_catalog
    for spec in tools:
        assert spec.input_schema["type"] == "object"
        for name, prop in spec.input_schema["properties"].items():
            if prop.get("type") == "array":
                assert "items" in prop, f"array param {name} of {spec.name} missing items"
        for key in spec.input_schema["required"]:
            assert key in spec.input_schema["properties"], f"{spec.name} requires undeclared {key}"


def test_generated_config_tools_for_library_managers(full_catalog):
    _, tools = full_catalog
    for service in ("sonarr", "radarr", "lidarr", "readarr"):
        for suffix in ("get_quality_profiles", "get_health", "get_root_folders", "get_download_clients",
                       "get_naming", "get_tags", "review_setup"):
            assert f"{service}_{suffix}" in tools
    assert "prowlarr_review_setup" not in tools


def test_catalog_names_and_backend_bindings(full_catalog):
    _, tools = full_catalog
    assert tools.get("sonarr_delete_season").backend is Backend.SONARR
    assert tools.get("tautulli_server_status").backend is Backend.TAUTULLI
    assert tools.get("overseerr_status").backend is Backend.OVERSEERR
    for name in ("arr_status", "arr_search_all", "trash_list_profiles", "trash_compare_profile", "trash_compare_naming"):
        assert tools.get(name).backend is None
    assert len(tools) == len(set(tools.names()))


def test_only_configured_backends_are_advertised(make_registry):
    services = make_registry(radarr=Mock())
    tools = build_tools_and_registry(services, TrashClient())
    advertised = {t.name for t in tools.advertised(services)}
    assert "radarr_get_movies" in advertised
    assert "radarr_review_setup" in advertised
    assert "sonarr_get_series" not in advertised
    assert "tautulli_get_history" not in advertised
    assert {"arr_status", "arr_search_all", "trash_get_naming"} <= advertised
    # the full catalog still knows about unconfigured tools
    assert "sonarr_get_series" in tools


def test_status_description_lists_configured_services(make_registry):
    services = make_registry(sonarr=Mock(), tautulli=Mock())
    tools = build_tools_and_registry(services, TrashClient())
    desc = tools.get("arr_status").description
    assert desc.endswith("Currently configured: Sonarr (TV), Tautulli (Plex)")


def test_duplicate_registration_raises():
    reg = ToolRegistry()
    reg.register(ToolSpec("x", "d", {"type": "object", "properties": {}, "required": []}, None, _noop))
    with pytest.raises(ValueError):
        reg.register(ToolSpec("x", "d", {"type": "object", "properties": {}, "required": []}, None, _noop))


def test_argument_coercion():
    assert coerce("limit", "5", {"type": "number"}) == 5
    assert coerce("limit", 2.0, {"type": "number"}) == 2
    assert coerce("flag", "false", {"type": "boolean"}) is False
    assert coerce("ids", "1, 2,3", {"type": "array", "items": {"type": "number"}}) == [1, 2, 3]
    assert coerce("ids", 7, {"type": "array", "items": {"type": "number"}}) == [7]
    assert coerce("q", 42, {"type": "string"}) == "42"

    with pytest.raises(InvalidArgument):
        coerce("limit", "lots", {"type": "number"})
    with pytest.raises(InvalidArgument):
        coerce("flag", "maybe", {"type": "boolean"})
    with pytest.raises(InvalidArgument):
        coerce("limit", True, {"type": "number"})


def test_validate_arguments_enforces_enum_required_and_drops_extras():
    schema = {
        "type": "object",
        "properties": {
            "service": {"type": "string", "enum": ["radarr", "sonarr"]},
            "days": {"type": "number"},
        },
        "required": ["service"],
    }
    assert validate_arguments(schema, {"service": "radarr", "days": "3", "junk": 1}) == {"service": "radarr", "days": 3}
    assert validate_arguments(schema, {"service": "sonarr", "days": None}) == {"service": "sonarr"}

    with pytest.raises(InvalidArgument, match="one of"):
        validate_arguments(schema, {"service": "lidarr"})
    with pytest.raises(InvalidArgument, match="Missing required argument: service"):
        validate_arguments(schema, {"days": 1})
    with pytest.raises(InvalidArgument, match="Missing required argument: service"):
        validate_arguments(schema, None)
