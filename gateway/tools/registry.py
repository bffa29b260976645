from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Iterator, List, Optional

from config.loader import CONFIG_BACKENDS, DISPLAY_NAMES, Backend
from gateway.services import ServiceRegistry
from integrations.trash_client import CUSTOM_FORMAT_CATEGORIES, TrashClient

from .tool_impl import make_arr_search_all, make_arr_status, status_description
from .tool_impl_arr import CONFIG_TOOL_FACTORIES, make_get_calendar, make_get_queue, make_search
from .tool_impl_lidarr import (
    make_lidarr_get_albums,
    make_lidarr_get_artists,
    make_lidarr_search_album,
    make_lidarr_search_missing,
)
from .tool_impl_overseerr import (
    make_overseerr_approve_request,
    make_overseerr_decline_request,
    make_overseerr_get_request_count,
    make_overseerr_get_requests,
    make_overseerr_get_user_requests,
    make_overseerr_get_users,
    make_overseerr_search,
    make_overseerr_status,
)
from .tool_impl_prowlarr import (
    make_prowlarr_get_indexers,
    make_prowlarr_get_stats,
    make_prowlarr_search,
    make_prowlarr_test_indexers,
)
from .tool_impl_radarr import make_radarr_delete_movie, make_radarr_get_movies, make_radarr_search_movie
from .tool_impl_readarr import (
    make_readarr_get_authors,
    make_readarr_get_books,
    make_readarr_search_book,
    make_readarr_search_missing,
)
from .tool_impl_sonarr import (
    make_sonarr_delete_episode_files,
    make_sonarr_delete_season,
    make_sonarr_delete_series,
    make_sonarr_get_episodes,
    make_sonarr_get_series,
    make_sonarr_search_episode,
    make_sonarr_search_missing,
)
from .tool_impl_tautulli import (
    make_tautulli_get_history,
    make_tautulli_get_home_stats,
    make_tautulli_get_recently_added,
    make_tautulli_passthrough,
    make_tautulli_terminate_session,
)
from .tool_impl_trash import (
    make_trash_compare_naming,
    make_trash_compare_profile,
    make_trash_get_naming,
    make_trash_get_profile,
    make_trash_get_quality_sizes,
    make_trash_list_custom_formats,
    make_trash_list_profiles,
)

ToolCallable = Callable[[dict], Awaitable[Any]]


@dataclass
class ToolSpec:
    name: str
    description: str
    input_schema: Dict[str, Any]
    backend: Optional[Backend]
    fn: ToolCallable = field(repr=False)


class ToolRegistry:
    def __init__(self) -> None:
        self._tools: Dict[str, ToolSpec] = {}

    def register(self, spec: ToolSpec) -> None:
        if spec.name in self._tools:
            raise ValueError(f"Tool already registered: {spec.name}")
        self._tools[spec.name] = spec

    def get(self, name: str) -> ToolSpec:
        return self._tools[name]

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __iter__(self) -> Iterator[ToolSpec]:
        return iter(self._tools.values())

    def __len__(self) -> int:
        return len(self._tools)

    def names(self) -> List[str]:
        return list(self._tools.keys())

    def advertised(self, services: ServiceRegistry) -> List[ToolSpec]:
        """Tools whose backend is configured, plus the backend-independent ones."""
        return [t for t in self._tools.values() if t.backend is None or services.is_configured(t.backend)]


def _schema(params: Dict[str, Any], required: Optional[List[str]] = None) -> Dict[str, Any]:
    return {"type": "object", "properties": params, "required": list(required or [])}


_SORT_DIR = {
    "type": "string",
    "enum": ["asc", "desc"],
    "description": "Sort direction: 'asc' (ascending) or 'desc' (descending). Default: 'asc' for dateAdded, 'desc' for sizeOnDisk.",
}
_SERVICE = {"type": "string", "enum": ["radarr", "sonarr"], "description": "Which service"}
_MEDIA_SERVER = {
    "type": "string",
    "enum": ["plex", "emby", "jellyfin", "standard"],
    "description": "Which media server you use",
}


def _days(default: int) -> Dict[str, Any]:
    return {"days": {"type": "number", "description": f"Number of days to look ahead (default: {default})"}}


def _term(what: str) -> Dict[str, Any]:
    return {"term": {"type": "string", "description": f"Search term ({what})"}}


def build_tools_and_registry(services: ServiceRegistry, trash: TrashClient) -> ToolRegistry:
    """Register the full catalog; advertising is filtered per configured backend later."""
    tools = ToolRegistry()

    def fn(
        name: str,
        description: str,
        params: Dict[str, Any],
        impl: ToolCallable,
        *,
        backend: Optional[Backend] = None,
        required: Optional[List[str]] = None,
    ) -> None:
        tools.register(ToolSpec(name, description, _schema(params, required), backend, impl))

    S, R, L, B = Backend.SONARR, Backend.RADARR, Backend.LIDARR, Backend.READARR
    P, T, O = Backend.PROWLARR, Backend.TAUTULLI, Backend.OVERSEERR

    fn("arr_status", status_description(services), {}, make_arr_status(services))

    # Configuration review tools for each library manager
    config_descriptions = {
        "get_quality_profiles": "Get detailed quality profiles from {0}. Shows allowed qualities, upgrade settings, and custom format scores.",
        "get_health": "Get health check warnings and issues from {0}. Shows any problems detected by the application.",
        "get_root_folders": "Get root folders and storage info from {0}. Shows paths, free space, and unmapped folders.",
        "get_download_clients": "Get download client configurations from {0}. Shows configured clients and their settings.",
        "get_naming": "Get file naming configuration from {0}. Shows naming patterns for files and folders.",
        "get_tags": "Get all tags defined in {0}. Tags can be used to organize and filter content.",
        "review_setup": (
            "Get comprehensive configuration review for {0}. Returns all settings for analysis: quality profiles, "
            "download clients, naming, storage, indexers, health warnings, and more."
        ),
    }
    for backend in CONFIG_BACKENDS:
        for suffix, factory in CONFIG_TOOL_FACTORIES.items():
            fn(
                f"{backend.value}_{suffix}",
                config_descriptions[suffix].format(DISPLAY_NAMES[backend]),
                {},
                factory(services, backend),
                backend=backend,
            )

    # Sonarr
    fn("sonarr_get_series",
       "Get all TV series in Sonarr library. Optional sortBy: 'dateAdded' or 'sizeOnDisk'. Optional sortDir: 'asc' or 'desc'. Optional limit: return only the first N items.",
       {
           "sortBy": {"type": "string", "enum": ["dateAdded", "sizeOnDisk"], "description": "Sort by date added or size on disk. Omit for default order."},
           "sortDir": _SORT_DIR,
           "limit": {"type": "number", "description": "Return only the first N series (e.g. 100). Omit for all. Max 1000."},
       },
       make_sonarr_get_series(services), backend=S)
    fn("sonarr_search", "Search for TV series to add to Sonarr", _term("show name"), make_search(services, S), backend=S, required=["term"])
    fn("sonarr_get_queue", "Get Sonarr download queue", {}, make_get_queue(services, S), backend=S)
    fn("sonarr_get_calendar", "Get upcoming TV episodes from Sonarr", _days(7), make_get_calendar(services, S), backend=S)
    fn("sonarr_get_episodes",
       "Get episodes for a TV series. Shows which episodes are available and which are missing.",
       {
           "seriesId": {"type": "number", "description": "Series ID to get episodes for"},
           "seasonNumber": {"type": "number", "description": "Optional: filter to a specific season"},
       },
       make_sonarr_get_episodes(services), backend=S, required=["seriesId"])
    fn("sonarr_search_missing", "Trigger a search for all missing episodes in a series",
       {"seriesId": {"type": "number", "description": "Series ID to search for missing episodes"}},
       make_sonarr_search_missing(services), backend=S, required=["seriesId"])
    fn("sonarr_search_episode", "Trigger a search for specific episode(s)",
       {"episodeIds": {"type": "array", "items": {"type": "number"}, "description": "Episode ID(s) to search for"}},
       make_sonarr_search_episode(services), backend=S, required=["episodeIds"])
    fn("sonarr_delete_series", "Delete a TV series from Sonarr (optionally delete files from disk)",
       {
           "seriesId": {"type": "number", "description": "Series ID to delete"},
           "deleteFiles": {"type": "boolean", "description": "Delete files from disk (default: true)"},
           "addImportListExclusion": {"type": "boolean", "description": "Add to import list exclusion (default: false)"},
       },
       make_sonarr_delete_series(services), backend=S, required=["seriesId"])
    fn("sonarr_delete_season", "Delete all episode files for a specific season of a series",
       {
           "seriesId": {"type": "number", "description": "Series ID"},
           "seasonNumber": {"type": "number", "description": "Season number to delete"},
       },
       make_sonarr_delete_season(services), backend=S, required=["seriesId", "seasonNumber"])
    fn("sonarr_delete_episode_files", "Delete specific episode file(s). Use episodeFileId from sonarr_get_episodes.",
       {"episodeFileIds": {"type": "array", "items": {"type": "number"}, "description": "Episode file ID(s) to delete"}},
       make_sonarr_delete_episode_files(services), backend=S, required=["episodeFileIds"])

    # Radarr
    fn("radarr_get_movies",
       "Get all movies in Radarr library. Optional sortBy: 'dateAdded' or 'sizeOnDisk'. Optional sortDir: 'asc' or 'desc'. Optional limit: return only the first N movies.",
       {
           "sortBy": {"type": "string", "enum": ["dateAdded", "added", "sizeOnDisk"], "description": "Sort by date added or size on disk. Omit for default order."},
           "sortDir": _SORT_DIR,
           "limit": {"type": "number", "description": "Return only the first N movies (e.g. 100). Omit for all. Max 1000."},
       },
       make_radarr_get_movies(services), backend=R)
    fn("radarr_search", "Search for movies to add to Radarr", _term("movie name"), make_search(services, R), backend=R, required=["term"])
    fn("radarr_get_queue", "Get Radarr download queue", {}, make_get_queue(services, R), backend=R)
    fn("radarr_get_calendar", "Get upcoming movie releases from Radarr", _days(30), make_get_calendar(services, R), backend=R)
    fn("radarr_search_movie", "Trigger a search to download a movie that's already in your library",
       {"movieId": {"type": "number", "description": "Movie ID to search for"}},
       make_radarr_search_movie(services), backend=R, required=["movieId"])
    fn("radarr_delete_movie", "Delete a movie from Radarr (optionally delete files from disk)",
       {
           "movieId": {"type": "number", "description": "Movie ID to delete"},
           "deleteFiles": {"type": "boolean", "description": "Delete files from disk (default: true)"},
           "addImportExclusion": {"type": "boolean", "description": "Add to import exclusion (default: false)"},
       },
       make_radarr_delete_movie(services), backend=R, required=["movieId"])

    # Lidarr
    fn("lidarr_get_artists", "Get all artists in Lidarr library", {}, make_lidarr_get_artists(services), backend=L)
    fn("lidarr_search", "Search for artists to add to Lidarr", _term("artist name"), make_search(services, L), backend=L, required=["term"])
    fn("lidarr_get_queue", "Get Lidarr download queue", {}, make_get_queue(services, L), backend=L)
    fn("lidarr_get_albums", "Get albums for an artist in Lidarr. Shows which albums are available and which are missing.",
       {"artistId": {"type": "number", "description": "Artist ID to get albums for"}},
       make_lidarr_get_albums(services), backend=L, required=["artistId"])
    fn("lidarr_search_album", "Trigger a search for a specific album to download",
       {"albumId": {"type": "number", "description": "Album ID to search for"}},
       make_lidarr_search_album(services), backend=L, required=["albumId"])
    fn("lidarr_search_missing", "Trigger a search for all missing albums for an artist",
       {"artistId": {"type": "number", "description": "Artist ID to search missing albums for"}},
       make_lidarr_search_missing(services), backend=L, required=["artistId"])
    fn("lidarr_get_calendar", "Get upcoming album releases from Lidarr", _days(30), make_get_calendar(services, L), backend=L)

    # Readarr
    fn("readarr_get_authors", "Get all authors in Readarr library", {}, make_readarr_get_authors(services), backend=B)
    fn("readarr_search", "Search for authors to add to Readarr", _term("author name"), make_search(services, B), backend=B, required=["term"])
    fn("readarr_get_queue", "Get Readarr download queue", {}, make_get_queue(services, B), backend=B)
    fn("readarr_get_books", "Get books for an author in Readarr. Shows which books are available and which are missing.",
       {"authorId": {"type": "number", "description": "Author ID to get books for"}},
       make_readarr_get_books(services), backend=B, required=["authorId"])
    fn("readarr_search_book", "Trigger a search for a specific book to download",
       {"bookIds": {"type": "array", "items": {"type": "number"}, "description": "Book ID(s) to search for"}},
       make_readarr_search_book(services), backend=B, required=["bookIds"])
    fn("readarr_search_missing", "Trigger a search for all missing books for an author",
       {"authorId": {"type": "number", "description": "Author ID to search missing books for"}},
       make_readarr_search_missing(services), backend=B, required=["authorId"])
    fn("readarr_get_calendar", "Get upcoming book releases from Readarr", _days(30), make_get_calendar(services, B), backend=B)

    # Prowlarr
    fn("prowlarr_get_indexers", "Get all configured indexers in Prowlarr", {}, make_prowlarr_get_indexers(services), backend=P)
    fn("prowlarr_search", "Search across all Prowlarr indexers",
       {"query": {"type": "string", "description": "Search query"}},
       make_prowlarr_search(services), backend=P, required=["query"])
    fn("prowlarr_test_indexers", "Test all indexers and return their health status", {}, make_prowlarr_test_indexers(services), backend=P)
    fn("prowlarr_get_stats", "Get indexer statistics (queries, grabs, failures)", {}, make_prowlarr_get_stats(services), backend=P)

    # Tautulli (Plex monitoring)
    fn("tautulli_get_activity", "Get current Plex activity (now playing) from Tautulli", {},
       make_tautulli_passthrough(services, "get_activity"), backend=T)
    fn("tautulli_get_history",
       "Get Plex watch history from Tautulli. With title: (1) Check if the film/series exists in Plex library "
       "(search, regardless of watch history). (2) Return how many have watched it and who/when. "
       "Without title: return recent history.",
       {
           "title": {"type": "string", "description": "Search by title (e.g. 'Dune: Prophecy'). Response: existsInLibrary, watchedCount, history (who and when)."},
           "user_id": {"type": "number", "description": "Filter by Tautulli user ID"},
           "length": {"type": "number", "description": "Without title: number of history records (default 25). With title: max watch-history rows to return (default 100, max 100)."},
           "media_type": {"type": "string", "description": "movie, episode, track, etc."},
           "order_column": {"type": "string", "description": "Column to sort by"},
           "order_dir": {"type": "string", "enum": ["asc", "desc"], "description": "Sort direction"},
       },
       make_tautulli_get_history(services), backend=T)
    fn("tautulli_get_libraries", "Get Plex libraries from Tautulli", {}, make_tautulli_passthrough(services, "get_libraries"), backend=T)
    fn("tautulli_get_server_info", "Get Plex server info from Tautulli", {}, make_tautulli_passthrough(services, "get_server_info"), backend=T)
    fn("tautulli_get_home_stats", "Get home stats (plays, duration) from Tautulli. Optional: time_range, stats_count",
       {
           "time_range": {"type": "number", "description": "Days to look back"},
           "stats_count": {"type": "number", "description": "Number of top items"},
       },
       make_tautulli_get_home_stats(services), backend=T)
    fn("tautulli_get_users", "Get Plex users from Tautulli", {}, make_tautulli_passthrough(services, "get_users"), backend=T)
    fn("tautulli_get_recently_added", "Get recently added media from Tautulli. Optional: count, section_id",
       {
           "count": {"type": "number", "description": "Number of items"},
           "section_id": {"type": "string", "description": "Library/section ID"},
       },
       make_tautulli_get_recently_added(services), backend=T)
    fn("tautulli_server_status", "Get Tautulli/Plex server status", {}, make_tautulli_passthrough(services, "server_status"), backend=T)
    fn("tautulli_terminate_session", "Terminate a Plex streaming session",
       {
           "session_key": {"type": "string", "description": "Session key from activity"},
           "session_id": {"type": "string", "description": "Session ID from activity"},
       },
       make_tautulli_terminate_session(services), backend=T, required=["session_key", "session_id"])

    # Overseerr (request management)
    fn("overseerr_get_requests",
       "Get media requests from Overseerr. Shows who requested what, status (pending/approved/declined), and media details.",
       {
           "filter": {"type": "string", "enum": ["all", "pending", "approved", "declined", "processing", "available"], "description": "Filter by request status (default: all)"},
           "take": {"type": "number", "description": "Number of requests to return (default: 20, max: 100)"},
           "requestedBy": {"type": "number", "description": "Filter by user ID who made the request"},
       },
       make_overseerr_get_requests(services), backend=O)
    fn("overseerr_get_request_count", "Get request counts by status (pending, approved, declined, etc.)", {},
       make_overseerr_get_request_count(services), backend=O)
    fn("overseerr_get_users", "Get all Overseerr users with their request counts",
       {
           "take": {"type": "number", "description": "Number of users to return (default: 20)"},
           "sort": {"type": "string", "enum": ["displayname", "requestcount", "created"], "description": "Sort by field (default: displayname)"},
       },
       make_overseerr_get_users(services), backend=O)
    fn("overseerr_get_user_requests", "Get all requests made by a specific user",
       {
           "userId": {"type": "number", "description": "User ID to get requests for"},
           "take": {"type": "number", "description": "Number of requests to return (default: 20)"},
       },
       make_overseerr_get_user_requests(services), backend=O, required=["userId"])
    fn("overseerr_approve_request", "Approve a pending media request",
       {"requestId": {"type": "number", "description": "Request ID to approve"}},
       make_overseerr_approve_request(services), backend=O, required=["requestId"])
    fn("overseerr_decline_request", "Decline a pending media request",
       {"requestId": {"type": "number", "description": "Request ID to decline"}},
       make_overseerr_decline_request(services), backend=O, required=["requestId"])
    fn("overseerr_search", "Search for movies and TV shows in Overseerr (uses TMDB)",
       {"query": {"type": "string", "description": "Search term"}},
       make_overseerr_search(services), backend=O, required=["query"])
    fn("overseerr_status", "Get Overseerr server status and version", {}, make_overseerr_status(services), backend=O)

    # Cross-service search
    fn("arr_search_all", "Search across all configured *arr services for any media",
       {"term": {"type": "string", "description": "Search term"}},
       make_arr_search_all(services), required=["term"])

    # TRaSH Guides (no backend needed)
    fn("trash_list_profiles",
       "List available TRaSH Guides quality profiles for Radarr or Sonarr. Shows recommended profiles for different use cases (1080p, 4K, Remux, etc.)",
       {"service": {**_SERVICE, "description": "Which service to get profiles for"}},
       make_trash_list_profiles(trash), required=["service"])
    fn("trash_get_profile",
       "Get a specific TRaSH Guides quality profile with all custom format scores, quality settings, and implementation details",
       {
           "service": _SERVICE,
           "profile": {"type": "string", "description": "Profile name (e.g., 'remux-web-1080p', 'uhd-bluray-web', 'hd-bluray-web')"},
       },
       make_trash_get_profile(trash), required=["service", "profile"])
    fn("trash_list_custom_formats",
       "List available TRaSH Guides custom formats. Can filter by category: " + ", ".join(CUSTOM_FORMAT_CATEGORIES),
       {
           "service": _SERVICE,
           "category": {"type": "string", "description": "Optional filter by category"},
       },
       make_trash_list_custom_formats(trash), required=["service"])
    fn("trash_get_naming",
       "Get TRaSH Guides recommended naming conventions for your media server (Plex, Emby, Jellyfin, or standard)",
       {"service": _SERVICE, "mediaServer": _MEDIA_SERVER},
       make_trash_get_naming(trash), required=["service", "mediaServer"])
    fn("trash_get_quality_sizes",
       "Get TRaSH Guides recommended min/max/preferred sizes for each quality level",
       {
           "service": _SERVICE,
           "type": {"type": "string", "description": "Content type: 'movie', 'anime' for Radarr; 'series', 'anime' for Sonarr"},
       },
       make_trash_get_quality_sizes(trash), required=["service"])
    fn("trash_compare_profile",
       "Compare your quality profile against TRaSH Guides recommendations. Shows missing custom formats, scoring "
       "differences, and quality settings. Requires the corresponding *arr service to be configured.",
       {
           "service": _SERVICE,
           "profileId": {"type": "number", "description": "Your quality profile ID to compare"},
           "trashProfile": {"type": "string", "description": "TRaSH profile name to compare against"},
       },
       make_trash_compare_profile(services, trash), required=["service", "profileId", "trashProfile"])
    fn("trash_compare_naming",
       "Compare your naming configuration against TRaSH Guides recommendations. Requires the corresponding *arr service to be configured.",
       {"service": _SERVICE, "mediaServer": _MEDIA_SERVER},
       make_trash_compare_naming(services, trash), required=["service", "mediaServer"])

    return tools
