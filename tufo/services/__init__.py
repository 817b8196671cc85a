from .aggregation import (
    AreaTree,
    total_climb_count,
    breadcrumb,
    state_summaries,
    top_level_areas,
    areas_in_state,
    area_detail,
    search_areas_by_name,
)
from .geo import haversine_miles, nearby_areas
from .search import unified_search
from .importer import OpenBetaImporter, ImportResult, classify_climb
from .maintenance import MaintenanceService, MaintenanceResult
from .media import MediaService, FFmpegMediaProcessor
from .seed import seed_sample

__all__ = [
    "AreaTree",
    "total_climb_count",
    "breadcrumb",
    "state_summaries",
    "top_level_areas",
    "areas_in_state",
    "area_detail",
    "search_areas_by_name",
    "haversine_miles",
    "nearby_areas",
    "unified_search",
    "OpenBetaImporter",
    "ImportResult",
    "classify_climb",
    "MaintenanceService",
    "MaintenanceResult",
    "MediaService",
    "FFmpegMediaProcessor",
    "seed_sample",
]
