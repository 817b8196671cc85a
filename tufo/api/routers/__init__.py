from .areas import router as areas_router
from .climbs import router as climbs_router
from .search import router as search_router
from .imports import router as imports_router
from .seed import router as seed_router

__all__ = ["areas_router", "climbs_router", "search_router", "imports_router", "seed_router"]
