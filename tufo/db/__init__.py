from .database import Base, get_engine, get_session, get_db, session_scope, init_db, build_engine
from .models import Area, Climb, Media, RouteNote, ClimbType, MediaType

__all__ = [
    "Base",
    "get_engine",
    "get_session",
    "get_db",
    "session_scope",
    "init_db",
    "build_engine",
    "Area",
    "Climb",
    "Media",
    "RouteNote",
    "ClimbType",
    "MediaType",
]
