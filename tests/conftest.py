"""
Test configuration and fixtures.

Every test gets a fresh in-memory SQLite database.
"""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from tufo.config import Settings, get_settings
from tufo.db import Area, Climb, build_engine, get_db, init_db
from tufo.api.main import create_app

TEST_DATABASE_URL = "sqlite://"


@pytest.fixture
def engine():
    engine = build_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def settings(tmp_path):
    return Settings(
        database_url=TEST_DATABASE_URL,
        upload_dir=str(tmp_path / "uploads"),
        request_delay_seconds=0,
    )


@pytest.fixture
def app(session_factory, settings):
    app = create_app(create_tables=False)

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_settings] = lambda: settings
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def make_area(session):
    def _make_area(name, parent=None, state=None, lat=None, lng=None):
        area = Area(
            name=name,
            state=state if state is not None or parent is None else parent.state,
            lat=lat,
            lng=lng,
            parent_id=parent.id if parent else None,
        )
        session.add(area)
        session.commit()
        return area
    return _make_area


@pytest.fixture
def make_climb(session):
    def _make_climb(area, name, type="Sport", yds=None, **kwargs):
        climb = Climb(area_id=area.id, name=name, type=type, yds=yds, **kwargs)
        session.add(climb)
        session.commit()
        return climb
    return _make_climb


@pytest.fixture
def greenbelt(make_area, make_climb):
    """Barton Creek Greenbelt (TX) -> Gus Fruh -> Black Sabbath (Sport, 5.10a)."""
    root = make_area("Barton Creek Greenbelt", state="Texas", lat=30.2445, lng=-97.8019)
    gus_fruh = make_area("Gus Fruh", parent=root, lat=30.2470, lng=-97.7960)
    climb = make_climb(gus_fruh, "Black Sabbath", type="Sport", yds="5.10a")
    return {"root": root, "gus_fruh": gus_fruh, "climb": climb}
