import pytest

from tufo.db import ClimbType
from tufo.errors import NotFoundError, ValidationFailure
from tufo.services import catalog, seed_sample
from tufo.db import Area, Climb


def test_create_area_and_child(session):
    parent = catalog.create_area(session, "Barton Creek Greenbelt", state="Texas", lat=30.2, lng=-97.8)
    child = catalog.create_area(session, "Gus Fruh", parent_id=parent.id)

    assert child.parent_id == parent.id
    assert parent.country == "United States"


def test_create_area_validation(session):
    with pytest.raises(ValidationFailure):
        catalog.create_area(session, "  ")
    with pytest.raises(NotFoundError):
        catalog.create_area(session, "Orphan", parent_id=123)
    with pytest.raises(ValidationFailure):
        catalog.create_area(session, "Bad", lat=123.0, lng=0.0)


def test_create_and_get_climb(session, greenbelt):
    climb = catalog.create_climb(session, greenbelt["gus_fruh"].id, "Blackout", type="Trad", yds="5.9")
    catalog.add_note(session, climb.id, "first", user_id="u1")
    catalog.add_note(session, climb.id, "second")

    loaded = catalog.get_climb(session, climb.id)

    assert loaded.type == ClimbType.TRAD
    assert loaded.area.name == "Gus Fruh"
    assert {n.body for n in loaded.notes} == {"first", "second"}
    assert len(catalog.list_climbs(session)) == 2


def test_create_climb_validation(session, greenbelt):
    area_id = greenbelt["gus_fruh"].id
    with pytest.raises(ValidationFailure):
        catalog.create_climb(session, area_id, "")
    with pytest.raises(ValidationFailure):
        catalog.create_climb(session, area_id, "X", type="Aid")
    with pytest.raises(NotFoundError):
        catalog.create_climb(session, 999, "X")

    catalog.create_climb(session, area_id, "Imported", source="OpenBeta", source_id="abc")
    with pytest.raises(ValidationFailure):
        catalog.create_climb(session, area_id, "Imported again", source="OpenBeta", source_id="abc")


def test_get_climb_not_found(session):
    with pytest.raises(NotFoundError):
        catalog.get_climb(session, 1)


def test_add_note_validation(session, greenbelt):
    climb_id = greenbelt["climb"].id
    with pytest.raises(ValidationFailure):
        catalog.add_note(session, climb_id, "   ")
    with pytest.raises(ValidationFailure):
        catalog.add_note(session, climb_id, "x" * 2001)
    with pytest.raises(NotFoundError):
        catalog.add_note(session, 999, "hello")


def test_seed_sample_only_once(session):
    assert seed_sample(session) is True
    assert seed_sample(session) is False
    assert session.query(Area).count() == 1
    assert session.query(Climb).count() == 2
