from tufo.db import Area
from tufo.services.aggregation import (
    AreaNode,
    AreaTree,
    area_detail,
    areas_in_state,
    breadcrumb,
    search_areas_by_name,
    state_summaries,
    top_level_areas,
    total_climb_count,
)
from tufo.errors import NotFoundError

import pytest


def test_example_greenbelt_rollup_and_breadcrumb(session, greenbelt):
    assert total_climb_count(session, greenbelt["root"].id) == 1
    assert breadcrumb(session, greenbelt["gus_fruh"].id) == ["Barton Creek Greenbelt", "Gus Fruh"]


def test_total_is_direct_plus_children(session, make_area, make_climb):
    root = make_area("Root", state="Texas")
    c1 = make_area("C1", parent=root)
    c2 = make_area("C2", parent=root)
    wall = make_area("Wall", parent=c1)
    make_climb(root, "On root")
    make_climb(c1, "On C1")
    make_climb(wall, "Wall 1")
    make_climb(wall, "Wall 2")

    tree = AreaTree.load(session)
    assert tree.total_climb_count(wall.id) == 2
    assert tree.total_climb_count(c1.id) == 3
    assert tree.total_climb_count(c2.id) == 0
    assert tree.total_climb_count(root.id) == (
        1 + tree.total_climb_count(c1.id) + tree.total_climb_count(c2.id)
    )


def test_unknown_area_counts_zero(session, greenbelt):
    assert total_climb_count(session, 99999) == 0
    assert breadcrumb(session, 99999) == []


def test_breadcrumb_length_is_depth_plus_one(session, make_area):
    state = make_area("Texas Root", state="Texas")
    area = make_area("Area", parent=state)
    sub = make_area("Sub", parent=area)
    wall = make_area("Wall", parent=sub)

    tree = AreaTree.load(session)
    path = tree.breadcrumb(wall.id)
    assert path == ["Texas Root", "Area", "Sub", "Wall"]
    assert len(path) == tree.depth(wall.id) + 1


def test_breadcrumb_stops_at_missing_parent():
    tree = AreaTree(
        [AreaNode(id=2, name="Orphan", parent_id=1), AreaNode(id=3, name="Leaf", parent_id=2)],
        {},
    )
    assert tree.breadcrumb(3) == ["Orphan", "Leaf"]


def test_cyclic_data_terminates():
    tree = AreaTree(
        [AreaNode(id=1, name="A", parent_id=2), AreaNode(id=2, name="B", parent_id=1)],
        {1: 2, 2: 3},
    )
    assert tree.total_climb_count(1) == 5
    assert tree.breadcrumb(1) == ["B", "A"]


def test_state_summaries_group_top_level_areas(session, make_area, make_climb):
    bcg = make_area("Barton Creek Greenbelt", state="Texas")
    gus = make_area("Gus Fruh", parent=bcg)
    make_climb(gus, "Black Sabbath")
    enchanted = make_area("Enchanted Rock", state="Texas")
    make_climb(enchanted, "Fat Man's Misery")
    make_climb(enchanted, "Orange Sunshine")
    make_area("Red Rocks", state="Nevada")
    make_area("No State Area")

    summaries = state_summaries(session)

    assert [s.state for s in summaries] == ["Nevada", "Texas"]
    texas = summaries[1]
    assert texas.area_count == 2
    assert texas.climb_count == 3
    assert summaries[0].climb_count == 0


def test_top_level_and_in_state(session, greenbelt, make_area):
    make_area("Red Rocks", state="Nevada")

    names = [a.name for a in top_level_areas(session)]
    assert names == ["Barton Creek Greenbelt", "Red Rocks"]

    texas = areas_in_state(session, "Texas")
    assert len(texas) == 1
    assert texas[0].climb_count == 1


def test_area_detail(session, greenbelt):
    detail = area_detail(session, greenbelt["root"].id)

    assert detail.area.name == "Barton Creek Greenbelt"
    assert [(s.name, s.climb_count) for s in detail.sub_areas] == [("Gus Fruh", 1)]
    assert detail.climbs == []


def test_area_detail_not_found(session):
    with pytest.raises(NotFoundError):
        area_detail(session, 42)


def test_search_areas_by_name(session, greenbelt):
    assert [a.name for a in search_areas_by_name(session, "GUS")] == ["Gus Fruh"]
    assert search_areas_by_name(session, "   ") == []
    assert session.query(Area).count() == 2


def test_search_areas_by_name_escapes_wildcards(session, greenbelt, make_area):
    make_area("50% Slab", state="Texas")

    assert [a.name for a in search_areas_by_name(session, "%")] == ["50% Slab"]
    assert search_areas_by_name(session, "_") == []
