"""Climb-count rollups, breadcrumbs and state summaries over the area tree.

The whole tree is loaded once into an in-memory adjacency map so that
rollups and breadcrumb walks cost two queries instead of one per node.
"""
import structlog
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from tufo.db import Area, Climb
from tufo.errors import NotFoundError

log = structlog.get_logger()


@dataclass
class AreaNode:
    """Lightweight view of an area row inside an AreaTree."""
    id: int
    name: str
    parent_id: Optional[int]
    state: Optional[str] = None
    lat: Optional[float] = None
    lng: Optional[float] = None


@dataclass
class StateSummary:
    state: str
    area_count: int
    climb_count: int


@dataclass
class AreaSummary:
    id: int
    name: str
    climb_count: int
    lat: Optional[float] = None
    lng: Optional[float] = None


@dataclass
class AreaDetail:
    area: Area
    sub_areas: list[AreaSummary] = field(default_factory=list)
    climbs: list[Climb] = field(default_factory=list)


class AreaTree:
    """Adjacency map of every area plus direct climb counts."""

    def __init__(self, nodes: list[AreaNode], direct_counts: dict[int, int]):
        self.nodes: dict[int, AreaNode] = {n.id: n for n in nodes}
        self.children: dict[int, list[int]] = defaultdict(list)
        for node in nodes:
            if node.parent_id is not None:
                self.children[node.parent_id].append(node.id)
        self.direct_counts = direct_counts

    @classmethod
    def load(cls, session: Session) -> "AreaTree":
        """Build the tree from one bulk fetch of areas and one grouped climb count."""
        rows = session.query(
            Area.id, Area.name, Area.parent_id, Area.state, Area.lat, Area.lng
        ).all()
        nodes = [
            AreaNode(id=r.id, name=r.name, parent_id=r.parent_id, state=r.state, lat=r.lat, lng=r.lng)
            for r in rows
        ]

        counts = session.query(Climb.area_id, func.count(Climb.id)).group_by(Climb.area_id).all()
        direct_counts = {area_id: count for area_id, count in counts}

        return cls(nodes, direct_counts)

    def has_children(self, area_id: int) -> bool:
        return bool(self.children.get(area_id))

    def total_climb_count(self, area_id: int) -> int:
        """Direct climbs of the area plus those of every descendant.

        Unknown ids count 0. Each node is visited at most once.
        """
        total = 0
        seen = set()
        stack = [area_id]
        while stack:
            current = stack.pop()
            if current in seen:
                continue
            seen.add(current)
            total += self.direct_counts.get(current, 0)
            stack.extend(self.children.get(current, ()))
        return total

    def breadcrumb(self, area_id: int) -> list[str]:
        """Names from the root ancestor down to the area itself."""
        names = []
        seen = set()
        current = self.nodes.get(area_id)

        # Walk up the tree; a missing parent ends the walk
        while current and current.id not in seen:
            seen.add(current.id)
            names.append(current.name)
            if current.parent_id is None:
                break
            current = self.nodes.get(current.parent_id)

        names.reverse()
        return names

    def depth(self, area_id: int) -> int:
        return max(len(self.breadcrumb(area_id)) - 1, 0)


def total_climb_count(session: Session, area_id: int) -> int:
    return AreaTree.load(session).total_climb_count(area_id)


def breadcrumb(session: Session, area_id: int) -> list[str]:
    return AreaTree.load(session).breadcrumb(area_id)


def state_summaries(session: Session, tree: Optional[AreaTree] = None) -> list[StateSummary]:
    """Area and rolled-up climb counts per state, over top-level areas only."""
    tree = tree or AreaTree.load(session)

    grouped: dict[str, list[int]] = defaultdict(list)
    for node in tree.nodes.values():
        if node.parent_id is None and node.state is not None:
            grouped[node.state].append(node.id)

    summaries = [
        StateSummary(
            state=state,
            area_count=len(area_ids),
            climb_count=sum(tree.total_climb_count(area_id) for area_id in area_ids),
        )
        for state, area_ids in grouped.items()
    ]
    summaries.sort(key=lambda s: s.state)
    return summaries


def _summarize(areas: list[Area], tree: AreaTree) -> list[AreaSummary]:
    return [
        AreaSummary(
            id=a.id,
            name=a.name,
            climb_count=tree.total_climb_count(a.id),
            lat=a.lat,
            lng=a.lng,
        )
        for a in areas
    ]


def top_level_areas(session: Session) -> list[AreaSummary]:
    """All areas without a parent, with rolled-up climb counts."""
    tree = AreaTree.load(session)
    areas = session.query(Area).filter(Area.parent_id.is_(None)).order_by(Area.name).all()
    return _summarize(areas, tree)


def areas_in_state(session: Session, state: str) -> list[AreaSummary]:
    """Top-level areas in one state, with rolled-up climb counts."""
    tree = AreaTree.load(session)
    areas = (
        session.query(Area)
        .filter(Area.parent_id.is_(None), Area.state == state)
        .order_by(Area.name)
        .all()
    )
    return _summarize(areas, tree)


def area_detail(session: Session, area_id: int) -> AreaDetail:
    """An area with its direct sub-areas (rolled-up counts) and direct climbs."""
    area = session.query(Area).filter(Area.id == area_id).first()
    if not area:
        raise NotFoundError(f"Area {area_id} not found")

    tree = AreaTree.load(session)
    sub_areas = session.query(Area).filter(Area.parent_id == area_id).order_by(Area.name).all()
    climbs = session.query(Climb).filter(Climb.area_id == area_id).order_by(Climb.name).all()

    return AreaDetail(area=area, sub_areas=_summarize(sub_areas, tree), climbs=climbs)


def search_areas_by_name(session: Session, q: str, limit: int = 20) -> list[Area]:
    """Case-insensitive substring match on area names, any depth."""
    if not q or not q.strip():
        return []

    return (
        session.query(Area)
        .filter(Area.name.icontains(q.strip(), autoescape=True))
        .order_by(Area.id)
        .limit(limit)
        .all()
    )
