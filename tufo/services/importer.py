"""Reconcile OpenBeta area/climb trees into the local hierarchy.

Areas are resolved by (name, parent, state) and climbs by
(source, source_id), so re-running an import never creates duplicates.
Get-or-create runs without locking: imports assume a single writer.
"""
import threading
import structlog
from dataclasses import dataclass, field, asdict
from typing import Iterable, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from tufo.clients import OpenBetaClient, OpenBetaArea, OpenBetaClimb
from tufo.db import Area, Climb, ClimbType
from .states import US_STATES

log = structlog.get_logger()

SOURCE = "OpenBeta"
DEFAULT_COUNTRY = "United States"


@dataclass
class ImportResult:
    success: bool = True
    message: str = ""
    areas_imported: int = 0
    climbs_imported: int = 0
    climbs_skipped: int = 0
    errors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return asdict(self)


def classify_climb(climb: OpenBetaClimb, include_trad: bool = True) -> Optional[ClimbType]:
    """
    Pick a climb type from the OpenBeta discipline flags.

    Boulder wins over Trad, Trad over Sport. With ``include_trad`` off only
    sport and boulder climbs are accepted; None means skip the climb.
    """
    if climb.bouldering:
        return ClimbType.BOULDER
    if include_trad and climb.trad:
        return ClimbType.TRAD
    if climb.sport:
        return ClimbType.SPORT
    return None


def _is_blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


class OpenBetaImporter:
    """Fetches trees from OpenBeta and upserts them into the store."""

    def __init__(self, session: Session, client: OpenBetaClient):
        self.session = session
        self.client = client

    def import_area_by_name(
        self,
        area_name: str,
        state: Optional[str] = None,
        include_trad: bool = True,
    ) -> ImportResult:
        """
        Import every OpenBeta area matching ``area_name`` with its
        sub-areas, walls and climbs.

        Failures (including exhausted fetch retries) are recorded on the
        result rather than raised.
        """
        result = ImportResult()
        log.info("import_area_starting", name=area_name, state=state, include_trad=include_trad)

        try:
            self._import_tree(area_name, state, include_trad, result)
            self.session.commit()
        except Exception as e:
            self.session.rollback()
            log.error("import_area_failed", name=area_name, error=str(e), error_type=type(e).__name__)
            result.success = False
            result.errors.append(f"Import failed: {e}")
            result.message = f"Import of '{area_name}' failed: {e}"
            return result

        result.message = (
            f"Imported {result.climbs_imported} climbs across {result.areas_imported} areas. "
            f"Skipped {result.climbs_skipped} duplicates."
        )
        log.info("import_area_complete", name=area_name, **result.to_dict())
        return result

    def import_all_states(
        self,
        states: Optional[Iterable[str]] = None,
        include_trad: bool = False,
        cancel_event: Optional[threading.Event] = None,
    ) -> ImportResult:
        """
        Import each US state in turn.

        A failing state is logged into ``errors`` and the batch moves on.
        Area and climb counts are store-wide before/after deltas.
        """
        states = list(states) if states is not None else list(US_STATES)
        result = ImportResult()
        log.info("import_all_states_starting", states=len(states), include_trad=include_trad)

        try:
            areas_before, climbs_before = self._store_counts()
            completed = 0
            cancelled = False

            for state in states:
                if cancel_event is not None and cancel_event.is_set():
                    log.info("import_all_states_cancelled", completed=completed)
                    cancelled = True
                    break

                state_result = ImportResult()
                try:
                    self._import_tree(state, state, include_trad, state_result)
                    self.session.commit()
                except Exception as e:
                    self.session.rollback()
                    log.error("import_state_failed", state=state, error=str(e), error_type=type(e).__name__)
                    result.errors.append(f"{state}: {e}")
                    continue

                completed += 1
                result.climbs_skipped += state_result.climbs_skipped
                log.info("import_state_complete", state=state, **state_result.to_dict())

            areas_after, climbs_after = self._store_counts()
            result.areas_imported = areas_after - areas_before
            result.climbs_imported = climbs_after - climbs_before
            result.message = (
                f"Imported {result.climbs_imported} climbs across {result.areas_imported} areas "
                f"from {completed} of {len(states)} states."
            )
            if cancelled:
                result.message += " Cancelled before completion."

        except Exception as e:
            self.session.rollback()
            log.error("import_all_states_failed", error=str(e), error_type=type(e).__name__)
            result.success = False
            result.message = f"Import failed: {e}"
            result.errors.append(result.message)
            return result

        log.info("import_all_states_complete", **result.to_dict())
        return result

    def _store_counts(self) -> tuple[int, int]:
        areas = self.session.query(func.count(Area.id)).scalar() or 0
        climbs = self.session.query(func.count(Climb.id)).scalar() or 0
        return areas, climbs

    def _import_tree(self, name: str, state: Optional[str], include_trad: bool, result: ImportResult):
        """Fetch one name from OpenBeta and walk every returned tree."""
        areas = self.client.search_areas(name)
        log.info("import_trees_fetched", name=name, count=len(areas))

        for top_level in areas:
            self._walk(top_level, None, state, include_trad, result)

    def _walk(
        self,
        node: OpenBetaArea,
        parent_id: Optional[int],
        state: Optional[str],
        include_trad: bool,
        result: ImportResult,
    ):
        """Depth-first: resolve this area, its climbs, then its children."""
        if _is_blank(node.name):
            return

        area, created = self._get_or_create_area(node, parent_id, state)
        if created:
            result.areas_imported += 1

        log.debug("import_area_resolved", name=area.name, id=area.id, created=created, climbs=len(node.climbs))

        for climb in node.climbs:
            self._upsert_climb(climb, area.id, include_trad, result)

        for child in node.children:
            self._walk(child, area.id, state, include_trad, result)

    def _get_or_create_area(
        self,
        node: OpenBetaArea,
        parent_id: Optional[int],
        state: Optional[str],
    ) -> tuple[Area, bool]:
        query = self.session.query(Area).filter(Area.name == node.name)
        if parent_id is None:
            query = query.filter(Area.parent_id.is_(None))
        else:
            query = query.filter(Area.parent_id == parent_id)
        if state is not None:
            query = query.filter(Area.state == state)

        existing = query.order_by(Area.id).first()
        if existing:
            # Backfill coordinates, never overwrite them
            if existing.lat is None and node.lat is not None:
                existing.lat = node.lat
            if existing.lng is None and node.lng is not None:
                existing.lng = node.lng
            return existing, False

        area = Area(
            name=node.name,
            state=state,
            country=DEFAULT_COUNTRY,
            lat=node.lat,
            lng=node.lng,
            parent_id=parent_id,
        )
        self.session.add(area)
        self.session.flush()
        return area, True

    def _upsert_climb(self, node: OpenBetaClimb, area_id: int, include_trad: bool, result: ImportResult):
        if _is_blank(node.name):
            return

        climb_type = classify_climb(node, include_trad)
        if climb_type is None:
            return

        query = self.session.query(Climb).filter(Climb.source == SOURCE)
        if node.uuid:
            query = query.filter(Climb.source_id == node.uuid)
        else:
            # No external id: match an earlier id-less import by name within the area
            query = query.filter(
                Climb.source_id.is_(None),
                Climb.area_id == area_id,
                Climb.name == node.name,
            )
        existing = query.order_by(Climb.id).first()

        fields = {
            "yds": node.yds,
            "description": node.description,
            "lat": node.lat,
            "lng": node.lng,
            "hero_url": node.media_urls[0] if node.media_urls else None,
            "hero_attribution": SOURCE if node.media_urls else None,
        }

        if existing:
            changed = [
                name for name, value in fields.items()
                if value is not None and _is_blank(getattr(existing, name))
            ]
            for name in changed:
                setattr(existing, name, fields[name])
            if changed:
                self.session.flush()
                log.debug("import_climb_backfilled", source_id=node.uuid, fields=changed)
            result.climbs_skipped += 1
            return

        climb = Climb(
            area_id=area_id,
            name=node.name,
            type=climb_type,
            source=SOURCE,
            source_id=node.uuid or None,
            **fields,
        )
        self.session.add(climb)
        self.session.flush()
        result.climbs_imported += 1
