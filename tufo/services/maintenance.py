"""Bulk maintenance: state-name cleanup, subtree deletion and full reset."""
import structlog
from dataclasses import dataclass, asdict

from sqlalchemy.orm import Session

from tufo.db import Area, Climb, Media, RouteNote
from tufo.errors import NotFoundError
from .states import STATE_CODES

log = structlog.get_logger()


@dataclass
class MaintenanceResult:
    success: bool = True
    message: str = ""
    areas_changed: int = 0
    areas_deleted: int = 0
    climbs_deleted: int = 0

    def to_dict(self) -> dict:
        return asdict(self)


class MaintenanceService:
    """Destructive or bulk operations over the whole store."""

    def __init__(self, session: Session):
        self.session = session

    def normalize_state_names(self) -> MaintenanceResult:
        """Rewrite two-letter state codes (TX) to full names (Texas)."""
        changed = 0
        try:
            for code, name in STATE_CODES.items():
                changed += (
                    self.session.query(Area)
                    .filter(Area.state == code)
                    .update({Area.state: name}, synchronize_session=False)
                )
            self.session.commit()
        except Exception as e:
            self.session.rollback()
            log.error("state_normalize_failed", error=str(e), error_type=type(e).__name__)
            return MaintenanceResult(success=False, message=f"State fix failed: {e}")
        finally:
            self.session.expire_all()

        log.info("state_names_normalized", changed=changed)
        return MaintenanceResult(
            message=f"Fixed {changed} areas",
            areas_changed=changed,
        )

    def delete_area_by_name(self, name: str) -> MaintenanceResult:
        """
        Delete a top-level area, every descendant and all their climbs.

        Raises:
            NotFoundError: no top-level area has that name
        """
        root = (
            self.session.query(Area)
            .filter(Area.name == name, Area.parent_id.is_(None))
            .order_by(Area.id)
            .first()
        )
        if not root:
            raise NotFoundError(f"Area '{name}' not found")

        # Post-order: every child id comes before its parent
        order = self._post_order(root.id)

        try:
            climb_ids = [
                row.id for row in self.session.query(Climb.id).filter(Climb.area_id.in_(order)).all()
            ]
            climbs_deleted = self._delete_climbs(climb_ids)

            for area_id in order:
                self.session.query(Area).filter(Area.id == area_id).delete(synchronize_session=False)

            self.session.commit()
        except Exception as e:
            self.session.rollback()
            log.error("area_delete_failed", name=name, error=str(e), error_type=type(e).__name__)
            return MaintenanceResult(success=False, message=f"Delete failed: {e}")
        finally:
            self.session.expire_all()

        log.info("area_deleted", name=name, areas=len(order), climbs=climbs_deleted)
        return MaintenanceResult(
            message=f"Deleted area '{name}' and all its children",
            areas_deleted=len(order),
            climbs_deleted=climbs_deleted,
        )

    def reset_all(self) -> MaintenanceResult:
        """Delete every climb and area. Failures are reported, not raised."""
        try:
            self.session.query(RouteNote).delete(synchronize_session=False)
            self.session.query(Media).delete(synchronize_session=False)
            climbs_deleted = self.session.query(Climb).delete(synchronize_session=False)

            # Detach the tree first so row-by-row FK checks never see an orphan
            self.session.query(Area).update({Area.parent_id: None}, synchronize_session=False)
            areas_deleted = self.session.query(Area).delete(synchronize_session=False)

            self.session.commit()
        except Exception as e:
            self.session.rollback()
            log.error("reset_failed", error=str(e), error_type=type(e).__name__)
            return MaintenanceResult(success=False, message=f"Reset failed: {e}")
        finally:
            self.session.expire_all()

        log.info("database_reset", climbs=climbs_deleted, areas=areas_deleted)
        return MaintenanceResult(
            message=f"Database reset complete. Deleted {climbs_deleted} climbs and {areas_deleted} areas.",
            areas_deleted=areas_deleted,
            climbs_deleted=climbs_deleted,
        )

    def _post_order(self, root_id: int) -> list[int]:
        """Iterative post-order walk of the subtree under ``root_id``."""
        rows = self.session.query(Area.id, Area.parent_id).all()
        children: dict[int, list[int]] = {}
        for area_id, parent_id in rows:
            if parent_id is not None:
                children.setdefault(parent_id, []).append(area_id)

        order = []
        seen = set()
        stack = [(root_id, False)]
        while stack:
            area_id, expanded = stack.pop()
            if expanded:
                order.append(area_id)
                continue
            if area_id in seen:
                continue
            seen.add(area_id)
            stack.append((area_id, True))
            for child_id in children.get(area_id, ()):
                stack.append((child_id, False))
        return order

    def _delete_climbs(self, climb_ids: list[int]) -> int:
        if not climb_ids:
            return 0
        self.session.query(RouteNote).filter(RouteNote.climb_id.in_(climb_ids)).delete(synchronize_session=False)
        self.session.query(Media).filter(Media.climb_id.in_(climb_ids)).delete(synchronize_session=False)
        return self.session.query(Climb).filter(Climb.id.in_(climb_ids)).delete(synchronize_session=False)
