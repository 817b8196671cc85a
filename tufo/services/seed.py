"""Sample data for a fresh database."""
import structlog
from sqlalchemy.orm import Session

from tufo.db import Area, Climb, ClimbType

log = structlog.get_logger()


def seed_sample(session: Session) -> bool:
    """Insert one sample area with two climbs. Returns False if the store is not empty."""
    if session.query(Area.id).first() is not None:
        log.info("seed_skipped", reason="already seeded")
        return False

    area = Area(
        name="Lake Mineral Wells State Park",
        state="Texas",
        country="United States",
        lat=32.8134,
        lng=-98.0588,
    )
    session.add(area)
    session.add_all([
        Climb(
            area=area,
            name="Black Sabbath",
            type=ClimbType.SPORT,
            yds="5.10a",
            description="Face climbing on edges; good intro to the style.",
            hero_url="/uploads/sample_black_sabbath_overhead.jpg",
            hero_attribution="Photo © Tufo Sample",
            source="Sample",
        ),
        Climb(
            area=area,
            name="Bird Dog",
            type=ClimbType.SPORT,
            yds="5.8",
            description="Friendly warm-up with a mellow crux midway.",
            hero_url="/uploads/sample_birddog_overhead.jpg",
            hero_attribution="Photo © Tufo Sample",
            source="Sample",
        ),
    ])
    session.commit()

    log.info("seeded_sample", area=area.name, climbs=2)
    return True
