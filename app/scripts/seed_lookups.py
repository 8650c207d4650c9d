"""
Insert the game servers and top-level listing categories if they are missing.
Idempotent; run after migrations:
  python -m app.scripts.seed_lookups
"""
import logging
import sys

from sqlalchemy.orm import Session

from app.core.config import get_settings
from app.core.database import SessionLocal
from app.core.logging import configure_logging
from app.models import Category, Server

logger = logging.getLogger(__name__)

SERVERS: tuple[dict[str, str], ...] = (
    {"name": "arbat", "display_name": "Arbat"},
    {"name": "patriki", "display_name": "Patriki"},
    {"name": "rublevka", "display_name": "Rublevka"},
    {"name": "tverskoy", "display_name": "Tverskoy"},
)

CATEGORIES: tuple[dict[str, str], ...] = (
    {"name": "cars", "display_name": "Cars", "icon": "fas fa-car", "color": "blue"},
    {"name": "realestate", "display_name": "Real estate", "icon": "fas fa-home", "color": "green"},
    {"name": "fish", "display_name": "Fish", "icon": "fas fa-fish", "color": "cyan"},
    {"name": "treasures", "display_name": "Treasures", "icon": "fas fa-gem", "color": "purple"},
)


def seed_lookups(db: Session) -> tuple[int, int]:
    """Add missing servers and top-level categories by name. Returns (servers_added, categories_added)."""
    existing_servers = {name for (name,) in db.query(Server.name)}
    servers_added = 0
    for data in SERVERS:
        if data["name"] not in existing_servers:
            db.add(Server(**data))
            servers_added += 1

    existing_categories = {
        name for (name,) in db.query(Category.name).filter(Category.parent_id.is_(None))
    }
    categories_added = 0
    for data in CATEGORIES:
        if data["name"] not in existing_categories:
            db.add(Category(**data))
            categories_added += 1

    db.commit()
    return servers_added, categories_added


def main() -> int:
    configure_logging(get_settings().LOG_LEVEL)
    db = SessionLocal()
    try:
        servers_added, categories_added = seed_lookups(db)
        logger.info(
            "Lookup seeding completed: servers_added=%s, categories_added=%s",
            servers_added,
            categories_added,
        )
        return 0
    except Exception as e:
        logger.exception("Lookup seeding failed: %s", e)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
