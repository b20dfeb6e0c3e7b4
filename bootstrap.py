"""
Bootstrap script to ensure the purchase order database file exists and parses.

A missing file is created empty. A file that is not valid JSON, or whose
top level is not a purchase order collection, is moved aside (never
deleted) and replaced with an empty one, so the service starts from a
clean state while the broken content stays recoverable.
Individual invalid records are left alone; the store skips them on read
and keeps them on write.
"""
import json
import logging
from datetime import datetime
from pathlib import Path

from config import Config
from orders.store import DocumentShapeError, parse_document

logger = logging.getLogger(__name__)

EMPTY_DOCUMENT = {"purchaseOrders": []}


def _write_empty(db_path: Path) -> None:
    db_path.parent.mkdir(parents=True, exist_ok=True)
    with open(db_path, "w", encoding="utf-8") as f:
        json.dump(EMPTY_DOCUMENT, f, indent=2)


def ensure_database_file(db_path: Path) -> str:
    """
    Verify *db_path* holds a valid document.

    Returns one of "created", "repaired" or "ok".
    """
    db_path = Path(db_path)
    if not db_path.exists():
        logger.info("[Bootstrap] Creating empty database file: %s", db_path)
        _write_empty(db_path)
        return "created"

    try:
        if db_path.stat().st_size == 0:
            raise ValueError("Empty file")
        with open(db_path, encoding="utf-8") as f:
            parse_document(json.load(f), source=str(db_path))
    except (json.JSONDecodeError, UnicodeDecodeError, ValueError, DocumentShapeError) as exc:
        stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        aside = db_path.with_name(f"{db_path.name}.corrupt-{stamp}")
        logger.warning("[Bootstrap] Invalid database file %s (%s); moved to %s", db_path, exc, aside.name)
        db_path.rename(aside)
        _write_empty(db_path)
        return "repaired"

    return "ok"


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    ensure_database_file(Config().db_path)
