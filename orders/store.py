"""
Flat-file persistence for purchase orders.

The whole collection lives in one JSON document (default ``data/db.json``):

    {
      "purchaseOrders": [
        {"id": "...", "itemName": "...", "category": "...",
         "quantity": 1, "supplier": "...", "status": "Pending"}
      ]
    }

Every operation reloads the full document, mutates an in-memory copy and
writes the full document back. There is no row-level locking, so two
overlapping load → mutate → save cycles would lose one of the updates.
``RecordStore.transaction()`` closes that window inside one process by
holding a per-file write lock around the cycle; separate processes sharing
the file are still last-writer-wins.

Read failures are fail-open: a missing or unreadable file, or one whose top
level is not a ``{"purchaseOrders": [...]}`` object, loads as an empty
collection. Individual records that fail validation are skipped by reads
but kept in ``Database.invalid_records`` and written back (after the valid
records) on the next save, so one bad record never costs the rest of the
file. Write failures are raised as ``StorageError``.
"""
import json
import logging
import os
import tempfile
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from pydantic import ValidationError as PydanticValidationError

from models.purchase_order import Database, PurchaseOrder
from orders.errors import StorageError

logger = logging.getLogger(__name__)

# {resolved file path: lock} shared by every RecordStore in the process
_WRITE_LOCKS: dict[str, threading.RLock] = {}
_WRITE_LOCKS_GUARD = threading.Lock()


def _lock_for(path: Path) -> threading.RLock:
    key = str(path.resolve())
    with _WRITE_LOCKS_GUARD:
        lock = _WRITE_LOCKS.get(key)
        if lock is None:
            lock = _WRITE_LOCKS[key] = threading.RLock()
        return lock


class DocumentShapeError(ValueError):
    """The document is valid JSON but not a purchase order collection."""


def parse_document(data, source: str = "document") -> Database:
    """
    Build a ``Database`` from decoded JSON, validating records one at a time.

    Raises DocumentShapeError when *data* is not an object or its
    ``purchaseOrders`` entry is not a list.
    """
    if not isinstance(data, dict):
        raise DocumentShapeError(f"expected a JSON object, got {type(data).__name__}")
    records = data.get("purchaseOrders", [])
    if not isinstance(records, list):
        raise DocumentShapeError(f"purchaseOrders must be a list, got {type(records).__name__}")

    db = Database.model_validate(
        {k: v for k, v in data.items() if k not in ("purchaseOrders", "purchase_orders")}
    )
    for index, raw in enumerate(records):
        try:
            db.purchase_orders.append(PurchaseOrder.model_validate(raw))
        except PydanticValidationError as exc:
            logger.warning(
                "Skipping invalid purchase order #%d in %s: %s",
                index, source, "; ".join(e.get("msg", "") for e in exc.errors()),
            )
            db.invalid_records.append(raw)
    return db


class RecordStore:
    """Owns the on-disk document. Only the order service should call ``save``."""

    def __init__(self, db_path: Path, pretty: bool = True) -> None:
        self.db_path = Path(db_path)
        self.pretty = pretty
        self._lock = _lock_for(self.db_path)

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def load(self) -> Database:
        """Read and parse the document, or return an empty one on any failure."""
        try:
            with open(self.db_path, encoding="utf-8") as f:
                data = json.load(f)
            return parse_document(data, source=str(self.db_path))
        except FileNotFoundError:
            logger.debug("Database file not found, starting empty: %s", self.db_path)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError, DocumentShapeError) as exc:
            logger.warning("Failed to load %s, treating as empty: %s", self.db_path, exc)
        return Database()

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    def save(self, db: Database) -> None:
        """
        Overwrite the document with *db*.

        Writes to a temporary file beside the target and renames it into
        place, so a crash mid-write never leaves a truncated document.
        """
        document = db.to_json_dict()
        document["purchaseOrders"].extend(db.invalid_records)
        payload = json.dumps(
            document,
            indent=2 if self.pretty else None,
            ensure_ascii=False,
        )
        tmp_name = None
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.db_path.name}.", suffix=".tmp", dir=self.db_path.parent,
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, self.db_path)
            tmp_name = None
        except OSError as exc:
            logger.error("Failed to write %s: %s", self.db_path, exc)
            raise StorageError(f"Could not write database file {self.db_path}: {exc}") from exc
        finally:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)

        logger.info("Saved %s (%d purchase orders)", self.db_path, len(db.purchase_orders))

    @contextmanager
    def transaction(self) -> Iterator[Database]:
        """
        Hold the write lock for one load → mutate → save cycle.

        Yields the freshly loaded document. The caller mutates it and calls
        ``save`` itself (or not, when nothing changed); the lock is released
        when the block exits, including on error.
        """
        with self._lock:
            yield self.load()

    def exists(self) -> bool:
        return self.db_path.exists()
