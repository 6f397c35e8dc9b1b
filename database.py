"""
Flat-file JSON storage.

Every collection lives in one human-readable JSON array file that is read
in full and rewritten in full on each mutation. Writes go through a
per-store lock and an atomic file replace so two requests touching the
same file cannot drop each other's updates.
"""

import json
import logging
import os
import tempfile
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, List, Optional

from errors import PersistenceError
from seed import default_admin, default_categories, default_products

logger = logging.getLogger(__name__)

Record = Dict[str, Any]


def _same_id(record: Record, record_id: Any) -> bool:
    return str(record.get("id")) == str(record_id)


class JsonStore:
    def __init__(self, path: Path, seed: Optional[Callable[[], List[Record]]] = None):
        self.path = Path(path)
        self.name = self.path.stem
        self._seed = seed
        self._lock = threading.RLock()

    # Raw file access

    def _read(self) -> List[Record]:
        if not self.path.exists():
            records = self._seed() if self._seed else []
            self._write(records)
            logger.info("Created %s with %d records", self.path, len(records))
            return records
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error("Failed to read %s: %s", self.path, e)
            raise PersistenceError(f"Could not read {self.name} store")
        if not isinstance(data, list):
            raise PersistenceError(f"{self.name} store is not a JSON array")
        return data

    def _write(self, records: List[Record]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.name}-", suffix=".json")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(records, f, indent=2, ensure_ascii=False)
            os.replace(tmp, self.path)
        except OSError as e:
            logger.error("Failed to write %s: %s", self.path, e)
            raise PersistenceError(f"Could not save {self.name} store")

    @contextmanager
    def transaction(self) -> Iterator[List[Record]]:
        """Hold the store lock for a read-modify-write cycle.

        The yielded list is written back when the block exits normally;
        an exception inside the block leaves the file untouched.
        """
        with self._lock:
            records = self._read()
            yield records
            self._write(records)

    # Store interface

    def list(self, **filters: Any) -> List[Record]:
        with self._lock:
            records = self._read()
        if filters:
            records = [r for r in records if all(r.get(k) == v for k, v in filters.items())]
        return records

    def get(self, record_id: Any) -> Optional[Record]:
        return next((r for r in self.list() if _same_id(r, record_id)), None)

    def find_one(self, predicate: Callable[[Record], bool]) -> Optional[Record]:
        return next((r for r in self.list() if predicate(r)), None)

    def put(self, record: Record) -> Record:
        """Insert ``record`` or replace the stored record with the same id."""
        with self.transaction() as records:
            for i, existing in enumerate(records):
                if _same_id(existing, record["id"]):
                    records[i] = record
                    break
            else:
                records.append(record)
        return record

    def update(self, record_id: Any, changes: Record) -> Optional[Record]:
        with self.transaction() as records:
            for record in records:
                if _same_id(record, record_id):
                    record.update(changes)
                    return record
        return None

    def delete(self, record_id: Any) -> bool:
        with self.transaction() as records:
            before = len(records)
            records[:] = [r for r in records if not _same_id(r, record_id)]
            return len(records) != before

    def next_int_id(self) -> int:
        ids = [r["id"] for r in self.list() if isinstance(r.get("id"), int)]
        return max(ids, default=0) + 1


class Database:
    """The four collections of the shop, rooted at one data directory."""

    def __init__(self, data_dir, seed: bool = True):
        self.data_dir = Path(data_dir)
        self.products = JsonStore(self.data_dir / "products.json", default_products if seed else None)
        self.categories = JsonStore(self.data_dir / "categories.json", default_categories if seed else None)
        self.users = JsonStore(self.data_dir / "users.json", (lambda: [default_admin()]) if seed else None)
        self.orders = JsonStore(self.data_dir / "orders.json")

    def list_collection_names(self) -> List[str]:
        return [s.name for s in (self.products, self.categories, self.users, self.orders)]
