"""Batched Firestore writes for one collection at a time.

A collection payload is either a list of objects (document id taken from each
element's ``id`` field, else its index) or an object of objects (document id
taken from the key). Every record goes through ``preprocessing.sanitize``
and is skipped when nothing worth writing is left.

Writes are grouped into Firestore ``WriteBatch`` commits of at most
``MAX_BATCH_OPS`` operations, committed one after another.
"""
from __future__ import annotations

import json
from typing import Any, Dict, List, Mapping, Tuple

from google.cloud.firestore import Client

from preprocessing.sanitize import is_writable, sanitize


# Firestore allows 500 writes per batch; stay below it.
MAX_BATCH_OPS = 450
FIRESTORE_BATCH_HARD_LIMIT = 500


class UnsupportedFormatError(ValueError):
    """Raised when a collection payload is neither a list nor an object."""

    def __init__(self, collection_name: str):
        super().__init__(f"Unsupported JSON format in {collection_name}")
        self.collection_name = collection_name


class BatchedWriter:
    """Accumulates ``set`` operations and commits them in bounded batches."""

    def __init__(self, db: Client, collection_name: str, batch_limit: int = MAX_BATCH_OPS):
        if not isinstance(batch_limit, int) or not 1 <= batch_limit <= FIRESTORE_BATCH_HARD_LIMIT:
            raise ValueError(
                f"batch_limit must be between 1 and {FIRESTORE_BATCH_HARD_LIMIT}, got {batch_limit!r}"
            )
        self._db = db
        self._col_ref = db.collection(collection_name)
        self.collection_name = collection_name
        self.batch_limit = batch_limit
        self._batch = db.batch()
        self.pending = 0
        self.written = 0
        self.commits = 0

    def write(self, doc_id: str, data: Dict[str, Any]) -> None:
        self._batch.set(self._col_ref.document(doc_id), data)
        self.pending += 1
        if self.pending >= self.batch_limit:
            self.flush()

    def flush(self) -> None:
        """Commit pending writes. No-op when nothing is pending."""
        if self.pending == 0:
            return
        self._batch.commit()
        self.written += self.pending
        self.commits += 1
        self._batch = self._db.batch()
        self.pending = 0


def _doc_id(value: Any, index: int) -> str:
    """Stringify an element's ``id``; missing or blank ids fall back to ``index``."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return str(index)
    if isinstance(value, bool):
        # Match the JSON spelling ("true"/"false").
        return json.dumps(value)
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _write_record(writer: BatchedWriter, doc_id: str, record: Any) -> None:
    clean = sanitize(record)
    if is_writable(clean):
        writer.write(doc_id, clean)


def iter_records(collection_name: str, data: Any) -> List[Tuple[str, Mapping[str, Any]]]:
    """Return ``(doc_id, record)`` candidates for a collection payload.

    Raises ``UnsupportedFormatError`` for payloads that are neither a list nor
    a mapping.
    """
    candidates: List[Tuple[str, Mapping[str, Any]]] = []
    if isinstance(data, list):
        for index, item in enumerate(data):
            if not isinstance(item, Mapping):
                continue
            candidates.append((_doc_id(item.get("id"), index), item))
    elif isinstance(data, Mapping):
        for key, value in data.items():
            if not isinstance(key, str) or not key.strip():
                continue
            if not isinstance(value, Mapping):
                continue
            candidates.append((key, value))
    else:
        raise UnsupportedFormatError(collection_name)
    return candidates


def upload_collection(
    db: Client,
    collection_name: str,
    data: Any,
    batch_limit: int = MAX_BATCH_OPS,
) -> int:
    """Write ``data`` into ``collection_name`` and return the number of docs written.

    Records that sanitize to an empty object are skipped silently. A failing
    commit propagates; batches already committed stay committed.
    """
    candidates = iter_records(collection_name, data)

    writer = BatchedWriter(db, collection_name, batch_limit=batch_limit)
    for doc_id, record in candidates:
        _write_record(writer, doc_id, record)
    writer.flush()

    print(f"[collection_writer] Uploaded: {collection_name} ({writer.written} docs)")
    return writer.written
