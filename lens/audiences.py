"""
Audience persistence for Audience Lens.

The whole collection lives in one JSON array under the ``audiences`` key of
a blob store. Every mutation re-reads the collection, modifies it and writes
it back in full, which is fine for one local user and unsafe for several
concurrent writers.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Optional, Protocol

from pydantic import TypeAdapter, ValidationError

from lens.errors import NotFoundError, StorageError
from lens.models import DEFAULT_OWNER, Audience, AudienceFields

logger = logging.getLogger(__name__)

STORAGE_KEY = "audiences"

_collection = TypeAdapter(list[Audience])


class BlobStore(Protocol):
    """The persistence medium: one string value per key."""

    def get(self, key: str) -> Optional[str]: ...
    def set(self, key: str, value: str) -> None: ...
    def remove(self, key: str) -> None: ...


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class AudienceStore:
    """CRUD over the persisted audience collection."""

    def __init__(
        self,
        blob: BlobStore,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.blob = blob
        self.clock = clock

    # ── Reads ──────────────────────────────────────────────────────────────

    def list(self) -> list[Audience]:
        """Return every audience, newest first.

        Never raises: an unreadable medium yields an empty list, and a
        corrupt collection is discarded so later calls start clean.
        """
        try:
            return self._read()
        except StorageError as exc:
            logger.warning("Could not read audiences: %s", exc)
            return []

    def _read(self) -> list[Audience]:
        """Load the collection newest first; StorageError propagates."""
        raw = self.blob.get(STORAGE_KEY)
        if not raw:
            return []

        try:
            audiences = _collection.validate_json(raw)
        except ValidationError as exc:
            logger.warning("Discarding corrupt audience collection: %s", exc)
            try:
                self.blob.remove(STORAGE_KEY)
            except StorageError:
                logger.exception("Could not clear corrupt audience collection")
            return []

        # Stable sort: ties keep stored order, which is newest-prepended.
        return sorted(audiences, key=lambda a: a.created_at, reverse=True)

    def search(self, term: str) -> list[Audience]:
        """Return audiences whose name contains *term* (case-insensitive)."""
        needle = term.strip().lower()
        return [a for a in self.list() if needle in a.name.lower()]

    def get(self, audience_id: str) -> Optional[Audience]:
        """Look up a single audience.

        Returns:
            The Audience, or None if no record has that id.
        """
        for audience in self.list():
            if audience.id == audience_id:
                return audience
        return None

    def require(self, audience_id: str) -> Audience:
        """Like :meth:`get` but raise ``NotFoundError`` when absent."""
        audience = self.get(audience_id)
        if audience is None:
            raise NotFoundError(f"Audience with ID {audience_id} not found.")
        return audience

    # ── Writes ─────────────────────────────────────────────────────────────

    def create(self, fields: AudienceFields) -> Audience:
        """Persist a new audience and return it.

        Args:
            fields: Validated name and descriptive fields.

        Returns:
            The stored Audience with a fresh id and timestamps.

        Raises:
            StorageWriteError: If the medium rejects the write.
        """
        now = self.clock()
        audience = Audience(
            **fields.model_dump(),
            id=uuid.uuid4().hex,
            created_at=now,
            updated_at=now,
            owner=DEFAULT_OWNER,
        )
        self._write([audience, *self._read()])
        logger.info("Created audience id=%s name=%r", audience.id, audience.name)
        return audience

    def update(self, audience_id: str, fields: AudienceFields) -> Audience:
        """Replace the editable fields of an existing audience.

        The id, creation time and owner are preserved; ``updated_at`` is
        refreshed.

        Raises:
            NotFoundError: If no audience has *audience_id*.
            StorageWriteError: If the medium rejects the write.
        """
        audiences = self._read()
        updated: Optional[Audience] = None

        for i, audience in enumerate(audiences):
            if audience.id == audience_id:
                updated = audience.model_copy(
                    update={**fields.model_dump(), "updated_at": self.clock()}
                )
                audiences[i] = updated
                break

        if updated is None:
            raise NotFoundError(f"Audience with ID {audience_id} not found for update.")

        self._write(audiences)
        logger.info("Updated audience id=%s", audience_id)
        return updated

    def delete(self, audience_id: str) -> None:
        """Remove an audience. Deleting an unknown id is a no-op."""
        audiences = self._read()
        remaining = [a for a in audiences if a.id != audience_id]
        self._write(remaining)
        if len(remaining) < len(audiences):
            logger.info("Deleted audience id=%s", audience_id)

    def _write(self, audiences: list[Audience]) -> None:
        self.blob.set(STORAGE_KEY, _collection.dump_json(audiences).decode())
