"""Library import / export service"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError

from ..config import settings
from ..exceptions import StoreError, ValidationError
from ..models.entry import Entry
from ..schemas.entry import EntryCreate, EntryResponse
from .entry_service import EntryService, build_entry
from .log_service import log_service
from .query_builder import DEFAULT_SORT, SORT_OPTIONS

# Import key fallbacks, first present non-null key wins.
# These names are the export format; do not rename.
FIELD_ALIASES = {
    "tmdb_id": ("tmdb_id",),
    "title": ("title",),
    "type": ("type", "kind"),
    "year": ("year",),
    "genres": ("genres",),
    "tmdb_data": ("tmdb_data",),
    "watched": ("watched",),
    "user_rating": ("userRating", "user_rating"),
    "user_review": ("userReview", "user_review"),
    "total_seasons": ("totalSeasons", "total_seasons"),
    "total_episodes": ("totalEpisodes", "total_episodes"),
    "watched_episodes": ("watchedEpisodes", "watched_episodes"),
}

FIELD_DEFAULTS = {
    "genres": [],
    "tmdb_data": {},
    "watched": False,
    "watched_episodes": [],
}


def _first(record: Mapping[str, Any], keys) -> Any:
    for key in keys:
        value = record.get(key)
        if value is not None:
            return value
    return None


def record_to_create(record: Any) -> EntryCreate:
    """
    Validate one imported record.

    Raises ValueError (pydantic's ValidationError included) for records that
    cannot become an entry.
    """
    if not isinstance(record, Mapping):
        raise ValueError("Import record must be an object")

    data = {}
    for field, keys in FIELD_ALIASES.items():
        value = _first(record, keys)
        if value is None:
            value = FIELD_DEFAULTS.get(field)
        data[field] = value

    return EntryCreate.model_validate(data)


def _record_label(record: Any) -> str:
    if isinstance(record, Mapping):
        return repr(record.get("title"))
    return type(record).__name__


class TransferService(EntryService):
    """Bulk export and full-replace import of a user's entries"""

    async def export_all(self, user_id: int) -> Dict[str, Any]:
        """All of the user's entries, newest first"""
        result = await self._execute(
            select(Entry)
            .where(Entry.user_id == user_id)
            .order_by(*SORT_OPTIONS[DEFAULT_SORT]),
            "export",
        )
        entries = [
            EntryResponse.model_validate(entry).model_dump(mode="json")
            for entry in result.scalars().all()
        ]

        log_service.info(f"Exported {len(entries)} entries for user {user_id}")
        return {
            "version": settings.EXPORT_VERSION,
            "exportDate": datetime.now(timezone.utc).isoformat(),
            "entries": entries,
        }

    async def import_all(self, user_id: int, records: List[Any]) -> Dict[str, Any]:
        """
        Replace all of the user's entries with the given records.

        The delete and every insert share one transaction, so a failure before
        commit leaves the previous entries in place. Each record is inserted
        under its own savepoint; a bad record is logged and skipped.
        """
        if not isinstance(records, list):
            raise ValidationError("Invalid import data")

        imported = 0
        try:
            await self.db.execute(delete(Entry).where(Entry.user_id == user_id))

            for record in records:
                try:
                    data = record_to_create(record)
                except ValueError as e:
                    log_service.error(
                        f"Error importing entry {_record_label(record)}: {e}"
                    )
                    continue

                try:
                    async with self.db.begin_nested():
                        self.db.add(build_entry(user_id, data))
                except (SQLAlchemyError, OverflowError) as e:
                    log_service.error(f"Error importing entry {data.title!r}: {e}")
                    continue

                imported += 1

            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            log_service.error(f"Store error during import: {e}", exc_info=True)
            raise StoreError("import") from e

        log_service.info(
            f"Imported {imported} of {len(records)} entries for user {user_id}"
        )
        return {"message": "Import successful", "imported": imported, "total": len(records)}
