"""Catalogue entry service"""

from typing import Any, Dict, List, Mapping, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..exceptions import NotFoundError, StoreError
from ..models.entry import Entry
from ..schemas.entry import EntryCreate, EntryFilters
from .log_service import log_service
from .query_builder import (
    build_list_query,
    build_search_query,
    build_stats_query,
    build_toggle_statement,
    build_update_statement,
    encode_json,
)


def build_entry(user_id: int, data: EntryCreate) -> Entry:
    """New Entry row from validated create data"""
    return Entry(
        user_id=user_id,
        tmdb_id=data.tmdb_id,
        title=data.title,
        type=data.type,
        year=data.year,
        genres=encode_json(data.genres),
        tmdb_data=encode_json(data.tmdb_data),
        watched=data.watched,
        user_rating=data.user_rating,
        user_review=data.user_review,
        total_seasons=data.total_seasons,
        total_episodes=data.total_episodes,
        watched_episodes=encode_json(data.watched_episodes),
    )


class EntryService:
    """Owner-scoped reads and writes of catalogue entries"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _execute(self, statement, operation: str):
        try:
            return await self.db.execute(statement)
        except SQLAlchemyError as e:
            log_service.error(f"Store error during {operation}: {e}", exc_info=True)
            raise StoreError(operation) from e

    async def _commit(self, operation: str):
        try:
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            log_service.error(f"Commit failed during {operation}: {e}", exc_info=True)
            raise StoreError(operation) from e

    async def list_entries(
        self, user_id: int, filters: Optional[EntryFilters] = None
    ) -> Tuple[List[Entry], int]:
        """
        Filtered page of the user's entries.

        The count is the number of rows delivered, not the size of the whole
        matching set.
        """
        result = await self._execute(build_list_query(user_id, filters), "list entries")
        entries = list(result.scalars().all())
        return entries, len(entries)

    async def get_entry(self, user_id: int, entry_id: int) -> Entry:
        """Get entry by id; other users' entries are reported as missing"""
        result = await self._execute(
            select(Entry)
            .where(Entry.id == entry_id, Entry.user_id == user_id)
            .execution_options(populate_existing=True),
            "get entry",
        )
        entry = result.scalar_one_or_none()
        if entry is None:
            raise NotFoundError()
        return entry

    async def create_entry(self, user_id: int, data: EntryCreate) -> Entry:
        entry = build_entry(user_id, data)
        self.db.add(entry)
        await self._commit("create entry")

        try:
            await self.db.refresh(entry)
        except SQLAlchemyError as e:
            log_service.error(f"Store error during create entry: {e}", exc_info=True)
            raise StoreError("create entry") from e

        log_service.info(f"Added entry {entry.type}:{entry.id} - {entry.title}")
        return entry

    async def _apply(self, statement, user_id: int, entry_id: int, operation: str) -> Entry:
        """Run an owner-scoped UPDATE and return the row as stored afterwards"""
        result = await self._execute(statement, operation)
        if result.rowcount == 0:
            raise NotFoundError()

        entry = await self.get_entry(user_id, entry_id)
        await self._commit(operation)
        return entry

    async def update_entry(
        self, user_id: int, entry_id: int, changes: Mapping[str, Any]
    ) -> Entry:
        statement = build_update_statement(user_id, entry_id, changes)
        return await self._apply(statement, user_id, entry_id, "update entry")

    async def toggle_watched(self, user_id: int, entry_id: int) -> Entry:
        statement = build_toggle_statement(user_id, entry_id)
        return await self._apply(statement, user_id, entry_id, "toggle watched")

    async def set_episodes(
        self, user_id: int, entry_id: int, episodes: List[str]
    ) -> Entry:
        """Replace the watched episode list wholesale"""
        statement = build_update_statement(
            user_id, entry_id, {"watched_episodes": list(episodes)}
        )
        return await self._apply(statement, user_id, entry_id, "set episodes")

    async def delete_entry(self, user_id: int, entry_id: int) -> Entry:
        entry = await self.get_entry(user_id, entry_id)

        try:
            await self.db.delete(entry)
        except SQLAlchemyError as e:
            log_service.error(f"Store error during delete entry: {e}", exc_info=True)
            raise StoreError("delete entry") from e
        await self._commit("delete entry")

        log_service.info(f"Deleted entry {entry.type}:{entry.id} - {entry.title}")
        return entry

    async def stats(self, user_id: int) -> Dict[str, int]:
        """Totals by kind and watched state, in a single query"""
        result = await self._execute(build_stats_query(user_id), "stats")
        row = result.one()
        return {
            "total": row.total or 0,
            "movie_count": row.movie_count or 0,
            "series_count": row.series_count or 0,
            "watched_count": row.watched_count or 0,
        }

    async def search(self, user_id: int, text: Optional[str]) -> List[Entry]:
        result = await self._execute(build_search_query(user_id, text), "search")
        return list(result.scalars().all())
