"""Statement builders for catalogue entries

Every statement produced here is scoped to one owner. Caller values only ever
reach the database as bound parameters; column names and ORDER BY clauses come
from the fixed tables below.
"""

import json
from typing import Annotated, Any, Dict, List, Mapping, Optional, Union

from pydantic import Field, StrictBool, StrictFloat, StrictInt, StrictStr, TypeAdapter
from pydantic import ValidationError as SchemaError
from sqlalchemy import Select, Update, case, func, not_, select, update

from ..config import settings
from ..exceptions import ValidationError
from ..models.entry import Entry
from ..schemas.entry import INT64_MAX, INT64_MIN, EntryFilters

ALL = "all"
KINDS = ("movie", "tv")
KIND_ALIASES = {"series": "tv"}

DEFAULT_SORT = "addedDate"
SORT_OPTIONS = {
    "addedDate": (Entry.created_at.desc(), Entry.id.desc()),
    "title": (Entry.title.asc(), Entry.id.asc()),
    "titleDesc": (Entry.title.desc(), Entry.id.desc()),
    "year": (Entry.year.desc(), Entry.id.desc()),
    "yearOld": (Entry.year.asc(), Entry.id.asc()),
    "rating": (Entry.user_rating.desc().nulls_last(), Entry.id.desc()),
}

# Accepted update keys -> column. camelCase spellings match the import format.
MUTABLE_FIELDS = {
    "tmdb_id": "tmdb_id",
    "title": "title",
    "type": "type",
    "year": "year",
    "genres": "genres",
    "tmdb_data": "tmdb_data",
    "watched": "watched",
    "user_rating": "user_rating",
    "userRating": "user_rating",
    "user_review": "user_review",
    "userReview": "user_review",
    "total_seasons": "total_seasons",
    "totalSeasons": "total_seasons",
    "total_episodes": "total_episodes",
    "totalEpisodes": "total_episodes",
    "watched_episodes": "watched_episodes",
    "watchedEpisodes": "watched_episodes",
}

_BoundedInt = Annotated[StrictInt, Field(ge=INT64_MIN, le=INT64_MAX)]
_Integer = TypeAdapter(_BoundedInt)
_StringList = TypeAdapter(List[StrictStr])

# Strict: "2021" is not a year and true is not a count
COLUMN_TYPES = {
    "tmdb_id": _Integer,
    "title": TypeAdapter(Annotated[StrictStr, Field(max_length=255)]),
    "type": TypeAdapter(StrictStr),
    "year": _Integer,
    "genres": _StringList,
    "tmdb_data": TypeAdapter(Dict[StrictStr, Any]),
    "watched": TypeAdapter(StrictBool),
    "user_rating": TypeAdapter(Union[_BoundedInt, StrictFloat]),
    "user_review": TypeAdapter(StrictStr),
    "total_seasons": _Integer,
    "total_episodes": _Integer,
    "watched_episodes": _StringList,
}
REQUIRED_COLUMNS = {"title", "type", "watched", "genres", "tmdb_data", "watched_episodes"}


def encode_json(value: Any) -> str:
    """Canonical text encoding for structured columns"""
    return json.dumps(value, sort_keys=True, ensure_ascii=False)


def normalize_kind(value: str) -> str:
    return KIND_ALIASES.get(value, value)


def parse_watched(value: Union[bool, str]) -> bool:
    """Watched filter value: true/"true"/"watched" mean watched, anything else not"""
    if isinstance(value, bool):
        return value
    return value.lower() in ("true", "watched")


def build_list_query(user_id: int, filters: Optional[EntryFilters] = None) -> Select:
    """Filtered, sorted and paginated entry listing for one owner"""
    filters = filters or EntryFilters()
    query = select(Entry).where(Entry.user_id == user_id)

    if filters.type and filters.type != ALL:
        query = query.where(Entry.type == normalize_kind(filters.type))

    if filters.watched is not None and filters.watched != ALL:
        query = query.where(Entry.watched == parse_watched(filters.watched))

    if filters.search:
        query = query.where(Entry.title.icontains(filters.search, autoescape=True))

    # Loose match against the serialized list, "Action" hits "Action-Adventure"
    if filters.genre and filters.genre != ALL:
        query = query.where(Entry.genres.icontains(filters.genre, autoescape=True))

    order = SORT_OPTIONS.get(filters.sort_by, SORT_OPTIONS[DEFAULT_SORT])
    return query.order_by(*order).limit(filters.limit).offset(filters.offset)


def build_search_query(
    user_id: int, text: Optional[str], limit: int = settings.SEARCH_LIMIT
) -> Select:
    """Case-insensitive title search, newest first"""
    if not text or not text.strip():
        raise ValidationError("Search query required")

    return (
        select(Entry)
        .where(Entry.user_id == user_id, Entry.title.icontains(text, autoescape=True))
        .order_by(*SORT_OPTIONS[DEFAULT_SORT])
        .limit(limit)
    )


def _count_where(condition):
    return func.sum(case((condition, 1), else_=0))


def build_stats_query(user_id: int) -> Select:
    """Totals in one pass; the sums are NULL when the owner has no rows"""
    return select(
        func.count().label("total"),
        _count_where(Entry.type == "movie").label("movie_count"),
        _count_where(Entry.type == "tv").label("series_count"),
        _count_where(Entry.watched.is_(True)).label("watched_count"),
    ).where(Entry.user_id == user_id)


def _bind_value(column: str, value: Any) -> Any:
    """Check a single assignment and convert it to its stored form"""
    if value is None:
        if column in REQUIRED_COLUMNS:
            raise ValidationError(f"Field '{column}' cannot be null")
        return None

    try:
        value = COLUMN_TYPES[column].validate_python(value)
    except SchemaError as e:
        raise ValidationError(f"Invalid value for field '{column}'") from e

    if column == "title" and not value.strip():
        raise ValidationError("Title is required")

    if column == "type":
        value = normalize_kind(value)
        if value not in KINDS:
            raise ValidationError(f"Invalid type '{value}'")

    if isinstance(value, (dict, list)):
        return encode_json(value)
    return value


def build_update_statement(
    user_id: int, entry_id: int, changes: Mapping[str, Any]
) -> Update:
    """
    Partial update of one owned entry.

    Keys must come from MUTABLE_FIELDS; id, owner and timestamps are never
    assignable. updated_at is always refreshed.
    """
    if not changes:
        raise ValidationError("No updates provided")

    values: Dict[str, Any] = {}
    for key, value in changes.items():
        column = MUTABLE_FIELDS.get(key)
        if column is None:
            raise ValidationError(f"Field '{key}' cannot be updated")
        values[column] = _bind_value(column, value)

    values["updated_at"] = func.now()

    return (
        update(Entry)
        .where(Entry.id == entry_id, Entry.user_id == user_id)
        .values(**values)
        .execution_options(synchronize_session=False)
    )


def build_toggle_statement(user_id: int, entry_id: int) -> Update:
    return (
        update(Entry)
        .where(Entry.id == entry_id, Entry.user_id == user_id)
        .values(watched=not_(Entry.watched), updated_at=func.now())
        .execution_options(synchronize_session=False)
    )
