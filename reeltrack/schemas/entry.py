"""Catalogue entry schemas"""

import json
from datetime import datetime
from typing import Annotated, Any, Dict, List, Optional, Union

from pydantic import AliasChoices, BaseModel, Field, field_validator

from ..config import settings

# SQLite INTEGER range
INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

StoredInt = Annotated[int, Field(ge=INT64_MIN, le=INT64_MAX)]


class EntryFilters(BaseModel):
    """Filter, sort and page options for listing entries"""

    type: Optional[str] = None
    watched: Optional[Union[bool, str]] = None
    search: Optional[str] = None
    genre: Optional[str] = None
    sort_by: str = "addedDate"
    limit: int = Field(settings.DEFAULT_PAGE_LIMIT, ge=0, le=INT64_MAX)
    offset: int = Field(0, ge=0, le=INT64_MAX)


class EntryCreate(BaseModel):
    """Schema for adding an entry; accepts camelCase and snake_case keys"""

    tmdb_id: Optional[StoredInt] = None
    title: str = Field(..., min_length=1, max_length=255)
    type: str = Field(
        ...,
        pattern="^(movie|tv|series)$",
        validation_alias=AliasChoices("type", "kind"),
    )
    year: Optional[StoredInt] = None
    genres: List[str] = []
    tmdb_data: Dict[str, Any] = {}
    watched: bool = False
    user_rating: Optional[float] = Field(
        None, validation_alias=AliasChoices("userRating", "user_rating")
    )
    user_review: Optional[str] = Field(
        None, validation_alias=AliasChoices("userReview", "user_review")
    )
    total_seasons: Optional[StoredInt] = Field(
        None, validation_alias=AliasChoices("totalSeasons", "total_seasons")
    )
    total_episodes: Optional[StoredInt] = Field(
        None, validation_alias=AliasChoices("totalEpisodes", "total_episodes")
    )
    watched_episodes: List[str] = Field(
        [], validation_alias=AliasChoices("watchedEpisodes", "watched_episodes")
    )

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Title is required")
        return value

    @field_validator("type")
    @classmethod
    def series_is_tv(cls, value: str) -> str:
        return "tv" if value == "series" else value


class EntryResponse(BaseModel):
    """Entry as stored; also the export record format"""

    id: int
    user_id: int
    tmdb_id: Optional[int] = None
    title: str
    type: str
    year: Optional[int] = None
    genres: List[str] = []
    tmdb_data: Any = None
    watched: bool
    user_rating: Optional[float] = None
    user_review: Optional[str] = None
    total_seasons: Optional[int] = None
    total_episodes: Optional[int] = None
    watched_episodes: List[str] = []
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

    @field_validator("genres", "watched_episodes", mode="before")
    @classmethod
    def decode_list(cls, value):
        if isinstance(value, str):
            value = json.loads(value)
        return value if value is not None else []

    @field_validator("tmdb_data", mode="before")
    @classmethod
    def decode_document(cls, value):
        if isinstance(value, str):
            return json.loads(value)
        return value


class EntryList(BaseModel):
    """One page of entries; total is the size of the delivered page"""

    movies: List[EntryResponse]
    total: int


class EntrySearchResult(BaseModel):
    movies: List[EntryResponse]


class EntryDeleted(BaseModel):
    message: str = "Movie deleted"
    movie: EntryResponse


class EpisodesUpdate(BaseModel):
    """Full replacement of the watched episode list"""

    episodes: List[str]


class StatsResponse(BaseModel):
    """Per-user catalogue counters"""

    total: int
    movie_count: int = Field(..., alias="movieCount")
    series_count: int = Field(..., alias="seriesCount")
    watched_count: int = Field(..., alias="watchedCount")

    class Config:
        populate_by_name = True
