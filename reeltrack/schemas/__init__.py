"""Pydantic schemas for validation"""

from .auth import Token, UserCreate, UserLogin, UserResponse
from .entry import (
    EntryCreate,
    EntryDeleted,
    EntryFilters,
    EntryList,
    EntryResponse,
    EntrySearchResult,
    EpisodesUpdate,
    StatsResponse,
)
from .transfer import ExportDocument, ImportRequest, ImportResult

__all__ = [
    "Token",
    "UserCreate",
    "UserLogin",
    "UserResponse",
    "EntryCreate",
    "EntryDeleted",
    "EntryFilters",
    "EntryList",
    "EntryResponse",
    "EntrySearchResult",
    "EpisodesUpdate",
    "StatsResponse",
    "ExportDocument",
    "ImportRequest",
    "ImportResult",
]
