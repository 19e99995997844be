"""Catalogue entry API routes"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Path, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ..api.auth import get_current_user
from ..config import settings
from ..database import get_db
from ..exceptions import NotFoundError, ValidationError
from ..models.user import User
from ..schemas.entry import (
    INT64_MAX,
    EntryCreate,
    EntryDeleted,
    EntryFilters,
    EntryList,
    EntryResponse,
    EntrySearchResult,
    EpisodesUpdate,
    StatsResponse,
)
from ..schemas.transfer import ExportDocument, ImportRequest, ImportResult
from ..services.entry_service import EntryService
from ..services.transfer_service import TransferService

router = APIRouter(prefix="/api/movies", tags=["movies"])


@router.get("", response_model=EntryList)
async def list_entries(
    type: Optional[str] = Query(None),
    watched: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    genre: Optional[str] = Query(None),
    sort_by: str = Query("addedDate", alias="sortBy"),
    limit: int = Query(settings.DEFAULT_PAGE_LIMIT, ge=0, le=INT64_MAX),
    offset: int = Query(0, ge=0, le=INT64_MAX),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    List entries with filters, sorting and pagination.
    total is the number of entries in this page.
    """
    filters = EntryFilters(
        type=type,
        watched=watched,
        search=search,
        genre=genre,
        sort_by=sort_by,
        limit=limit,
        offset=offset,
    )
    entries, count = await EntryService(db).list_entries(current_user.id, filters)
    return EntryList(movies=entries, total=count)


@router.get("/stats", response_model=StatsResponse)
async def get_stats(
    db: AsyncSession = Depends(get_db), current_user: User = Depends(get_current_user)
):
    """Entry counts by type and watched state"""
    stats = await EntryService(db).stats(current_user.id)
    return StatsResponse(**stats)


@router.get("/search", response_model=EntrySearchResult)
async def search_entries(
    q: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Title search, newest first, at most SEARCH_LIMIT results"""
    try:
        entries = await EntryService(db).search(current_user.id, q)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return EntrySearchResult(movies=entries)


@router.get("/export", response_model=ExportDocument)
async def export_entries(
    db: AsyncSession = Depends(get_db), current_user: User = Depends(get_current_user)
):
    """Export all entries as a versioned document"""
    return await TransferService(db).export_all(current_user.id)


@router.post("/import", response_model=ImportResult)
async def import_entries(
    data: ImportRequest,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Replace all entries with the imported ones.
    Records that cannot be imported are skipped and only show up in the counts.
    """
    try:
        return await TransferService(db).import_all(current_user.id, data.entries)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/{entry_id}", response_model=EntryResponse)
async def get_entry(
    entry_id: int = Path(..., le=INT64_MAX),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Get specific entry"""
    try:
        return await EntryService(db).get_entry(current_user.id, entry_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("", response_model=EntryResponse, status_code=201)
async def add_entry(
    entry_data: EntryCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Add entry to the catalogue"""
    return await EntryService(db).create_entry(current_user.id, entry_data)


@router.put("/{entry_id}", response_model=EntryResponse)
async def update_entry(
    entry_id: int = Path(..., le=INT64_MAX),
    changes: Dict[str, Any] = Body(...),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Update any subset of the mutable entry fields"""
    try:
        return await EntryService(db).update_entry(current_user.id, entry_id, changes)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/{entry_id}", response_model=EntryDeleted)
async def delete_entry(
    entry_id: int = Path(..., le=INT64_MAX),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Remove entry from the catalogue"""
    try:
        entry = await EntryService(db).delete_entry(current_user.id, entry_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return EntryDeleted(movie=entry)


@router.post("/{entry_id}/toggle-watched", response_model=EntryResponse)
async def toggle_watched(
    entry_id: int = Path(..., le=INT64_MAX),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Flip watched status"""
    try:
        return await EntryService(db).toggle_watched(current_user.id, entry_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.put("/{entry_id}/episodes", response_model=EntryResponse)
async def update_episodes(
    entry_id: int = Path(..., le=INT64_MAX),
    data: EpisodesUpdate = Body(...),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Replace the list of watched episodes"""
    try:
        return await EntryService(db).set_episodes(
            current_user.id, entry_id, data.episodes
        )
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
