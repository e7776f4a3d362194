"""
API routes for the user's library: preferences, notes history and collections.
"""

from typing import List
from fastapi import APIRouter, Depends, HTTPException, Path

from notetube.api.dependencies import get_current_user_id
from notetube.api.schemas import (
    AddToCollectionRequest,
    CollectionCreate,
    CollectionItemResponse,
    CollectionResponse,
    MessageResponse,
    NoteResponse,
    PreferencesUpdate,
    SuccessResponse,
)
from notetube.db import crud
from notetube.db.database import DBSession, get_db
from notetube.db.models import Collection
from notetube.models.schemas import UserPreferences
from notetube.utils.logger import logging

router = APIRouter(prefix="/api/v1", tags=["library"])


def _collection_response(collection: Collection, include_notes: bool = False) -> CollectionResponse:
    items = [
        CollectionItemResponse(
            id=item.id,
            note_id=item.note_id,
            video_id=item.note.video_id,
            title=item.note.title,
            thumbnail=item.note.thumbnail,
            notes=item.note.notes if include_notes else None,
            added_at=item.added_at,
        )
        for item in collection.items
        if item.note is not None
    ]
    return CollectionResponse(
        id=collection.id,
        name=collection.name,
        description=collection.description,
        created_at=collection.created_at,
        items=items,
    )


@router.get("/preferences", response_model=UserPreferences)
async def get_preferences(user_id: int = Depends(get_current_user_id), db: DBSession = Depends(get_db)):
    row = crud.get_preferences(db, user_id)
    return UserPreferences.model_validate(row) if row else UserPreferences()


@router.put("/preferences", response_model=UserPreferences)
async def update_preferences(
    update: PreferencesUpdate,
    user_id: int = Depends(get_current_user_id),
    db: DBSession = Depends(get_db),
):
    """Update tone, detail level and language of AI output."""
    row = crud.upsert_preferences(db, user_id, **update.model_dump())
    logging.info(f"Updated preferences for user {user_id}")
    return UserPreferences.model_validate(row)


@router.get("/history", response_model=List[NoteResponse])
async def get_history(user_id: int = Depends(get_current_user_id), db: DBSession = Depends(get_db)):
    """Get the user's most recent notes."""
    return crud.get_history(db, user_id)


@router.delete("/history", response_model=MessageResponse)
async def clear_history(user_id: int = Depends(get_current_user_id), db: DBSession = Depends(get_db)):
    crud.clear_history(db, user_id)
    return MessageResponse(message="History cleared successfully")


@router.delete("/history/{note_id}", response_model=MessageResponse)
async def delete_note(
    note_id: int = Path(..., description="Note ID"),
    user_id: int = Depends(get_current_user_id),
    db: DBSession = Depends(get_db),
):
    if not crud.delete_note(db, user_id, note_id):
        raise HTTPException(status_code=404, detail="Note not found")
    return MessageResponse(message="Note deleted successfully")


@router.post("/collections", response_model=CollectionResponse)
async def create_collection(
    body: CollectionCreate,
    user_id: int = Depends(get_current_user_id),
    db: DBSession = Depends(get_db),
):
    collection = crud.create_collection(db, user_id, body.name, body.description)
    return _collection_response(collection)


@router.get("/collections", response_model=List[CollectionResponse])
async def list_collections(user_id: int = Depends(get_current_user_id), db: DBSession = Depends(get_db)):
    """List collections with their items, without note bodies."""
    return [_collection_response(c) for c in crud.list_collections(db, user_id)]


@router.get("/collections/{collection_id}", response_model=CollectionResponse)
async def get_collection(
    collection_id: int = Path(..., description="Collection ID"),
    user_id: int = Depends(get_current_user_id),
    db: DBSession = Depends(get_db),
):
    """Get one collection including the full notes of its items."""
    collection = crud.get_collection(db, user_id, collection_id)
    if collection is None:
        raise HTTPException(status_code=404, detail="Course not found")
    return _collection_response(collection, include_notes=True)


@router.post("/collections/{collection_id}/add", response_model=SuccessResponse)
async def add_to_collection(
    body: AddToCollectionRequest,
    collection_id: int = Path(..., description="Collection ID"),
    user_id: int = Depends(get_current_user_id),
    db: DBSession = Depends(get_db),
):
    """Add a note to a collection; adding the same note twice is a no-op."""
    collection = crud.get_collection(db, user_id, collection_id)
    if collection is None:
        raise HTTPException(status_code=403, detail="Unauthorized")
    if crud.get_note(db, user_id, body.note_id) is None:
        raise HTTPException(status_code=404, detail="Note not found")

    crud.add_note_to_collection(db, collection, body.note_id)
    return SuccessResponse()


@router.delete("/collections/{collection_id}", response_model=SuccessResponse)
async def delete_collection(
    collection_id: int = Path(..., description="Collection ID"),
    user_id: int = Depends(get_current_user_id),
    db: DBSession = Depends(get_db),
):
    if not crud.delete_collection(db, user_id, collection_id):
        raise HTTPException(status_code=404, detail="Course not found")
    return SuccessResponse()
