"""
CRUD operations for the NoteTube library database.
"""

from typing import List, Optional, Sequence
from sqlalchemy.orm import Session

from notetube.config import config
from notetube.db.models import Collection, CollectionItem, NoteHistory, QuizMistake, UserPreference
from notetube.utils.logger import logging


def get_preferences(db: Session, user_id: int) -> Optional[UserPreference]:
    """Get the stored preferences of a user."""
    return db.query(UserPreference).filter(UserPreference.user_id == user_id).first()


def upsert_preferences(db: Session, user_id: int, ai_tone: Optional[str] = None,
                       ai_detail_level: Optional[str] = None,
                       ai_language: Optional[str] = None) -> UserPreference:
    """Create or update preferences; fields left as None keep their value."""
    prefs = get_preferences(db, user_id)
    if prefs is None:
        prefs = UserPreference(user_id=user_id)
        db.add(prefs)

    if ai_tone is not None:
        prefs.ai_tone = ai_tone
    if ai_detail_level is not None:
        prefs.ai_detail_level = ai_detail_level
    if ai_language is not None:
        prefs.ai_language = ai_language

    db.commit()
    db.refresh(prefs)
    return prefs


def create_note(db: Session, user_id: int, video_id: str, title: str, notes: str,
                thumbnail: Optional[str] = None,
                transcript_source: Optional[str] = None) -> NoteHistory:
    """Add generated notes to a user's library."""
    note = NoteHistory(
        user_id=user_id,
        video_id=video_id,
        title=title,
        thumbnail=thumbnail,
        notes=notes,
        transcript_source=transcript_source
    )
    db.add(note)
    db.commit()
    db.refresh(note)
    return note


def get_history(db: Session, user_id: int, limit: int = config.HISTORY_LIMIT) -> List[NoteHistory]:
    """Get a user's most recent notes."""
    return db.query(NoteHistory).filter(
        NoteHistory.user_id == user_id
    ).order_by(NoteHistory.created_at.desc(), NoteHistory.id.desc()).limit(limit).all()


def get_note(db: Session, user_id: int, note_id: int) -> Optional[NoteHistory]:
    return db.query(NoteHistory).filter(
        NoteHistory.id == note_id,
        NoteHistory.user_id == user_id
    ).first()


def get_notes_by_ids(db: Session, user_id: int, note_ids: Sequence[int]) -> List[NoteHistory]:
    """Get the subset of the given notes that belongs to the user."""
    return db.query(NoteHistory).filter(
        NoteHistory.id.in_(list(note_ids)),
        NoteHistory.user_id == user_id
    ).order_by(NoteHistory.id).all()


def _delete_collection_items_for(db: Session, note_ids: List[int]) -> None:
    if note_ids:
        db.query(CollectionItem).filter(
            CollectionItem.note_id.in_(note_ids)
        ).delete(synchronize_session=False)


def clear_history(db: Session, user_id: int) -> int:
    """Delete every note of a user. Returns the number of deleted notes."""
    note_ids = [row.id for row in db.query(NoteHistory.id).filter(NoteHistory.user_id == user_id)]
    _delete_collection_items_for(db, note_ids)
    deleted = db.query(NoteHistory).filter(
        NoteHistory.user_id == user_id
    ).delete(synchronize_session=False)
    db.commit()
    logging.info(f"Cleared {deleted} notes for user {user_id}")
    return deleted


def delete_note(db: Session, user_id: int, note_id: int) -> bool:
    """Delete one note. Returns False if the user has no such note."""
    note = get_note(db, user_id, note_id)
    if note is None:
        return False
    db.delete(note)
    db.commit()
    return True


def add_mistake(db: Session, user_id: int, video_id: str, question: str,
                correct_answer: Optional[str] = None,
                user_answer: Optional[str] = None) -> QuizMistake:
    """Record a wrong quiz answer."""
    mistake = QuizMistake(
        user_id=user_id,
        video_id=video_id,
        question=question,
        correct_answer=correct_answer,
        user_answer=user_answer
    )
    db.add(mistake)
    db.commit()
    db.refresh(mistake)
    return mistake


def get_recent_mistakes(db: Session, user_id: int, video_id: str,
                        limit: int = config.QUIZ_MISTAKE_LIMIT) -> List[QuizMistake]:
    """Get the user's latest mistakes for a video."""
    return db.query(QuizMistake).filter(
        QuizMistake.user_id == user_id,
        QuizMistake.video_id == video_id
    ).order_by(QuizMistake.timestamp.desc(), QuizMistake.id.desc()).limit(limit).all()


def create_collection(db: Session, user_id: int, name: str,
                      description: Optional[str] = None) -> Collection:
    collection = Collection(user_id=user_id, name=name, description=description)
    db.add(collection)
    db.commit()
    db.refresh(collection)
    return collection


def list_collections(db: Session, user_id: int) -> List[Collection]:
    """Get a user's collections, newest first."""
    return db.query(Collection).filter(
        Collection.user_id == user_id
    ).order_by(Collection.created_at.desc(), Collection.id.desc()).all()


def get_collection(db: Session, user_id: int, collection_id: int) -> Optional[Collection]:
    return db.query(Collection).filter(
        Collection.id == collection_id,
        Collection.user_id == user_id
    ).first()


def delete_collection(db: Session, user_id: int, collection_id: int) -> bool:
    """Delete a collection and its memberships. Returns False if not found."""
    collection = get_collection(db, user_id, collection_id)
    if collection is None:
        return False
    db.delete(collection)
    db.commit()
    return True


def add_note_to_collection(db: Session, collection: Collection, note_id: int) -> CollectionItem:
    """Add a note to a collection; adding it twice is a no-op."""
    item = db.query(CollectionItem).filter(
        CollectionItem.collection_id == collection.id,
        CollectionItem.note_id == note_id
    ).first()
    if item is not None:
        return item

    item = CollectionItem(collection_id=collection.id, note_id=note_id)
    db.add(item)
    db.commit()
    db.refresh(item)
    return item
