"""
SQLAlchemy models for the NoteTube library database.
"""

import datetime
from sqlalchemy import Column, String, Text, DateTime, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import relationship

from notetube.db.database import Base


class UserPreference(Base):
    """AI output preferences of one user."""
    __tablename__ = "user_preferences"

    user_id = Column(Integer, primary_key=True)
    ai_tone = Column(String(50), nullable=False, default="educational")
    ai_detail_level = Column(String(50), nullable=False, default="detailed")
    ai_language = Column(String(10), nullable=False, default="en")
    updated_at = Column(DateTime, default=datetime.datetime.utcnow, onupdate=datetime.datetime.utcnow)

    def __repr__(self):
        return f"<UserPreference(user_id={self.user_id}, tone='{self.ai_tone}')>"


class NoteHistory(Base):
    """Notes generated for a video, kept in the user's library."""
    __tablename__ = "notes_history"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, nullable=False, index=True)
    video_id = Column(String(20), nullable=False)
    title = Column(String(255), nullable=False)
    thumbnail = Column(String(500), nullable=True)
    notes = Column(Text, nullable=False)
    transcript_source = Column(String(20), nullable=True)
    created_at = Column(DateTime, default=datetime.datetime.utcnow)

    # Relationships
    collection_items = relationship("CollectionItem", back_populates="note", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<NoteHistory(id={self.id}, video_id='{self.video_id}')>"


class QuizMistake(Base):
    """A quiz question the user answered wrong."""
    __tablename__ = "quiz_mistakes"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, nullable=False, index=True)
    video_id = Column(String(20), nullable=False)
    question = Column(Text, nullable=False)
    correct_answer = Column(Text, nullable=True)
    user_answer = Column(Text, nullable=True)
    timestamp = Column(DateTime, default=datetime.datetime.utcnow)

    def __repr__(self):
        return f"<QuizMistake(id={self.id}, video_id='{self.video_id}')>"


class Collection(Base):
    """A user defined course grouping several notes."""
    __tablename__ = "collections"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.datetime.utcnow)

    # Relationships
    items = relationship(
        "CollectionItem",
        back_populates="collection",
        cascade="all, delete-orphan",
        order_by="CollectionItem.added_at.desc()",
    )

    def __repr__(self):
        return f"<Collection(id={self.id}, name='{self.name}')>"


class CollectionItem(Base):
    """Membership of a note in a collection."""
    __tablename__ = "collection_items"
    __table_args__ = (UniqueConstraint("collection_id", "note_id", name="uq_collection_note"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    collection_id = Column(Integer, ForeignKey("collections.id", ondelete="CASCADE"), nullable=False)
    note_id = Column(Integer, ForeignKey("notes_history.id", ondelete="CASCADE"), nullable=False)
    added_at = Column(DateTime, default=datetime.datetime.utcnow)

    # Relationships
    collection = relationship("Collection", back_populates="items")
    note = relationship("NoteHistory", back_populates="collection_items")

    def __repr__(self):
        return f"<CollectionItem(collection_id={self.collection_id}, note_id={self.note_id})>"
