"""Catalogue entry model"""

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.sql import func

from ..database import Base


class Entry(Base):
    """Catalogue entry (movie or TV show) owned by one user"""

    __tablename__ = "entries"
    # ids are never reused after deletion
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    tmdb_id = Column(Integer, index=True)
    title = Column(String(255), nullable=False)
    type = Column(String(10), nullable=False, index=True)  # 'movie' or 'tv'
    year = Column(Integer)
    genres = Column(Text, default="[]")  # JSON array: ["Sci-Fi", "Drama"]
    tmdb_data = Column(Text, default="{}")  # opaque JSON document

    # Watch progress
    watched = Column(Boolean, default=False, nullable=False)
    user_rating = Column(Float)
    user_review = Column(Text)

    # For TV shows
    total_seasons = Column(Integer)
    total_episodes = Column(Integer)
    watched_episodes = Column(Text, default="[]")  # JSON array: ["S1E1", "S1E2"]

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    def __repr__(self):
        return f"<Entry {self.type}:{self.id} - {self.title}>"
