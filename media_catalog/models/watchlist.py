# media_catalog/models/watchlist.py
from sqlalchemy import Column, Integer, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.sql import func
from ..database import Base


class WatchlistItem(Base):
    """A movie saved by a user for later"""
    __tablename__ = "watchlist"
    __table_args__ = (
        UniqueConstraint('user_id', 'movie_id', name='uq_watchlist_user_movie'),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    movie_id = Column(Integer, ForeignKey("movies.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class RecommendedMovie(Base):
    """Homepage carousel slot"""
    __tablename__ = "recommended_movies"

    id = Column(Integer, primary_key=True, index=True)
    movie_id = Column(Integer, ForeignKey("movies.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)
