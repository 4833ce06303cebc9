# media_catalog/repositories/watchlist.py
import logging
from typing import List, Optional

from sqlalchemy import delete, exists, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models import Movie, WatchlistItem
from ..schemas.movie import MovieSummary

module_logger = logging.getLogger(__name__)


class WatchlistRepository:
    def __init__(self, db: AsyncSession, logger: Optional[logging.Logger] = None):
        self.db = db
        self.logger = logger or module_logger

    async def contains(self, user_id: int, movie_id: int) -> bool:
        result = await self.db.execute(
            select(exists().where(WatchlistItem.user_id == user_id, WatchlistItem.movie_id == movie_id))
        )
        return bool(result.scalar())

    async def add(self, user_id: int, movie_id: int) -> bool:
        """Idempotent; returns False when the movie was already saved"""
        if await self.contains(user_id, movie_id):
            return False
        self.db.add(WatchlistItem(user_id=user_id, movie_id=movie_id))
        await self.db.commit()
        self.logger.info(f"Movie {movie_id} added to watchlist of user {user_id}")
        return True

    async def list(self, user_id: int) -> List[MovieSummary]:
        """Saved movies, most recently added first"""
        result = await self.db.execute(
            select(Movie)
            .join(WatchlistItem, WatchlistItem.movie_id == Movie.id)
            .where(WatchlistItem.user_id == user_id)
            .order_by(WatchlistItem.created_at.desc(), WatchlistItem.id.desc())
        )
        return [MovieSummary.model_validate(movie) for movie in result.scalars().all()]

    async def remove(self, user_id: int, movie_id: int) -> bool:
        result = await self.db.execute(
            delete(WatchlistItem).where(
                WatchlistItem.user_id == user_id, WatchlistItem.movie_id == movie_id
            )
        )
        await self.db.commit()
        return result.rowcount > 0
