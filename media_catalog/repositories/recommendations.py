# media_catalog/repositories/recommendations.py
"""Homepage carousel: recommended movies ordered by position"""
import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..exceptions import NotFoundError
from ..models import Movie, RecommendedMovie
from ..schemas.movie import MovieSummary

module_logger = logging.getLogger(__name__)


class RecommendationsRepository:
    def __init__(self, db: AsyncSession, logger: Optional[logging.Logger] = None):
        self.db = db
        self.logger = logger or module_logger

    async def find_all(self) -> List[RecommendedMovie]:
        result = await self.db.execute(
            select(RecommendedMovie).order_by(RecommendedMovie.position, RecommendedMovie.id)
        )
        return list(result.scalars().all())

    async def find_by_id(self, recommendation_id: int) -> RecommendedMovie:
        item = await self.db.get(RecommendedMovie, recommendation_id)
        if item is None:
            raise NotFoundError("Recommendation", recommendation_id)
        return item

    async def create(self, movie_id: int, position: int) -> RecommendedMovie:
        if await self.db.get(Movie, movie_id) is None:
            raise NotFoundError("Movie", movie_id)
        item = RecommendedMovie(movie_id=movie_id, position=position)
        self.db.add(item)
        await self.db.commit()
        await self.db.refresh(item)
        self.logger.info(f"Movie {movie_id} recommended at position {position}")
        return item

    async def update(self, recommendation_id: int, position: int) -> RecommendedMovie:
        item = await self.find_by_id(recommendation_id)
        item.position = position
        await self.db.commit()
        await self.db.refresh(item)
        return item

    async def delete(self, recommendation_id: int) -> None:
        item = await self.find_by_id(recommendation_id)
        await self.db.delete(item)
        await self.db.commit()

    async def recommended_movies(self) -> List[MovieSummary]:
        result = await self.db.execute(
            select(Movie)
            .join(RecommendedMovie, RecommendedMovie.movie_id == Movie.id)
            .order_by(RecommendedMovie.position, RecommendedMovie.id)
        )
        return [MovieSummary.model_validate(movie) for movie in result.scalars().all()]
