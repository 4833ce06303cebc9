# media_catalog/repositories/movies.py
"""
Movies repository

- find_by_id / find_all: one aggregate query, reduced in-process
- create / update / delete: one transaction each, all-or-nothing
- update replaces every genre/category/age association (no diffing)
"""
import logging
from typing import List, Optional

from sqlalchemy import delete, exists, insert, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..exceptions import NotFoundError, TransactionError
from ..models import (
    Episode, Movie, RecommendedMovie, Season, WatchlistItem,
    movie_ages, movie_categories, movie_genres,
)
from ..schemas.movie import MovieFilters, MovieMedia, MovieRead, MovieSummary, MovieWrite
from .movie_query import build_movie_by_id_query, build_movie_list_query
from .movie_reducer import reduce_movie_rows, reduce_single_movie
from .search import LIKE_ESCAPE, like_pattern

module_logger = logging.getLogger(__name__)

# (junction table, reference fk column, MovieWrite attribute)
ASSOCIATIONS = (
    (movie_genres, "genre_id", "genre_ids"),
    (movie_categories, "category_id", "category_ids"),
    (movie_ages, "age_id", "age_ids"),
)


def _movie_values(movie: MovieWrite) -> dict:
    return {
        "title": movie.title,
        "description": movie.description,
        "release_year": movie.release_year,
        "runtime": movie.runtime,
        "director": movie.director,
        "producer": movie.producer,
        "keywords": list(movie.keywords),
        "movie_type_id": movie.movie_type_id,
    }


class MoviesRepository:
    def __init__(self, db: AsyncSession, logger: Optional[logging.Logger] = None):
        self.db = db
        self.logger = logger or module_logger

    # ==================== READS ====================

    async def find_by_id(self, movie_id: int) -> MovieRead:
        """Raises NotFoundError when the movie does not exist"""
        result = await self.db.execute(build_movie_by_id_query(movie_id))
        movie = reduce_single_movie(result, movie_id)
        self.logger.debug(
            f"Movie {movie_id} reduced: {len(movie.genres)} genres, "
            f"{len(movie.categories)} categories, {len(movie.ages)} ages, "
            f"{len(movie.seasons)} seasons"
        )
        return movie

    async def find_all(self, filters: Optional[MovieFilters] = None) -> List[MovieRead]:
        result = await self.db.execute(build_movie_list_query(filters))
        movies = reduce_movie_rows(result)
        self.logger.debug(f"Loaded {len(movies)} movies (filters={filters})")
        return movies

    async def exists(self, movie_id: int) -> bool:
        result = await self.db.execute(select(exists().where(Movie.id == movie_id)))
        return bool(result.scalar())

    async def search(self, query: str) -> List[MovieSummary]:
        """Case-insensitive title match, newest releases first"""
        result = await self.db.execute(
            select(Movie)
            .where(Movie.title.ilike(like_pattern(query), escape=LIKE_ESCAPE))
            .order_by(Movie.release_year.desc(), Movie.id)
        )
        return [MovieSummary.model_validate(movie) for movie in result.scalars().all()]

    # ==================== TRANSACTIONAL WRITES ====================

    async def _insert_associations(self, movie_id: int, movie: MovieWrite) -> None:
        for table, column, attribute in ASSOCIATIONS:
            ref_ids = list(dict.fromkeys(getattr(movie, attribute)))
            if not ref_ids:
                continue
            await self.db.execute(
                insert(table),
                [{"movie_id": movie_id, column: ref_id} for ref_id in ref_ids],
            )

    async def _delete_associations(self, movie_id: int) -> None:
        for table, _, _ in ASSOCIATIONS:
            await self.db.execute(delete(table).where(table.c.movie_id == movie_id))

    async def create(self, movie: MovieWrite) -> int:
        """Insert the movie row and its associations; returns the new id"""
        try:
            result = await self.db.execute(
                insert(Movie).values(**_movie_values(movie)).returning(Movie.id)
            )
            movie_id = result.scalar_one()
            await self._insert_associations(movie_id, movie)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            self.logger.error(f"Create movie '{movie.title}' rolled back: {e}")
            raise TransactionError("create movie", e) from e

        self.logger.info(f"Movie created: {movie.title} (ID: {movie_id})")
        return movie_id

    async def update(self, movie: MovieWrite) -> None:
        """Rewrite the movie row and replace all of its associations"""
        if movie.id is None:
            raise ValueError("update requires a movie id")

        try:
            result = await self.db.execute(
                update(Movie)
                .where(Movie.id == movie.id)
                .values(**_movie_values(movie))
            )
            if result.rowcount == 0:
                raise NotFoundError("Movie", movie.id)

            await self._delete_associations(movie.id)
            await self._insert_associations(movie.id, movie)
            await self.db.commit()
        except NotFoundError:
            await self.db.rollback()
            raise
        except SQLAlchemyError as e:
            await self.db.rollback()
            self.logger.error(f"Update movie {movie.id} rolled back: {e}")
            raise TransactionError("update movie", e) from e

        self.logger.info(f"Movie updated: {movie.title} (ID: {movie.id})")

    async def delete(self, movie_id: int) -> None:
        """Remove associations, owned seasons/episodes and the movie row"""
        season_ids = select(Season.id).where(Season.movie_id == movie_id)
        try:
            await self._delete_associations(movie_id)
            await self.db.execute(delete(Episode).where(Episode.season_id.in_(season_ids)))
            for model, column in (
                (Season, Season.movie_id),
                (WatchlistItem, WatchlistItem.movie_id),
                (RecommendedMovie, RecommendedMovie.movie_id),
            ):
                await self.db.execute(delete(model).where(column == movie_id))
            result = await self.db.execute(delete(Movie).where(Movie.id == movie_id))
            if result.rowcount == 0:
                raise NotFoundError("Movie", movie_id)
            await self.db.commit()
        except NotFoundError:
            await self.db.rollback()
            raise
        except SQLAlchemyError as e:
            await self.db.rollback()
            self.logger.error(f"Delete movie {movie_id} rolled back: {e}")
            raise TransactionError("delete movie", e) from e

        self.logger.info(f"Movie deleted (ID: {movie_id})")

    # ==================== MEDIA ====================

    async def _load_for_media(self, movie_id: int) -> Movie:
        movie = await self.db.get(Movie, movie_id)
        if movie is None:
            raise NotFoundError("Movie", movie_id)
        return movie

    async def get_media(self, movie_id: int) -> MovieMedia:
        movie = await self._load_for_media(movie_id)
        return MovieMedia(cover=movie.cover, screenshots=list(movie.screenshots or []))

    async def update_media(
        self,
        movie_id: int,
        cover: Optional[str] = None,
        screenshots: Optional[List[str]] = None,
    ) -> MovieMedia:
        """Set the cover when given and append screenshots in order"""
        try:
            movie = await self._load_for_media(movie_id)
            if cover is not None:
                movie.cover = cover
            if screenshots:
                movie.screenshots = list(movie.screenshots or []) + list(screenshots)
            await self.db.commit()
        except NotFoundError:
            await self.db.rollback()
            raise
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise TransactionError("update movie media", e) from e

        return MovieMedia(cover=movie.cover, screenshots=list(movie.screenshots or []))

    async def remove_media(self, movie_id: int, path: str) -> MovieMedia:
        """Clear the cover if it matches, otherwise drop the matching screenshot"""
        try:
            movie = await self._load_for_media(movie_id)
            if movie.cover == path:
                movie.cover = None
            else:
                movie.screenshots = [shot for shot in (movie.screenshots or []) if shot != path]
            await self.db.commit()
        except NotFoundError:
            await self.db.rollback()
            raise
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise TransactionError("remove movie media", e) from e

        return MovieMedia(cover=movie.cover, screenshots=list(movie.screenshots or []))
