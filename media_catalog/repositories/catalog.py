# media_catalog/repositories/catalog.py
"""
Reference repositories: genres, categories, age ratings and movie types.

All four tables share the (id, title, poster_url) shape, so one
parameterized repository serves them.
"""
import logging
from typing import Iterable, List, Optional

from sqlalchemy import Table, delete, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..exceptions import ConflictError, NotFoundError, TransactionError, UnknownReferenceError
from ..models import Age, Category, Genre, Movie, MovieType, movie_ages, movie_categories, movie_genres
from ..schemas.catalog import ReferenceCreate, ReferenceUpdate

module_logger = logging.getLogger(__name__)


class ReferenceRepository:
    model = None
    entity_name = "Reference"
    junction: Optional[Table] = None
    junction_column: Optional[str] = None

    def __init__(self, db: AsyncSession, logger: Optional[logging.Logger] = None):
        self.db = db
        self.logger = logger or module_logger

    async def find_all(self) -> list:
        result = await self.db.execute(select(self.model).order_by(self.model.id))
        return list(result.scalars().all())

    async def find_by_id(self, ref_id: int):
        item = await self.db.get(self.model, ref_id)
        if item is None:
            raise NotFoundError(self.entity_name, ref_id)
        return item

    async def find_all_by_ids(self, ref_ids: Iterable[int]) -> list:
        ids = list(dict.fromkeys(ref_ids))
        if not ids:
            return []
        result = await self.db.execute(
            select(self.model).where(self.model.id.in_(ids)).order_by(self.model.id)
        )
        return list(result.scalars().all())

    async def require_all(self, ref_ids: Iterable[int]) -> None:
        """Raise UnknownReferenceError listing every id that does not exist"""
        ids = set(ref_ids)
        if not ids:
            return
        found = {item.id for item in await self.find_all_by_ids(ids)}
        missing = ids - found
        if missing:
            raise UnknownReferenceError(self.entity_name, missing)

    async def create(self, data: ReferenceCreate):
        item = self.model(title=data.title, poster_url=data.poster_url)
        self.db.add(item)
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            raise ConflictError(f"{self.entity_name} '{data.title}' already exists") from e
        await self.db.refresh(item)
        self.logger.info(f"{self.entity_name} created: {item.title} (ID: {item.id})")
        return item

    async def update(self, ref_id: int, data: ReferenceUpdate):
        item = await self.find_by_id(ref_id)
        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(item, field, value)
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            raise ConflictError(f"{self.entity_name} '{data.title}' already exists") from e
        await self.db.refresh(item)
        return item

    async def _detach_movies(self, ref_id: int) -> None:
        if self.junction is not None:
            await self.db.execute(
                delete(self.junction).where(self.junction.c[self.junction_column] == ref_id)
            )

    async def delete(self, ref_id: int) -> None:
        """Remove the movie associations first, then the row itself"""
        item = await self.find_by_id(ref_id)
        try:
            await self._detach_movies(ref_id)
            await self.db.delete(item)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            self.logger.error(f"Delete {self.entity_name} {ref_id} rolled back: {e}")
            raise TransactionError(f"delete {self.entity_name.lower()}", e) from e
        self.logger.info(f"{self.entity_name} deleted (ID: {ref_id})")


class GenresRepository(ReferenceRepository):
    model = Genre
    entity_name = "Genre"
    junction = movie_genres
    junction_column = "genre_id"


class CategoriesRepository(ReferenceRepository):
    model = Category
    entity_name = "Category"
    junction = movie_categories
    junction_column = "category_id"


class AgesRepository(ReferenceRepository):
    model = Age
    entity_name = "Age"
    junction = movie_ages
    junction_column = "age_id"


class MovieTypesRepository(ReferenceRepository):
    model = MovieType
    entity_name = "MovieType"

    async def _detach_movies(self, ref_id: int) -> None:
        await self.db.execute(
            update(Movie)
            .where(Movie.movie_type_id == ref_id)
            .values(movie_type_id=None)
        )


async def validate_movie_references(
    db: AsyncSession,
    movie_type_id: Optional[int],
    genre_ids: List[int],
    category_ids: List[int],
    age_ids: List[int],
) -> None:
    """
    Resolve every association id before a movie write.
    The first dimension with unknown ids raises UnknownReferenceError.
    """
    if movie_type_id is not None:
        await MovieTypesRepository(db).require_all([movie_type_id])
    await GenresRepository(db).require_all(genre_ids)
    await CategoriesRepository(db).require_all(category_ids)
    await AgesRepository(db).require_all(age_ids)
