# media_catalog/repositories/movie_query.py
"""
Aggregate movie query.

One statement left-outer-joins a movie with its type, genres, categories,
age ratings, seasons and episodes. Every column coming from an optional
relation is COALESCEd, so a missing related row surfaces as id 0 / '' and
the reducer can test for the sentinel uniformly.

Listing filters are kept as predicate objects until the statement is
rendered, so their composition can be inspected without a database.
"""
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from sqlalchemy import Integer, String, Select, bindparam, cast, func, select, text
from sqlalchemy.sql.elements import ColumnElement

from ..models import Age, Category, Episode, Genre, Movie, MovieType, Season
from ..models import movie_ages, movie_categories, movie_genres
from ..schemas.movie import MovieFilters

# Reserved id for "no related row" after an outer join
SENTINEL_ID = 0

# ==================== FILTER PREDICATES ====================

# filter field -> (bind parameter name, joined id column)
FILTER_DIMENSIONS = (
    ("genre_id", Genre.id),
    ("category_id", Category.id),
    ("type_id", MovieType.id),
    ("age_id", Age.id),
)


@dataclass(frozen=True)
class FilterPredicate:
    """`<joined alias>.id = :param`, with the raw string value bound by name"""
    param: str
    column: ColumnElement = field(compare=False)
    value: str

    def clause(self) -> ColumnElement:
        # The value stays a string; the database performs the cast and
        # rejects non-numeric input.
        return self.column == cast(bindparam(self.param, self.value, type_=String), Integer)


@dataclass(frozen=True)
class FilterClause:
    predicates: Tuple[FilterPredicate, ...] = ()

    @property
    def params(self) -> Dict[str, str]:
        return {predicate.param: predicate.value for predicate in self.predicates}

    def __len__(self) -> int:
        return len(self.predicates)

    def apply(self, stmt: Select) -> Select:
        """AND every predicate onto the statement's where-clause"""
        if not self.predicates:
            return stmt
        return stmt.where(*(predicate.clause() for predicate in self.predicates))


def build_filter_clause(filters: Optional[MovieFilters]) -> FilterClause:
    """Turn the optional id filters into predicates; empty values are skipped"""
    if filters is None:
        return FilterClause()

    predicates = []
    for param, column in FILTER_DIMENSIONS:
        value = getattr(filters, param)
        if value is None or value == "":
            continue
        predicates.append(FilterPredicate(param=param, column=column, value=value))
    return FilterClause(tuple(predicates))


# ==================== AGGREGATE SELECT ====================

def _aggregate_columns() -> tuple:
    return (
        # movie scalars
        Movie.id.label("movie_id"),
        Movie.title.label("title"),
        Movie.description.label("description"),
        Movie.release_year.label("release_year"),
        Movie.runtime.label("runtime"),
        Movie.director.label("director"),
        Movie.producer.label("producer"),
        Movie.keywords.label("keywords"),
        func.coalesce(Movie.cover, "").label("cover"),
        Movie.screenshots.label("screenshots"),
        # 1:1 movie type
        func.coalesce(MovieType.id, SENTINEL_ID).label("movie_type_id"),
        func.coalesce(MovieType.title, "").label("movie_type_title"),
        # N:M references
        func.coalesce(Genre.id, SENTINEL_ID).label("genre_id"),
        func.coalesce(Genre.title, "").label("genre_title"),
        func.coalesce(Category.id, SENTINEL_ID).label("category_id"),
        func.coalesce(Category.title, "").label("category_title"),
        func.coalesce(Age.id, SENTINEL_ID).label("age_id"),
        func.coalesce(Age.title, "").label("age_title"),
        # 1:N seasons -> 1:N episodes
        func.coalesce(Season.id, SENTINEL_ID).label("season_id"),
        func.coalesce(Season.number, 0).label("season_number"),
        func.coalesce(Season.movie_id, SENTINEL_ID).label("season_movie_id"),
        func.coalesce(Episode.id, SENTINEL_ID).label("episode_id"),
        func.coalesce(Episode.number, 0).label("episode_number"),
        func.coalesce(Episode.video_url, "").label("episode_video_url"),
        func.coalesce(Episode.season_id, SENTINEL_ID).label("episode_season_id"),
    )


def build_aggregate_select() -> Select:
    """The shared five-way outer join, without any where-clause"""
    return (
        select(*_aggregate_columns())
        .select_from(Movie)
        .outerjoin(MovieType, MovieType.id == Movie.movie_type_id)
        .outerjoin(movie_genres, movie_genres.c.movie_id == Movie.id)
        .outerjoin(Genre, Genre.id == movie_genres.c.genre_id)
        .outerjoin(movie_categories, movie_categories.c.movie_id == Movie.id)
        .outerjoin(Category, Category.id == movie_categories.c.category_id)
        .outerjoin(movie_ages, movie_ages.c.movie_id == Movie.id)
        .outerjoin(Age, Age.id == movie_ages.c.age_id)
        .outerjoin(Season, Season.movie_id == Movie.id)
        .outerjoin(Episode, Episode.season_id == Season.id)
        .order_by(Movie.id, Season.number, Episode.number)
    )


def build_movie_by_id_query(movie_id: int) -> Select:
    """Rows for exactly one movie; zero rows when the movie does not exist"""
    return build_aggregate_select().where(Movie.id == bindparam("movie_id", movie_id))


def build_movie_list_query(filters: Optional[MovieFilters] = None) -> Select:
    """Rows for every movie matching all active filters"""
    stmt = build_aggregate_select().where(text("1 = 1"))
    return build_filter_clause(filters).apply(stmt)
