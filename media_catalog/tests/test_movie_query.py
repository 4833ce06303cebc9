from sqlalchemy.dialects import postgresql

from media_catalog.repositories.movie_query import (
    build_filter_clause, build_movie_by_id_query, build_movie_list_query,
)
from media_catalog.schemas.movie import MovieFilters


def compile_pg(stmt) -> str:
    return str(stmt.compile(dialect=postgresql.dialect()))


def test_no_filters_builds_no_predicates():
    assert len(build_filter_clause(None)) == 0
    assert len(build_filter_clause(MovieFilters())) == 0


def test_empty_strings_are_skipped():
    clause = build_filter_clause(MovieFilters(genre_id="", category_id="", type_id="", age_id=""))
    assert len(clause) == 0
    assert clause.params == {}


def test_single_filter_binds_string_value():
    clause = build_filter_clause(MovieFilters(genre_id="5"))

    assert [p.param for p in clause.predicates] == ["genre_id"]
    assert clause.params == {"genre_id": "5"}


def test_filters_keep_dimension_order():
    clause = build_filter_clause(MovieFilters(age_id="3", genre_id="1", type_id="2"))

    assert [p.param for p in clause.predicates] == ["genre_id", "type_id", "age_id"]
    assert clause.params == {"genre_id": "1", "type_id": "2", "age_id": "3"}


def test_non_numeric_value_passes_through_unvalidated():
    clause = build_filter_clause(MovieFilters(category_id="abc"))
    assert clause.params == {"category_id": "abc"}


def test_list_query_starts_from_neutral_where():
    sql = compile_pg(build_movie_list_query())

    assert "1 = 1" in sql
    assert "CAST" not in sql


def test_list_query_appends_cast_predicates():
    compiled = build_movie_list_query(MovieFilters(genre_id="5", age_id="2")).compile(
        dialect=postgresql.dialect()
    )
    sql = str(compiled)

    assert "genres.id = CAST(" in sql
    assert "ages.id = CAST(" in sql
    assert "categories.id = CAST" not in sql
    assert compiled.params["genre_id"] == "5"
    assert compiled.params["age_id"] == "2"
    assert "category_id" not in compiled.params


def test_aggregate_query_outer_joins_every_relation():
    sql = compile_pg(build_movie_by_id_query(7))

    for table in ("movie_types", "movie_genres", "genres", "movie_categories",
                  "categories", "movie_ages", "ages", "seasons", "episodes"):
        assert f"LEFT OUTER JOIN {table}" in sql
    assert "coalesce(genres.id" in sql
    assert "ORDER BY movies.id, seasons.number, episodes.number" in sql


def test_by_id_query_binds_movie_id():
    compiled = build_movie_by_id_query(7).compile(dialect=postgresql.dialect())
    assert compiled.params["movie_id"] == 7
