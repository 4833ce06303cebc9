import itertools

import pytest

from media_catalog.exceptions import NotFoundError, ScanError
from media_catalog.repositories.movie_reducer import (
    MovieRowReducer, reduce_movie_rows, reduce_single_movie,
)


def make_row(movie_id=1, **overrides):
    """One row of the aggregate join; every related column defaults to the sentinel"""
    row = {
        "movie_id": movie_id,
        "title": f"Movie {movie_id}",
        "description": "desc",
        "release_year": 2020,
        "runtime": 120,
        "director": "Director",
        "producer": "Producer",
        "keywords": ["space"],
        "cover": "",
        "screenshots": None,
        "movie_type_id": 0,
        "movie_type_title": "",
        "genre_id": 0,
        "genre_title": "",
        "category_id": 0,
        "category_title": "",
        "age_id": 0,
        "age_title": "",
        "season_id": 0,
        "season_number": 0,
        "season_movie_id": 0,
        "episode_id": 0,
        "episode_number": 0,
        "episode_video_url": "",
        "episode_season_id": 0,
    }
    row.update(overrides)
    return row


def genre(gid):
    return {"genre_id": gid, "genre_title": f"G{gid}"}


def category(cid):
    return {"category_id": cid, "category_title": f"C{cid}"}


def age(aid):
    return {"age_id": aid, "age_title": f"{aid}+"}


def episode(season_id, season_number, episode_id, episode_number, movie_id=1):
    return {
        "season_id": season_id,
        "season_number": season_number,
        "season_movie_id": movie_id,
        "episode_id": episode_id,
        "episode_number": episode_number,
        "episode_video_url": f"/videos/{episode_id}.mp4",
        "episode_season_id": season_id,
    }


def fan_out_rows():
    """2 genres x 2 categories x 1 age x (season 1: 2 episodes, season 2: 1 episode)"""
    content = [episode(11, 1, 101, 1), episode(11, 1, 102, 2), episode(12, 2, 201, 1)]
    return [
        make_row(**genre(g), **category(c), **age(16), **ep)
        for g, c, ep in itertools.product((10, 20), (30, 40), content)
    ]


def test_duplicate_genre_rows_are_collapsed():
    rows = [make_row(**genre(10)), make_row(**genre(10)), make_row(**genre(20))]

    movie = reduce_single_movie(rows, 1)

    assert [g.id for g in movie.genres] == [10, 20]
    assert movie.seasons == []


def test_fan_out_counts():
    movie = reduce_single_movie(fan_out_rows(), 1)

    assert len(movie.genres) == 2
    assert len(movie.categories) == 2
    assert len(movie.ages) == 1
    assert [s.number for s in movie.seasons] == [1, 2]
    assert [len(s.episodes) for s in movie.seasons] == [2, 1]


def test_counts_do_not_depend_on_row_order():
    rows = fan_out_rows()
    expected = reduce_single_movie(rows, 1)

    for shift in range(1, len(rows), 5):
        shuffled = rows[shift:] + rows[:shift]
        movie = reduce_single_movie(list(reversed(shuffled)), 1)
        assert {g.id for g in movie.genres} == {g.id for g in expected.genres}
        assert {c.id for c in movie.categories} == {c.id for c in expected.categories}
        assert movie.seasons == expected.seasons


def test_seasons_and_episodes_sorted_by_number():
    rows = [
        make_row(**episode(12, 2, 202, 2)),
        make_row(**episode(12, 2, 201, 1)),
        make_row(**episode(11, 1, 101, 1)),
    ]

    movie = reduce_single_movie(rows, 1)

    assert [s.id for s in movie.seasons] == [11, 12]
    assert [e.number for e in movie.seasons[1].episodes] == [1, 2]


def test_reducing_twice_gives_equal_results():
    rows = fan_out_rows()
    assert reduce_movie_rows(rows) == reduce_movie_rows(rows)


def test_sentinel_season_creates_nothing():
    movie = reduce_single_movie([make_row(**genre(10))], 1)
    assert movie.seasons == []


def test_sentinel_episode_keeps_empty_season():
    rows = [make_row(season_id=11, season_number=1, season_movie_id=1)]

    movie = reduce_single_movie(rows, 1)

    assert len(movie.seasons) == 1
    assert movie.seasons[0].episodes == []


def test_first_row_wins_for_scalar_fields():
    rows = [make_row(title="First", **genre(10)), make_row(title="Second", **genre(20))]
    assert reduce_single_movie(rows, 1).title == "First"


def test_null_media_fields_become_empty():
    movie = reduce_single_movie([make_row(screenshots=None, cover=None)], 1)

    assert movie.screenshots == []
    assert movie.cover == ""


def test_multiple_movies_keep_first_seen_order():
    rows = [make_row(2, **genre(10)), make_row(1, **genre(20)), make_row(2, **genre(30))]

    movies = reduce_movie_rows(rows)

    assert [m.id for m in movies] == [2, 1]
    assert [g.id for g in movies[0].genres] == [10, 30]


def test_no_rows_is_not_found():
    with pytest.raises(NotFoundError):
        reduce_single_movie([], 42)
    assert reduce_movie_rows([]) == []


def test_missing_column_aborts_reduction():
    bad = make_row(**genre(10))
    del bad["genre_title"]

    with pytest.raises(ScanError) as exc_info:
        reduce_movie_rows([make_row(), bad])

    assert exc_info.value.row_index == 1


def test_wrong_type_aborts_reduction():
    with pytest.raises(ScanError):
        reduce_movie_rows([make_row(release_year="2020")])


def test_reducer_tracks_distinct_movies():
    reducer = MovieRowReducer().feed_all([make_row(1), make_row(1), make_row(3)])
    assert len(reducer) == 2
