import pytest
from sqlalchemy import func, select

from media_catalog.exceptions import NotFoundError, TransactionError
from media_catalog.models import Episode, Movie, Season, movie_genres
from media_catalog.repositories.content import ContentService
from media_catalog.repositories.movies import MoviesRepository
from media_catalog.schemas.content import EpisodeCreate, SeasonCreate
from media_catalog.schemas.movie import MovieFilters, MovieWrite

pytestmark = pytest.mark.anyio


def movie_write(catalog, **overrides) -> MovieWrite:
    data = dict(
        title="Arrival",
        description="Linguist meets heptapods",
        release_year=2016,
        runtime=116,
        director="Denis Villeneuve",
        producer="Shawn Levy",
        keywords=["aliens", "language"],
        movie_type_id=catalog["film"].id,
        genre_ids=[catalog["drama"].id, catalog["thriller"].id],
        category_ids=[catalog["popular"].id],
        age_ids=[catalog["pg13"].id],
    )
    data.update(overrides)
    return MovieWrite(**data)


async def count_movies(db_session) -> int:
    return (await db_session.execute(select(func.count()).select_from(Movie))).scalar_one()


async def test_create_then_find_by_id(db_session, catalog):
    repo = MoviesRepository(db_session)

    movie_id = await repo.create(movie_write(catalog))
    movie = await repo.find_by_id(movie_id)

    assert movie.title == "Arrival"
    assert movie.keywords == ["aliens", "language"]
    assert movie.movie_type_id == catalog["film"].id
    assert movie.movie_type == "Film"
    assert {g.title for g in movie.genres} == {"Drama", "Thriller"}
    assert [c.title for c in movie.categories] == ["Popular"]
    assert [a.title for a in movie.ages] == ["13+"]
    assert movie.seasons == []
    assert movie.cover == ""


async def test_find_by_id_missing_movie(db_session):
    with pytest.raises(NotFoundError):
        await MoviesRepository(db_session).find_by_id(999)


async def test_create_rolls_back_when_association_fails(db_session, catalog):
    repo = MoviesRepository(db_session)

    with pytest.raises(TransactionError):
        await repo.create(movie_write(catalog, title="Broken", genre_ids=[999]))

    assert await count_movies(db_session) == 0


async def test_update_with_empty_genres_clears_them(db_session, catalog):
    repo = MoviesRepository(db_session)
    movie_id = await repo.create(movie_write(catalog))

    await repo.update(movie_write(catalog, id=movie_id, title="Arrival (2016)", genre_ids=[]))
    movie = await repo.find_by_id(movie_id)

    assert movie.title == "Arrival (2016)"
    assert movie.genres == []
    assert [c.title for c in movie.categories] == ["Popular"]
    remaining = await db_session.execute(
        select(func.count()).select_from(movie_genres).where(movie_genres.c.movie_id == movie_id)
    )
    assert remaining.scalar_one() == 0


async def test_update_replaces_associations(db_session, catalog):
    repo = MoviesRepository(db_session)
    movie_id = await repo.create(movie_write(catalog))

    await repo.update(movie_write(
        catalog, id=movie_id, genre_ids=[catalog["comedy"].id], category_ids=[catalog["new"].id]
    ))
    movie = await repo.find_by_id(movie_id)

    assert [g.title for g in movie.genres] == ["Comedy"]
    assert [c.title for c in movie.categories] == ["New"]


async def test_update_missing_movie(db_session, catalog):
    with pytest.raises(NotFoundError):
        await MoviesRepository(db_session).update(movie_write(catalog, id=999))


async def test_delete_removes_movie_and_content(db_session, catalog):
    repo = MoviesRepository(db_session)
    movie_id = await repo.create(movie_write(catalog))
    await ContentService(db_session).add_season_with_episodes(
        movie_id, SeasonCreate(number=1, episodes=[EpisodeCreate(number=1), EpisodeCreate(number=2)])
    )

    await repo.delete(movie_id)

    assert await count_movies(db_session) == 0
    assert (await db_session.execute(select(func.count()).select_from(Season))).scalar_one() == 0
    assert (await db_session.execute(select(func.count()).select_from(Episode))).scalar_one() == 0
    with pytest.raises(NotFoundError):
        await repo.find_by_id(movie_id)
    with pytest.raises(NotFoundError):
        await repo.get_media(movie_id)


async def test_delete_missing_movie(db_session):
    with pytest.raises(NotFoundError):
        await MoviesRepository(db_session).delete(999)


async def test_find_by_id_with_seasons(db_session, catalog):
    repo = MoviesRepository(db_session)
    movie_id = await repo.create(movie_write(catalog, movie_type_id=catalog["series"].id))
    content = ContentService(db_session)
    await content.add_season_with_episodes(
        movie_id, SeasonCreate(number=2, episodes=[EpisodeCreate(number=1, video_url="/v/2-1.mp4")])
    )
    await content.add_season_with_episodes(
        movie_id,
        SeasonCreate(number=1, episodes=[EpisodeCreate(number=2), EpisodeCreate(number=1)]),
    )

    movie = await repo.find_by_id(movie_id)

    # 2 genres x 1 category x 1 age fan out every episode row; counts must not
    assert len(movie.genres) == 2
    assert [s.number for s in movie.seasons] == [1, 2]
    assert [e.number for e in movie.seasons[0].episodes] == [1, 2]
    assert movie.seasons[1].episodes[0].video_url == "/v/2-1.mp4"


# ==================== FILTERS ====================

async def seed_for_filters(db_session, catalog):
    repo = MoviesRepository(db_session)
    drama_film = await repo.create(movie_write(
        catalog, title="Drama film", genre_ids=[catalog["drama"].id], category_ids=[catalog["popular"].id],
    ))
    comedy_film = await repo.create(movie_write(
        catalog, title="Comedy film", genre_ids=[catalog["comedy"].id], category_ids=[catalog["popular"].id],
    ))
    drama_series = await repo.create(movie_write(
        catalog, title="Drama series", movie_type_id=catalog["series"].id,
        genre_ids=[catalog["drama"].id], category_ids=[catalog["new"].id],
    ))
    return drama_film, comedy_film, drama_series


async def test_find_all_without_filters(db_session, catalog):
    ids = await seed_for_filters(db_session, catalog)

    movies = await MoviesRepository(db_session).find_all(MovieFilters())

    assert [m.id for m in movies] == sorted(ids)


async def test_find_all_by_genre(db_session, catalog):
    drama_film, _, drama_series = await seed_for_filters(db_session, catalog)

    movies = await MoviesRepository(db_session).find_all(MovieFilters(genre_id=str(catalog["drama"].id)))

    assert {m.id for m in movies} == {drama_film, drama_series}


async def test_find_all_filters_intersect(db_session, catalog):
    drama_film, _, _ = await seed_for_filters(db_session, catalog)

    movies = await MoviesRepository(db_session).find_all(MovieFilters(
        genre_id=str(catalog["drama"].id),
        category_id=str(catalog["popular"].id),
    ))

    assert [m.id for m in movies] == [drama_film]


async def test_find_all_by_type(db_session, catalog):
    _, _, drama_series = await seed_for_filters(db_session, catalog)

    movies = await MoviesRepository(db_session).find_all(MovieFilters(type_id=str(catalog["series"].id)))

    assert [m.id for m in movies] == [drama_series]
    assert movies[0].movie_type == "Series"


async def test_empty_filter_values_are_ignored(db_session, catalog):
    ids = await seed_for_filters(db_session, catalog)

    movies = await MoviesRepository(db_session).find_all(MovieFilters(genre_id="", age_id=""))

    assert len(movies) == len(ids)


# ==================== SEARCH & MEDIA ====================

async def test_search_orders_newest_first(db_session, catalog):
    repo = MoviesRepository(db_session)
    await repo.create(movie_write(catalog, title="Star Quest", release_year=1999))
    await repo.create(movie_write(catalog, title="Star Quest II", release_year=2004))
    await repo.create(movie_write(catalog, title="Other", release_year=2010))

    results = await repo.search("star")

    assert [m.title for m in results] == ["Star Quest II", "Star Quest"]


async def test_update_media_appends_screenshots(db_session, catalog):
    repo = MoviesRepository(db_session)
    movie_id = await repo.create(movie_write(catalog))

    await repo.update_media(movie_id, cover="/uploads/c.jpg", screenshots=["/uploads/1.jpg"])
    media = await repo.update_media(movie_id, screenshots=["/uploads/2.jpg"])

    assert media.cover == "/uploads/c.jpg"
    assert media.screenshots == ["/uploads/1.jpg", "/uploads/2.jpg"]


async def test_remove_media(db_session, catalog):
    repo = MoviesRepository(db_session)
    movie_id = await repo.create(movie_write(catalog))
    await repo.update_media(movie_id, cover="/uploads/c.jpg", screenshots=["/uploads/1.jpg", "/uploads/2.jpg"])

    await repo.remove_media(movie_id, "/uploads/1.jpg")
    media = await repo.remove_media(movie_id, "/uploads/c.jpg")

    assert media.cover is None
    assert media.screenshots == ["/uploads/2.jpg"]
    assert (await repo.find_by_id(movie_id)).screenshots == ["/uploads/2.jpg"]


async def test_media_of_missing_movie(db_session):
    with pytest.raises(NotFoundError):
        await MoviesRepository(db_session).get_media(999)


async def test_search_matches_wildcards_literally(db_session, catalog):
    repo = MoviesRepository(db_session)
    await repo.create(movie_write(catalog, title="50% Off"))
    await repo.create(movie_write(catalog, title="500 Days"))

    assert [m.title for m in await repo.search("0%")] == ["50% Off"]
    assert [m.title for m in await repo.search("%")] == ["50% Off"]
