import pytest
from sqlalchemy import func, select

from media_catalog.exceptions import ConflictError, NotFoundError, UnknownReferenceError
from media_catalog.models import Movie, movie_genres
from media_catalog.repositories.catalog import (
    GenresRepository, MovieTypesRepository, validate_movie_references,
)
from media_catalog.repositories.content import ContentService, EpisodesRepository, SeasonsRepository
from media_catalog.repositories.movies import MoviesRepository
from media_catalog.schemas.catalog import ReferenceCreate, ReferenceUpdate
from media_catalog.schemas.content import EpisodeCreate, EpisodeUpdate, SeasonCreate
from media_catalog.schemas.movie import MovieWrite

pytestmark = pytest.mark.anyio


async def create_movie(db_session, catalog, **overrides) -> int:
    data = dict(
        title="Dark",
        movie_type_id=catalog["series"].id,
        genre_ids=[catalog["drama"].id],
    )
    data.update(overrides)
    return await MoviesRepository(db_session).create(MovieWrite(**data))


# ==================== REFERENCE TABLES ====================

async def test_genre_crud(db_session):
    repo = GenresRepository(db_session)

    genre = await repo.create(ReferenceCreate(title="Horror", poster_url="/uploads/horror.png"))
    assert (await repo.find_by_id(genre.id)).title == "Horror"

    updated = await repo.update(genre.id, ReferenceUpdate(title="Slasher"))
    assert updated.title == "Slasher"
    assert updated.poster_url == "/uploads/horror.png"

    await repo.delete(genre.id)
    with pytest.raises(NotFoundError):
        await repo.find_by_id(genre.id)


async def test_duplicate_genre_title_conflicts(db_session, catalog):
    with pytest.raises(ConflictError):
        await GenresRepository(db_session).create(ReferenceCreate(title="Drama"))


async def test_find_all_by_ids_ignores_unknown(db_session, catalog):
    found = await GenresRepository(db_session).find_all_by_ids([catalog["drama"].id, 999])
    assert [g.title for g in found] == ["Drama"]


async def test_require_all_lists_missing_ids(db_session, catalog):
    with pytest.raises(UnknownReferenceError) as exc_info:
        await GenresRepository(db_session).require_all([catalog["drama"].id, 998, 999])

    assert exc_info.value.missing_ids == [998, 999]
    assert exc_info.value.entity == "Genre"


async def test_validate_movie_references(db_session, catalog):
    await validate_movie_references(
        db_session, catalog["film"].id, [catalog["drama"].id], [catalog["new"].id], []
    )
    with pytest.raises(UnknownReferenceError):
        await validate_movie_references(db_session, catalog["film"].id, [], [], [555])
    with pytest.raises(UnknownReferenceError):
        await validate_movie_references(db_session, 555, [], [], [])


async def test_deleting_genre_detaches_movies(db_session, catalog):
    drama_id = catalog["drama"].id
    movie_id = await create_movie(db_session, catalog)

    await GenresRepository(db_session).delete(drama_id)

    remaining = await db_session.execute(
        select(func.count()).select_from(movie_genres).where(movie_genres.c.genre_id == drama_id)
    )
    assert remaining.scalar_one() == 0
    assert (await MoviesRepository(db_session).find_by_id(movie_id)).genres == []


async def test_deleting_movie_type_clears_reference(db_session, catalog):
    series_id = catalog["series"].id
    movie_id = await create_movie(db_session, catalog)

    await MovieTypesRepository(db_session).delete(series_id)

    type_id = (await db_session.execute(select(Movie.movie_type_id).where(Movie.id == movie_id))).scalar_one()
    assert type_id is None
    movie = await MoviesRepository(db_session).find_by_id(movie_id)
    assert movie.movie_type_id == 0
    assert movie.movie_type == ""


# ==================== SEASONS & EPISODES ====================

async def test_add_season_skips_duplicate_episodes(db_session, catalog):
    movie_id = await create_movie(db_session, catalog)

    season = await ContentService(db_session).add_season_with_episodes(
        movie_id,
        SeasonCreate(number=1, episodes=[
            EpisodeCreate(number=1, video_url="/v/1.mp4"),
            EpisodeCreate(number=1, video_url="/v/dup.mp4"),
            EpisodeCreate(number=2, video_url="/v/2.mp4"),
        ]),
    )

    episodes = await EpisodesRepository(db_session).find_all_by_season_id(season.id)
    assert [(e.number, e.video_url) for e in episodes] == [(1, "/v/1.mp4"), (2, "/v/2.mp4")]


async def test_duplicate_season_number_conflicts(db_session, catalog):
    movie_id = await create_movie(db_session, catalog)
    content = ContentService(db_session)
    await content.add_season_with_episodes(movie_id, SeasonCreate(number=1))

    with pytest.raises(ConflictError):
        await content.add_season_with_episodes(movie_id, SeasonCreate(number=1))

    assert len(await SeasonsRepository(db_session).find_all_by_movie_id(movie_id)) == 1


async def test_update_season_renumbers_and_skips_foreign_episodes(db_session, catalog):
    movie_id = await create_movie(db_session, catalog)
    content = ContentService(db_session)
    first = await content.add_season_with_episodes(
        movie_id, SeasonCreate(number=1, episodes=[EpisodeCreate(number=1)])
    )
    second = await content.add_season_with_episodes(
        movie_id, SeasonCreate(number=2, episodes=[EpisodeCreate(number=1)])
    )
    own_episode = (await EpisodesRepository(db_session).find_all_by_season_id(first.id))[0]
    foreign_episode = (await EpisodesRepository(db_session).find_all_by_season_id(second.id))[0]

    await content.update_season(movie_id, first.id, 3, [
        EpisodeUpdate(id=own_episode.id, number=5, video_url="/v/new.mp4"),
        EpisodeUpdate(id=foreign_episode.id, number=9, video_url="/v/hijack.mp4"),
        EpisodeUpdate(id=999, number=1),
    ])

    movie = await MoviesRepository(db_session).find_by_id(movie_id)
    assert [s.number for s in movie.seasons] == [2, 3]
    assert movie.seasons[1].episodes[0].number == 5
    assert movie.seasons[1].episodes[0].video_url == "/v/new.mp4"
    assert movie.seasons[0].episodes[0].video_url == ""


async def test_season_of_other_movie_is_not_found(db_session, catalog):
    movie_id = await create_movie(db_session, catalog)
    other_id = await create_movie(db_session, catalog, title="Other")
    season = await ContentService(db_session).add_season_with_episodes(movie_id, SeasonCreate(number=1))

    with pytest.raises(NotFoundError):
        await SeasonsRepository(db_session).find_for_movie(other_id, season.id)


async def test_delete_season_removes_episodes(db_session, catalog):
    movie_id = await create_movie(db_session, catalog)
    season = await ContentService(db_session).add_season_with_episodes(
        movie_id, SeasonCreate(number=1, episodes=[EpisodeCreate(number=1), EpisodeCreate(number=2)])
    )
    season_id = season.id

    await SeasonsRepository(db_session).delete(season_id)

    assert await EpisodesRepository(db_session).find_all_by_season_id(season_id) == []
    assert (await MoviesRepository(db_session).find_by_id(movie_id)).seasons == []


async def test_deleted_season_and_episode_are_not_found(db_session, catalog):
    movie_id = await create_movie(db_session, catalog)
    season = await ContentService(db_session).add_season_with_episodes(
        movie_id, SeasonCreate(number=1, episodes=[EpisodeCreate(number=1), EpisodeCreate(number=2)])
    )
    episodes = EpisodesRepository(db_session)
    first, second = await episodes.find_all_by_season_id(season.id)

    await episodes.delete(first.id)
    with pytest.raises(NotFoundError):
        await episodes.find_by_id(first.id)

    await SeasonsRepository(db_session).delete(season.id)
    with pytest.raises(NotFoundError):
        await SeasonsRepository(db_session).find_by_id(season.id)
    with pytest.raises(NotFoundError):
        await episodes.find_by_id(second.id)


async def test_update_season_swaps_episode_numbers(db_session, catalog):
    movie_id = await create_movie(db_session, catalog)
    content = ContentService(db_session)
    season = await content.add_season_with_episodes(
        movie_id, SeasonCreate(number=1, episodes=[
            EpisodeCreate(number=1, video_url="/v/a.mp4"),
            EpisodeCreate(number=2, video_url="/v/b.mp4"),
        ])
    )
    a, b = await EpisodesRepository(db_session).find_all_by_season_id(season.id)

    await content.update_season(movie_id, season.id, 1, [
        EpisodeUpdate(id=a.id, number=2, video_url="/v/a.mp4"),
        EpisodeUpdate(id=b.id, number=1, video_url="/v/b.mp4"),
    ])

    episodes = await EpisodesRepository(db_session).find_all_by_season_id(season.id)
    assert [(e.number, e.video_url) for e in episodes] == [(1, "/v/b.mp4"), (2, "/v/a.mp4")]


async def test_update_season_rejects_clashing_episode_numbers(db_session, catalog):
    movie_id = await create_movie(db_session, catalog)
    content = ContentService(db_session)
    season = await content.add_season_with_episodes(
        movie_id, SeasonCreate(number=1, episodes=[EpisodeCreate(number=1), EpisodeCreate(number=2)])
    )
    a, _ = await EpisodesRepository(db_session).find_all_by_season_id(season.id)

    with pytest.raises(ConflictError):
        await content.update_season(movie_id, season.id, 1, [EpisodeUpdate(id=a.id, number=2)])
