# media_catalog/repositories/movie_reducer.py
"""
Flat-to-tree reduction of the aggregate movie query.

The joined result set repeats every movie once per combination of
genre x category x age x (season, episode). The reducer keeps one
accumulator per movie id, an arena of insertion-ordered dicts keyed by the
related ids, and flattens it into immutable MovieRead records at the end.

Column contract (labels produced by movie_query.build_aggregate_select):

    movie_id, title, description, release_year, runtime, director,
    producer, keywords, cover, screenshots,
    movie_type_id, movie_type_title,
    genre_id, genre_title, category_id, category_title, age_id, age_title,
    season_id, season_number, season_movie_id,
    episode_id, episode_number, episode_video_url, episode_season_id

Id 0 in any related column means the outer join found no row.
"""
from typing import Any, Dict, Iterable, List, Mapping, Optional

from ..exceptions import NotFoundError, ScanError
from ..schemas.movie import EpisodeRead, MovieRead, ReferenceItem, SeasonRead
from .movie_query import SENTINEL_ID


def _mapping(row: Any) -> Mapping[str, Any]:
    # sqlalchemy Row exposes a read-only mapping; plain dicts are accepted as-is
    return getattr(row, "_mapping", row)


def _read_int(row: Mapping[str, Any], key: str) -> int:
    try:
        value = row[key]
    except KeyError:
        raise ScanError(f"missing column '{key}'")
    if isinstance(value, bool) or not isinstance(value, int):
        raise ScanError(f"column '{key}' expected int, got {type(value).__name__}")
    return value


def _read_str(row: Mapping[str, Any], key: str) -> str:
    try:
        value = row[key]
    except KeyError:
        raise ScanError(f"missing column '{key}'")
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ScanError(f"column '{key}' expected str, got {type(value).__name__}")
    return value


def _read_str_list(row: Mapping[str, Any], key: str) -> List[str]:
    try:
        value = row[key]
    except KeyError:
        raise ScanError(f"missing column '{key}'")
    if value is None:
        return []
    if not isinstance(value, (list, tuple)) or not all(isinstance(item, str) for item in value):
        raise ScanError(f"column '{key}' expected a list of strings")
    return list(value)


class SeasonAccumulator:
    __slots__ = ("id", "number", "movie_id", "episodes")

    def __init__(self, season_id: int, number: int, movie_id: int):
        self.id = season_id
        self.number = number
        self.movie_id = movie_id
        self.episodes: Dict[int, EpisodeRead] = {}

    def absorb(self, row: Mapping[str, Any]) -> None:
        episode_id = _read_int(row, "episode_id")
        if episode_id == SENTINEL_ID or episode_id in self.episodes:
            return
        self.episodes[episode_id] = EpisodeRead(
            id=episode_id,
            number=_read_int(row, "episode_number"),
            season_id=_read_int(row, "episode_season_id"),
            video_url=_read_str(row, "episode_video_url"),
        )

    def build(self) -> SeasonRead:
        return SeasonRead(
            id=self.id,
            number=self.number,
            movie_id=self.movie_id,
            episodes=sorted(self.episodes.values(), key=lambda episode: episode.number),
        )


class MovieAccumulator:
    """
    Mutable builder for one movie.

    Scalar fields are captured from the first row seen for the movie id and
    never rewritten; every nested collection is a dict keyed by the related
    id, which doubles as the dedup index.
    """

    def __init__(self, row: Mapping[str, Any]):
        self.fields = {
            "id": _read_int(row, "movie_id"),
            "title": _read_str(row, "title"),
            "description": _read_str(row, "description"),
            "release_year": _read_int(row, "release_year"),
            "runtime": _read_int(row, "runtime"),
            "director": _read_str(row, "director"),
            "producer": _read_str(row, "producer"),
            "keywords": _read_str_list(row, "keywords"),
            "cover": _read_str(row, "cover"),
            "screenshots": _read_str_list(row, "screenshots"),
            "movie_type_id": _read_int(row, "movie_type_id"),
            "movie_type": _read_str(row, "movie_type_title"),
        }
        self.genres: Dict[int, ReferenceItem] = {}
        self.categories: Dict[int, ReferenceItem] = {}
        self.ages: Dict[int, ReferenceItem] = {}
        self.seasons: Dict[int, SeasonAccumulator] = {}

    @staticmethod
    def _add_reference(target: Dict[int, ReferenceItem], row: Mapping[str, Any], prefix: str) -> None:
        ref_id = _read_int(row, f"{prefix}_id")
        if ref_id == SENTINEL_ID or ref_id in target:
            return
        target[ref_id] = ReferenceItem(id=ref_id, title=_read_str(row, f"{prefix}_title"))

    def absorb(self, row: Mapping[str, Any]) -> None:
        self._add_reference(self.genres, row, "genre")
        self._add_reference(self.categories, row, "category")
        self._add_reference(self.ages, row, "age")

        season_id = _read_int(row, "season_id")
        if season_id == SENTINEL_ID:
            return
        season = self.seasons.get(season_id)
        if season is None:
            season = SeasonAccumulator(
                season_id,
                number=_read_int(row, "season_number"),
                movie_id=_read_int(row, "season_movie_id"),
            )
            self.seasons[season_id] = season
        season.absorb(row)

    def build(self) -> MovieRead:
        seasons = sorted(
            (season.build() for season in self.seasons.values()),
            key=lambda season: season.number,
        )
        return MovieRead(
            **self.fields,
            genres=list(self.genres.values()),
            categories=list(self.categories.values()),
            ages=list(self.ages.values()),
            seasons=seasons,
        )


class MovieRowReducer:
    """Folds aggregate rows into MovieRead records, keyed by movie id"""

    def __init__(self):
        self._movies: Dict[int, MovieAccumulator] = {}

    def feed(self, row: Any) -> None:
        row = _mapping(row)
        movie_id = _read_int(row, "movie_id")
        movie = self._movies.get(movie_id)
        if movie is None:
            movie = MovieAccumulator(row)
            self._movies[movie_id] = movie
        movie.absorb(row)

    def feed_all(self, rows: Iterable[Any]) -> "MovieRowReducer":
        for index, row in enumerate(rows):
            try:
                self.feed(row)
            except ScanError as e:
                raise ScanError(str(e), row_index=index) from e
        return self

    def __len__(self) -> int:
        return len(self._movies)

    def movies(self) -> List[MovieRead]:
        return [movie.build() for movie in self._movies.values()]


def reduce_movie_rows(rows: Iterable[Any]) -> List[MovieRead]:
    """Reduce a whole result set; a malformed row aborts with ScanError"""
    return MovieRowReducer().feed_all(rows).movies()


def reduce_single_movie(rows: Iterable[Any], movie_id: Optional[int] = None) -> MovieRead:
    """Reduce the rows of a by-id lookup; no rows means the movie does not exist"""
    movies = reduce_movie_rows(rows)
    if not movies:
        raise NotFoundError("Movie", movie_id)
    return movies[0]
