from pydantic import BaseModel, Field
from typing import List, Optional


class MovieFilters(BaseModel):
    """
    Optional single-value id filters for movie listings.
    An empty string means "no filter on this dimension".
    Values are kept as strings and cast by the database.
    """
    genre_id: Optional[str] = None
    category_id: Optional[str] = None
    type_id: Optional[str] = None
    age_id: Optional[str] = None

    class Config:
        frozen = True


class ReferenceItem(BaseModel):
    """Genre, category or age rating as embedded in a movie"""
    id: int
    title: str

    class Config:
        frozen = True


class EpisodeRead(BaseModel):
    id: int
    number: int
    season_id: int
    video_url: str

    class Config:
        frozen = True


class SeasonRead(BaseModel):
    id: int
    number: int
    movie_id: int
    episodes: List[EpisodeRead] = []

    class Config:
        frozen = True


class MovieRead(BaseModel):
    """Fully reconstructed movie aggregate"""
    id: int
    title: str
    description: str
    release_year: int
    runtime: int
    director: str
    producer: str
    keywords: List[str] = []
    cover: str = ""
    screenshots: List[str] = []
    movie_type_id: int = 0
    movie_type: str = ""
    genres: List[ReferenceItem] = []
    categories: List[ReferenceItem] = []
    ages: List[ReferenceItem] = []
    seasons: List[SeasonRead] = []

    class Config:
        frozen = True


class MovieSummary(BaseModel):
    """Flat movie row without nested collections (search, watchlist, homepage)"""
    id: int
    title: str
    description: str
    release_year: int
    runtime: int
    director: str
    producer: str
    keywords: List[str] = []
    cover: Optional[str] = None
    screenshots: Optional[List[str]] = None
    movie_type_id: Optional[int] = None

    class Config:
        from_attributes = True


class MovieWrite(BaseModel):
    """
    Movie as handed to the repository for create/update.
    Reference ids are expected to be validated beforehand.
    """
    id: Optional[int] = None
    title: str
    description: str = ""
    release_year: int = 0
    runtime: int = 0
    director: str = ""
    producer: str = ""
    keywords: List[str] = []
    movie_type_id: Optional[int] = None
    genre_ids: List[int] = []
    category_ids: List[int] = []
    age_ids: List[int] = []


class MovieRequest(BaseModel):
    """Request body for creating or updating a movie"""
    title: str = Field(..., min_length=1)
    description: str = ""
    release_year: int = 0
    runtime: int = 0
    director: str = ""
    producer: str = ""
    keywords: List[str] = []
    movie_type_id: int
    genres: List[int] = []
    categories: List[int] = []
    ages: List[int] = []

    def to_write(self, movie_id: Optional[int] = None) -> MovieWrite:
        return MovieWrite(
            id=movie_id,
            title=self.title,
            description=self.description,
            release_year=self.release_year,
            runtime=self.runtime,
            director=self.director,
            producer=self.producer,
            keywords=self.keywords,
            movie_type_id=self.movie_type_id,
            genre_ids=self.genres,
            category_ids=self.categories,
            age_ids=self.ages,
        )


class MovieMedia(BaseModel):
    cover: Optional[str] = None
    screenshots: List[str] = []
