from media_catalog.database import Base
from media_catalog.models.catalog import Genre, Category, Age
from media_catalog.models.movie import Movie, MovieType, movie_genres, movie_categories, movie_ages
from media_catalog.models.season import Season, Episode
from media_catalog.models.user import User, Role
from media_catalog.models.watchlist import WatchlistItem, RecommendedMovie

# This ensures all models are registered with Base.metadata
__all__ = [
    "Base", "Genre", "Category", "Age", "Movie", "MovieType",
    "movie_genres", "movie_categories", "movie_ages", "Season", "Episode",
    "User", "Role", "WatchlistItem", "RecommendedMovie",
]
