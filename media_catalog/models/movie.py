# media_catalog/models/movie.py
"""
Movie aggregate root and its junction tables.

A movie owns its seasons (and through them, episodes) and holds
non-owning references to genres, categories and age ratings via the
movie_genres / movie_categories / movie_ages association tables.
"""
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, JSON, Table
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from ..database import Base

# Association tables for the many-to-many references
movie_genres = Table(
    'movie_genres',
    Base.metadata,
    Column('movie_id', Integer, ForeignKey('movies.id'), primary_key=True),
    Column('genre_id', Integer, ForeignKey('genres.id'), primary_key=True)
)

movie_categories = Table(
    'movie_categories',
    Base.metadata,
    Column('movie_id', Integer, ForeignKey('movies.id'), primary_key=True),
    Column('category_id', Integer, ForeignKey('categories.id'), primary_key=True)
)

movie_ages = Table(
    'movie_ages',
    Base.metadata,
    Column('movie_id', Integer, ForeignKey('movies.id'), primary_key=True),
    Column('age_id', Integer, ForeignKey('ages.id'), primary_key=True)
)


class MovieType(Base):
    __tablename__ = "movie_types"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), unique=True, nullable=False)
    poster_url = Column(String(500), nullable=True)

    def __repr__(self):
        return f"<MovieType(id={self.id}, title={self.title})>"


class Movie(Base):
    __tablename__ = "movies"

    # ==================== PRIMARY KEY ====================
    # Id 0 is reserved as the "no related row" sentinel in aggregate queries;
    # autoincrement starts at 1.
    id = Column(Integer, primary_key=True, index=True)

    # ==================== BASIC INFO ====================
    title = Column(String(255), nullable=False, index=True)
    description = Column(Text, nullable=False, default="")
    release_year = Column(Integer, nullable=False, default=0)
    runtime = Column(Integer, nullable=False, default=0)  # minutes
    director = Column(String(255), nullable=False, default="")
    producer = Column(String(255), nullable=False, default="")
    keywords = Column(JSON, nullable=False, default=list)  # ["space", "heist"]

    # ==================== MEDIA ====================
    cover = Column(String(500), nullable=True)
    screenshots = Column(JSON, nullable=True)  # ordered list of paths

    # ==================== REFERENCES ====================
    movie_type_id = Column(Integer, ForeignKey('movie_types.id'), nullable=True)

    # ==================== TIMESTAMPS ====================
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # ==================== RELATIONSHIPS ====================
    movie_type = relationship("MovieType", foreign_keys=[movie_type_id])
    genres = relationship("Genre", secondary=movie_genres)
    categories = relationship("Category", secondary=movie_categories)
    ages = relationship("Age", secondary=movie_ages)
    seasons = relationship(
        "Season",
        back_populates="movie",
        order_by="Season.number"
    )

    def __repr__(self):
        return f"<Movie(id={self.id}, title='{self.title}')>"
