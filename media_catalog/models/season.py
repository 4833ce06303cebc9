# media_catalog/models/season.py
from sqlalchemy import Column, Integer, String, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from ..database import Base


class Season(Base):
    """A season owned by exactly one movie"""
    __tablename__ = "seasons"
    __table_args__ = (
        UniqueConstraint('movie_id', 'number', name='uq_seasons_movie_number'),
    )

    id = Column(Integer, primary_key=True, index=True)
    number = Column(Integer, nullable=False, comment="Season number within the movie")
    movie_id = Column(Integer, ForeignKey("movies.id"), nullable=False, index=True)

    movie = relationship("Movie", back_populates="seasons")
    episodes = relationship(
        "Episode",
        back_populates="season",
        order_by="Episode.number"
    )

    def __repr__(self):
        return f"<Season(id={self.id}, movie_id={self.movie_id}, number={self.number})>"


class Episode(Base):
    __tablename__ = "episodes"
    __table_args__ = (
        UniqueConstraint('season_id', 'number', name='uq_episodes_season_number'),
    )

    id = Column(Integer, primary_key=True, index=True)
    number = Column(Integer, nullable=False, comment="Episode number within the season")
    season_id = Column(Integer, ForeignKey("seasons.id"), nullable=False, index=True)
    video_url = Column(String(500), nullable=False, default="", comment="Video file URL or streaming link")

    season = relationship("Season", back_populates="episodes")

    def __repr__(self):
        return f"<Episode(id={self.id}, season_id={self.season_id}, number={self.number})>"
