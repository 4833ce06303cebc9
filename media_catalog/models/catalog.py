# media_catalog/models/catalog.py
"""Reference entities a movie points at: genres, categories and age ratings"""
from sqlalchemy import Column, Integer, String
from ..database import Base


class Genre(Base):
    __tablename__ = "genres"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), unique=True, nullable=False, index=True)
    poster_url = Column(String(500), nullable=True)

    def __repr__(self):
        return f"<Genre(id={self.id}, title={self.title})>"


class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), unique=True, nullable=False, index=True)
    poster_url = Column(String(500), nullable=True)

    def __repr__(self):
        return f"<Category(id={self.id}, title={self.title})>"


class Age(Base):
    """Age rating (e.g. 12+, 16+)"""
    __tablename__ = "ages"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), unique=True, nullable=False, index=True)
    poster_url = Column(String(500), nullable=True)

    def __repr__(self):
        return f"<Age(id={self.id}, title={self.title})>"
