# media_catalog/models/user.py
from sqlalchemy import Column, Integer, String, Boolean, Date, DateTime, ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from ..database import Base


class Role(Base):
    """
    Admin role with flat permission flags.
    Each flag unlocks one admin route group.
    """
    __tablename__ = "roles"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), unique=True, nullable=False)

    can_edit_projects = Column(Boolean, default=False, nullable=False)
    can_edit_categories = Column(Boolean, default=False, nullable=False)
    can_edit_users = Column(Boolean, default=False, nullable=False)
    can_edit_roles = Column(Boolean, default=False, nullable=False)
    can_edit_genres = Column(Boolean, default=False, nullable=False)
    can_edit_ages = Column(Boolean, default=False, nullable=False)

    users = relationship("User", back_populates="role")

    def __repr__(self):
        return f"<Role(id={self.id}, name={self.name})>"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    name = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)
    birthday = Column(Date, nullable=True)
    role_id = Column(Integer, ForeignKey("roles.id", ondelete="SET NULL"), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    role = relationship("Role", back_populates="users")

    def __repr__(self):
        return f"<User(id={self.id}, email={self.email})>"
