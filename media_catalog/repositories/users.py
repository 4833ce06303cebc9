# media_catalog/repositories/users.py
import logging
from typing import List, Optional

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..exceptions import ConflictError, NotFoundError
from ..models import Role, User, WatchlistItem
from ..schemas.user import ProfileUpdate, RoleCreate
from ..utils.security import get_password_hash, verify_password

module_logger = logging.getLogger(__name__)


class UsersRepository:
    def __init__(self, db: AsyncSession, logger: Optional[logging.Logger] = None):
        self.db = db
        self.logger = logger or module_logger

    async def find_all(self) -> List[User]:
        result = await self.db.execute(select(User).order_by(User.id))
        return list(result.scalars().all())

    async def find_by_id(self, user_id: int) -> User:
        user = await self.db.get(User, user_id)
        if user is None:
            raise NotFoundError("User", user_id)
        return user

    async def find_by_email(self, email: str) -> Optional[User]:
        result = await self.db.execute(select(User).where(func.lower(User.email) == email.lower()))
        return result.scalar_one_or_none()

    async def create(self, email: str, password: str, name: Optional[str] = None, role_id: Optional[int] = None) -> User:
        if await self.find_by_email(email) is not None:
            raise ConflictError(f"Email {email} is already registered")

        user = User(
            email=email.lower(),
            password_hash=get_password_hash(password),
            name=name,
            role_id=role_id,
        )
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            raise ConflictError(f"Email {email} is already registered") from e
        await self.db.refresh(user)
        self.logger.info(f"User registered: {user.email} (ID: {user.id})")
        return user

    async def authenticate(self, email: str, password: str) -> Optional[User]:
        """None when the email is unknown or the password does not match"""
        user = await self.find_by_email(email)
        if user is None or not verify_password(password, user.password_hash):
            return None
        return user

    async def update_profile(self, user_id: int, data: ProfileUpdate) -> User:
        user = await self.find_by_id(user_id)
        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(user, field, value)
        await self.db.commit()
        await self.db.refresh(user)
        return user

    async def change_password(self, user_id: int, current_password: str, new_password: str) -> bool:
        """False when current_password is wrong; nothing is written then"""
        user = await self.find_by_id(user_id)
        if not verify_password(current_password, user.password_hash):
            return False
        user.password_hash = get_password_hash(new_password)
        await self.db.commit()
        self.logger.info(f"Password changed for user {user_id}")
        return True

    async def assign_role(self, user_id: int, role_id: int) -> User:
        user = await self.find_by_id(user_id)
        if await self.db.get(Role, role_id) is None:
            raise NotFoundError("Role", role_id)
        user.role_id = role_id
        await self.db.commit()
        await self.db.refresh(user)
        self.logger.info(f"Role {role_id} assigned to user {user_id}")
        return user

    async def delete(self, user_id: int) -> None:
        user = await self.find_by_id(user_id)
        await self.db.execute(
            WatchlistItem.__table__.delete().where(WatchlistItem.user_id == user_id)
        )
        await self.db.delete(user)
        await self.db.commit()
        self.logger.info(f"User deleted (ID: {user_id})")


class RolesRepository:
    def __init__(self, db: AsyncSession, logger: Optional[logging.Logger] = None):
        self.db = db
        self.logger = logger or module_logger

    async def find_all(self) -> List[Role]:
        result = await self.db.execute(select(Role).order_by(Role.id))
        return list(result.scalars().all())

    async def find_by_id(self, role_id: int) -> Role:
        role = await self.db.get(Role, role_id)
        if role is None:
            raise NotFoundError("Role", role_id)
        return role

    async def find_by_name(self, name: str) -> Optional[Role]:
        result = await self.db.execute(select(Role).where(Role.name == name))
        return result.scalar_one_or_none()

    async def create(self, data: RoleCreate) -> Role:
        role = Role(**data.model_dump())
        self.db.add(role)
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            raise ConflictError(f"Role '{data.name}' already exists") from e
        await self.db.refresh(role)
        self.logger.info(f"Role created: {role.name} (ID: {role.id})")
        return role

    async def update(self, role_id: int, data: RoleCreate) -> Role:
        role = await self.find_by_id(role_id)
        for field, value in data.model_dump().items():
            setattr(role, field, value)
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            raise ConflictError(f"Role '{data.name}' already exists") from e
        await self.db.refresh(role)
        return role

    async def delete(self, role_id: int) -> None:
        """Users holding the role are left without one"""
        role = await self.find_by_id(role_id)
        await self.db.execute(
            update(User).where(User.role_id == role_id).values(role_id=None)
        )
        await self.db.delete(role)
        await self.db.commit()
        self.logger.info(f"Role deleted (ID: {role_id})")
