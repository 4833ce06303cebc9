# media_catalog/api/v1/users.py
"""Admin user management, roles and the cross-entity search"""
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from ...database import get_async_db
from ...models.user import User
from ...repositories.search import SearchRepository
from ...repositories.users import RolesRepository, UsersRepository
from ...schemas.user import RoleAssign, RoleCreate, RoleRead, UserRead
from ..deps import require_admin, require_permission

logger = logging.getLogger(__name__)

users_router = APIRouter(
    prefix="/users",
    tags=["users"],
    dependencies=[Depends(require_permission("can_edit_users"))],
)
roles_router = APIRouter(
    prefix="/roles",
    tags=["roles"],
    dependencies=[Depends(require_permission("can_edit_roles"))],
)
search_router = APIRouter(tags=["search"])


# ==================== USERS ====================

@users_router.get("")
async def list_users(db: AsyncSession = Depends(get_async_db)):
    users = await UsersRepository(db, logger).find_all()
    return {"total": len(users), "data": [UserRead.model_validate(user).model_dump() for user in users]}


@users_router.get("/{user_id}")
async def get_user(user_id: int, db: AsyncSession = Depends(get_async_db)):
    user = await UsersRepository(db, logger).find_by_id(user_id)
    return {"data": UserRead.model_validate(user).model_dump()}


@users_router.put("/{user_id}/role")
async def assign_role(user_id: int, data: RoleAssign, db: AsyncSession = Depends(get_async_db)):
    user = await UsersRepository(db, logger).assign_role(user_id, data.role_id)
    return {"data": UserRead.model_validate(user).model_dump()}


@users_router.delete("/{user_id}")
async def delete_user(
    user_id: int,
    db: AsyncSession = Depends(get_async_db),
    current_user: User = Depends(require_permission("can_edit_users")),
):
    if current_user.id == user_id:
        raise HTTPException(status_code=400, detail="You cannot delete your own account")
    await UsersRepository(db, logger).delete(user_id)
    return {"message": "User deleted successfully"}


# ==================== ROLES ====================

@roles_router.get("")
async def list_roles(db: AsyncSession = Depends(get_async_db)):
    roles = await RolesRepository(db, logger).find_all()
    return {"data": [RoleRead.model_validate(role).model_dump() for role in roles]}


@roles_router.get("/{role_id}")
async def get_role(role_id: int, db: AsyncSession = Depends(get_async_db)):
    role = await RolesRepository(db, logger).find_by_id(role_id)
    return {"data": RoleRead.model_validate(role).model_dump()}


@roles_router.post("", status_code=status.HTTP_201_CREATED)
async def create_role(data: RoleCreate, db: AsyncSession = Depends(get_async_db)):
    role = await RolesRepository(db, logger).create(data)
    return {"data": RoleRead.model_validate(role).model_dump()}


@roles_router.put("/{role_id}")
async def update_role(role_id: int, data: RoleCreate, db: AsyncSession = Depends(get_async_db)):
    role = await RolesRepository(db, logger).update(role_id, data)
    return {"data": RoleRead.model_validate(role).model_dump()}


@roles_router.delete("/{role_id}")
async def delete_role(role_id: int, db: AsyncSession = Depends(get_async_db)):
    await RolesRepository(db, logger).delete(role_id)
    return {"message": "Role deleted successfully"}


# ==================== SEARCH ====================

@search_router.get("/search", dependencies=[Depends(require_admin)])
async def search_all(
    q: str = Query(..., min_length=1, description="Case-insensitive substring"),
    db: AsyncSession = Depends(get_async_db)
):
    results = await SearchRepository(db, logger).search_all(q)
    return {"total": len(results), "data": results}
