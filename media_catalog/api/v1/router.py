from fastapi import APIRouter
from . import catalog, content, media, movies, public, recommendations, users

# ==================== ADMIN ====================
admin_router = APIRouter(prefix="/admin")
admin_router.include_router(movies.router)
admin_router.include_router(content.router)
admin_router.include_router(media.router)
admin_router.include_router(catalog.genres_router)
admin_router.include_router(catalog.categories_router)
admin_router.include_router(catalog.ages_router)
admin_router.include_router(catalog.movie_types_router)
admin_router.include_router(recommendations.router)
admin_router.include_router(users.users_router)
admin_router.include_router(users.roles_router)
admin_router.include_router(users.search_router)

# ==================== PUBLIC ====================
public_router = APIRouter(prefix="/public")
public_router.include_router(public.auth_router)
public_router.include_router(public.router)

api_router = APIRouter()
api_router.include_router(admin_router)
api_router.include_router(public_router)

__all__ = ["api_router"]
