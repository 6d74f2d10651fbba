"""Admin maintenance routes for the role cache (admin tier)."""

from fastapi import APIRouter

from core.dependencies import RoleCacheDep
from schemas.permission import RoleCacheStats

router = APIRouter(prefix="/api/admin", tags=["Admin"])


@router.get("/cache", response_model=RoleCacheStats, summary="Role cache statistics")
def get_cache_stats(role_cache: RoleCacheDep) -> RoleCacheStats:
    role_cache.cleanup()
    return RoleCacheStats(**role_cache.get_stats())


@router.delete("/cache", summary="Clear the role cache")
def clear_cache(role_cache: RoleCacheDep) -> dict:
    role_cache.invalidate()
    return {"success": True, "message": "Role cache cleared"}


@router.delete("/cache/{email}", summary="Refresh one email's cached role")
def invalidate_cache_entry(email: str, role_cache: RoleCacheDep) -> dict:
    role_cache.invalidate(email)
    return {"success": True, "message": f"Role cache entry for {email.lower()} removed"}
