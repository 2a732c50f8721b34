from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.dependencies import get_current_user
from app.db.session import get_db

from .schemas import DashboardStats
from . import service

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


@router.get(
    "/stats",
    response_model=DashboardStats,
    dependencies=[Depends(get_current_user)],
)
async def dashboard_stats(
    db: AsyncSession = Depends(get_db),
) -> DashboardStats:
    return await service.get_dashboard_stats(db)
