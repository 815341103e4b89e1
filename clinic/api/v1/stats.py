from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...core.database import get_db
from ...core.security import TokenPayload
from ...api.deps import get_admin_token, get_staff_token
from ...services.stats_service import StatsService
from ...schemas.stats import ClinicStats, WeeklyStats

router = APIRouter(prefix="/stats", tags=["Stats"])


@router.get("", response_model=ClinicStats)
async def get_clinic_stats(
    db: Session = Depends(get_db),
    _: TokenPayload = Depends(get_admin_token)
):
    return StatsService(db).clinic_stats()


@router.get("/doctor", response_model=ClinicStats)
async def get_doctor_stats(
    doctor_id: int = Query(..., alias="doctorId"),
    db: Session = Depends(get_db),
    _: TokenPayload = Depends(get_staff_token)
):
    return StatsService(db).clinic_stats(doctor_id)


@router.get("/weekly", response_model=WeeklyStats)
async def get_weekly_stats(
    db: Session = Depends(get_db),
    _: TokenPayload = Depends(get_staff_token)
):
    """Pending appointments per day of the current week, chart-ready."""
    return StatsService(db).weekly_pending()
