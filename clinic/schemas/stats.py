from typing import List

from pydantic import BaseModel, ConfigDict, Field


class ClinicStats(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total_appointments: int = Field(..., alias="totalAppointments")
    active_doctors: int = Field(..., alias="activeDoctors")
    total_patients: int = Field(..., alias="totalPatients")
    pending_appointments: int = Field(..., alias="pendingAppointments")


class DayCount(BaseModel):
    x: str
    y: int


class WeeklySeries(BaseModel):
    id: str = "Appointments"
    color: str = "hsl(217, 70%, 50%)"
    data: List[DayCount]


class WeeklyStats(BaseModel):
    success: bool = True
    data: WeeklySeries
