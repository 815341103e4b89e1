from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..models.appointment import AppointmentPurpose, AppointmentStatus, SlotPeriod
from .patient import DiagnosisIn, ImmunizationForm, PrenatalForm, VitalSignsIn


class AppointmentCreate(BaseModel):
    """Booking request sent by the patient portal.

    Exactly one intake form is expected, the one matching ``purpose``.
    """

    doctor_id: int
    selected_date: date
    slot_period: SlotPeriod
    purpose: AppointmentPurpose
    prenatal: Optional[PrenatalForm] = None
    immunization: Optional[ImmunizationForm] = None

    @model_validator(mode="after")
    def check_form_matches_purpose(self):
        if self.purpose == AppointmentPurpose.PRENATAL and self.prenatal is None:
            raise ValueError("A prenatal form is required for a Prenatal appointment")
        if self.purpose == AppointmentPurpose.IMMUNIZATION and self.immunization is None:
            raise ValueError("An immunization form is required for an Immunization appointment")
        return self


class AppointmentUpdate(BaseModel):
    """Staff edits. Doctor and date always follow the chosen schedule."""

    schedule_id: Optional[int] = None
    purpose_of_appointment: Optional[AppointmentPurpose] = None
    slot: Optional[SlotPeriod] = None
    status: Optional[AppointmentStatus] = None


class AppointmentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    doctor_id: int
    schedule_id: int
    patient_id: Optional[int] = None
    prenatal_id: Optional[int] = None
    immunization_id: Optional[int] = None
    purpose_of_appointment: AppointmentPurpose
    appointment_date: date
    slot: SlotPeriod
    status: AppointmentStatus
    remarks: Optional[str] = None
    created_at: Optional[datetime] = None


class AppointmentSummary(BaseModel):
    """One row of the doctor/admin appointment tables."""

    appointment_id: int
    user_id: int
    user_name: str
    user_email: str
    avatar: Optional[str] = None
    address: Optional[str] = None
    phone_number: Optional[str] = None
    purpose_of_appointment: AppointmentPurpose
    appointment_date: date
    status: AppointmentStatus
    slot: SlotPeriod


class AppointmentsBySlot(BaseModel):
    AM: List[AppointmentSummary] = []
    PM: List[AppointmentSummary] = []


class AppointmentDetail(BaseModel):
    appointment_id: int
    status: AppointmentStatus
    purpose_of_appointment: AppointmentPurpose
    appointment_date: date
    slot: SlotPeriod
    user_id: Optional[int] = None
    user_name: Optional[str] = None
    user_email: Optional[str] = None
    doctor_id: int
    doctor_name: str
    doctor_specialty_id: Optional[int] = None
    schedule_id: int
    schedule_date: date


class RemarksRequest(BaseModel):
    remarks: str = Field(..., min_length=1)
    vital_signs: Optional[VitalSignsIn] = None
    diagnosis: Optional[DiagnosisIn] = None
