from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class PrenatalForm(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    age: Optional[int] = Field(None, ge=0, le=120)
    address: Optional[str] = None
    occupation: Optional[str] = None
    husband_name: Optional[str] = None
    husband_age: Optional[int] = Field(None, ge=0, le=120)


class PrenatalInfoCreate(PrenatalForm):
    user_id: Optional[int] = None


class PrenatalInfoResponse(PrenatalForm):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: Optional[int] = None
    created_at: Optional[datetime] = None


class ImmunizationForm(BaseModel):
    child_name: str = Field(..., min_length=1, max_length=255)
    birthdate: Optional[date] = None
    birthplace: Optional[str] = None
    address: Optional[str] = None
    mother_name: Optional[str] = None
    father_name: Optional[str] = None
    birth_height: Optional[float] = Field(None, ge=0)
    birth_weight: Optional[float] = Field(None, ge=0)
    sex: Optional[str] = None
    health_center: Optional[str] = None
    barangay: Optional[str] = None
    family_number: Optional[str] = None


class ImmunizationInfoResponse(ImmunizationForm):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: Optional[int] = None
    created_at: Optional[datetime] = None


class VitalSignsIn(BaseModel):
    height: Optional[str] = None
    weight: Optional[str] = None
    bp: Optional[str] = None
    blood_type: Optional[str] = None
    prescription: Optional[str] = None


class DiagnosisIn(BaseModel):
    diagnosis_text: str = Field(..., min_length=1)
    doctor_id: Optional[int] = None


class PatientDetails(BaseModel):
    remarks: Optional[str] = None
    height: Optional[str] = None
    weight: Optional[str] = None
    bp: Optional[str] = None
    blood_type: Optional[str] = None
    prescription: Optional[str] = None
    diagnosis: Optional[str] = None
    diagnosis_date: Optional[datetime] = None
