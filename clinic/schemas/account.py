"""Request and response bodies for patient, doctor and admin accounts."""
from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from ..models.doctor import DoctorStatus


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    avatar: Optional[str] = None
    address: Optional[str] = None
    phone_number: Optional[str] = None
    birthdate: Optional[date] = None


class UserUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    address: Optional[str] = Field(None, min_length=1, max_length=255)
    phone: Optional[str] = Field(None, min_length=1, max_length=20)
    birthday: Optional[date] = None
    avatar: Optional[str] = None


class DoctorRegister(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)
    birthdate: date
    address: str = Field(..., min_length=1, max_length=255)
    specialization_id: int
    phone_number: str = Field(..., min_length=1, max_length=20)


class DoctorResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    avatar: Optional[str] = None
    birthdate: Optional[date] = None
    address: Optional[str] = None
    phone_number: Optional[str] = None
    specialization_id: Optional[int] = None
    specialty_name: Optional[str] = None
    status: DoctorStatus


class DoctorListItem(DoctorResponse):
    active_schedule_count: int = 0


class DoctorUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(None, min_length=6, max_length=128)
    birthdate: Optional[date] = None
    address: Optional[str] = Field(None, min_length=1, max_length=255)
    phone_number: Optional[str] = Field(None, min_length=1, max_length=20)
    status: Optional[DoctorStatus] = None
    specialization_id: Optional[int] = None
    avatar: Optional[str] = None


class AdminResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    avatar: Optional[str] = None


class AdminUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(None, min_length=6, max_length=128)
    avatar: Optional[str] = None
