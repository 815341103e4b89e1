from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class SpecialtyCreate(BaseModel):
    specialty_name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None


class SpecialtyResponse(SpecialtyCreate):
    model_config = ConfigDict(from_attributes=True)

    id: int


class PurposeCreate(BaseModel):
    specialty_id: int
    purpose_name: str = Field(..., min_length=1, max_length=100)


class PurposeUpdate(BaseModel):
    purpose_name: str = Field(..., min_length=1, max_length=100)


class PurposeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    specialty_id: int
    purpose_name: str
