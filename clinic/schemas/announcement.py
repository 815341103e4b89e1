from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class AnnouncementCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)


class AnnouncementResponse(AnnouncementCreate):
    model_config = ConfigDict(from_attributes=True)

    id: int
    created_by: int
    created_by_name: Optional[str] = None
    created_at: Optional[datetime] = None
