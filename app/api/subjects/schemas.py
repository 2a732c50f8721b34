from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class SubjectCreate(BaseModel):
    subject_name: str = Field(..., min_length=1, max_length=255)
    subject_code: str = Field(..., min_length=1, max_length=50)
    description: Optional[str] = None


class SubjectResponse(BaseModel):
    id: int
    subject_name: str
    subject_code: str
    description: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True
