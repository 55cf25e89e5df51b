from pydantic import BaseModel, Field, field_validator
from datetime import datetime
import uuid


class PostIn(BaseModel):
    title: str = Field(min_length=3, max_length=60)
    description: str = Field(min_length=3, max_length=600)

    @field_validator("title", "description", mode="before")
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v


class OwnerOut(BaseModel):
    id: uuid.UUID
    email: str

    class Config:
        from_attributes = True


class PostOut(BaseModel):
    id: uuid.UUID
    title: str
    description: str
    owner: OwnerOut
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
