from pydantic import BaseModel, Field
from typing import Optional


class ReferenceBase(BaseModel):
    title: str = Field(..., min_length=1)
    poster_url: Optional[str] = None


class ReferenceCreate(ReferenceBase):
    pass


class ReferenceUpdate(BaseModel):
    title: Optional[str] = None
    poster_url: Optional[str] = None


class ReferenceRead(ReferenceBase):
    id: int

    class Config:
        from_attributes = True
