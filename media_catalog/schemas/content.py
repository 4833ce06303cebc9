from pydantic import BaseModel, Field
from typing import List


class EpisodeCreate(BaseModel):
    number: int = Field(..., ge=1)
    video_url: str = ""


class SeasonCreate(BaseModel):
    number: int = Field(..., ge=1)
    episodes: List[EpisodeCreate] = []


class EpisodeUpdate(BaseModel):
    id: int
    number: int = Field(..., ge=1)
    video_url: str = ""


class SeasonUpdate(BaseModel):
    number: int = Field(..., ge=1)
    episodes: List[EpisodeUpdate] = []


class SingleEpisodeUpdate(BaseModel):
    number: int = Field(..., ge=1)
    video_url: str = ""
