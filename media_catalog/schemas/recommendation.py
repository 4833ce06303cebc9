from pydantic import BaseModel, Field


class RecommendationCreate(BaseModel):
    movie_id: int
    position: int = Field(..., ge=0)


class RecommendationUpdate(BaseModel):
    position: int = Field(..., ge=0)


class RecommendationRead(BaseModel):
    id: int
    movie_id: int
    position: int

    class Config:
        from_attributes = True
