from pydantic import BaseModel, Field
from typing import Optional
from datetime import date


class SignUpRequest(BaseModel):
    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=6)
    name: Optional[str] = None


class SignInRequest(BaseModel):
    email: str
    password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


class UserRead(BaseModel):
    id: int
    email: str
    name: Optional[str] = None
    phone: Optional[str] = None
    birthday: Optional[date] = None
    role_id: Optional[int] = None

    class Config:
        from_attributes = True


class ProfileUpdate(BaseModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    birthday: Optional[date] = None


class PasswordChange(BaseModel):
    current_password: str
    new_password: str = Field(..., min_length=6)


class RoleAssign(BaseModel):
    role_id: int


class RoleBase(BaseModel):
    name: str = Field(..., min_length=1)
    can_edit_projects: bool = False
    can_edit_categories: bool = False
    can_edit_users: bool = False
    can_edit_roles: bool = False
    can_edit_genres: bool = False
    can_edit_ages: bool = False


class RoleCreate(RoleBase):
    pass


class RoleRead(RoleBase):
    id: int

    class Config:
        from_attributes = True
