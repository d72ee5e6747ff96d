from datetime import datetime
from pydantic import BaseModel, EmailStr, Field
from typing import Optional

# Shared properties for user models
class UserBase(BaseModel):
    email: EmailStr

# Schema for user authentication credentials
class UserLogin(UserBase):
    password: str

# Schema for user registration requests
class UserCreate(UserBase):
    name: str = Field(min_length=1)
    password: str = Field(min_length=6)

# Schema for profile updates; omitted fields stay unchanged
class ProfileUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(None, min_length=6)

# Schema for administrative user edits
class UserAdminUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    email: Optional[EmailStr] = None
    is_admin: Optional[bool] = None

# Output schema for user profile details
class UserResponse(UserBase):
    id: int
    name: str
    is_admin: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

# Schema for JWT authentication token response
class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserResponse

# Schema for JWT payload contents
class TokenData(BaseModel):
    email: Optional[str] = None
    is_admin: bool = False
