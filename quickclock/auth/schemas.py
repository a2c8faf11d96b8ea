"""Auth Pydantic schemas."""


from pydantic import BaseModel, EmailStr

from quickclock.users.schemas import UserResponse


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    user: UserResponse
