from pydantic import BaseModel, Field

from trafficx.schemas.base import CamelModel


class UserCredentials(BaseModel):
    username: str = Field(..., min_length=3, max_length=64)
    password: str = Field(..., min_length=6, max_length=72)


class UserResponse(CamelModel):
    id: int
    username: str
    client_id: str
    points: int
    hits: int


class AuthResponse(BaseModel):
    user: UserResponse
    access_token: str
    token_type: str = "bearer"
    expires_in: int
