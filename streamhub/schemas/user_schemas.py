from typing import Literal, Optional, List

from pydantic import EmailStr, Field

from streamhub.schemas.base import CamelModel, RequestModel, UtcDatetime
from streamhub.schemas.profile_schemas import ProfileOut


class SendOtpRequest(RequestModel):
    phone: str = Field(pattern=r"^\d{10}$")


class SendOtpResponse(CamelModel):
    message: str
    # only populated outside production
    otp: Optional[str] = None


class LoginRequest(RequestModel):
    identifier: str = Field(min_length=1)
    password: Optional[str] = None
    otp: Optional[str] = None
    login_type: Literal["email", "phone"]


class SignupRequest(RequestModel):
    email: EmailStr
    password: str = Field(min_length=8, max_length=72)
    name: Optional[str] = Field(default=None, max_length=120)


class UserOut(CamelModel):
    id: int
    email: Optional[str] = None
    phone: Optional[str] = None
    name: Optional[str] = None
    avatar: Optional[str] = None
    role: str
    status: str
    subscription_id: Optional[int] = None
    subscription_end: Optional[UtcDatetime] = None
    profiles: List[ProfileOut] = []


class AuthResponse(CamelModel):
    user: UserOut
    access_token: str
    token_type: str = "bearer"
    message: str


class UserStatusUpdate(RequestModel):
    status: Literal["active", "suspended", "banned"]


class UserStatusResponse(CamelModel):
    user: UserOut
    message: str
