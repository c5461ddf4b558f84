from typing import Any, Dict, List, Optional

from pydantic import Field

from streamhub.schemas.base import CamelModel, RequestModel, UtcDatetime


class ProfileCreate(RequestModel):
    user_id: int
    name: str = Field(max_length=80)
    avatar: Optional[str] = None
    is_kids: bool = False
    preferences: Dict[str, Any] = {}


class ProfileUpdate(RequestModel):
    name: str = Field(max_length=80)
    avatar: Optional[str] = None
    is_kids: Optional[bool] = None
    preferences: Optional[Dict[str, Any]] = None


class ProfileOut(CamelModel):
    id: int
    user_id: int
    name: str
    avatar: Optional[str] = None
    is_kids: bool
    preferences: Dict[str, Any] = {}
    created_at: UtcDatetime


class ProfileResponse(CamelModel):
    profile: ProfileOut
    message: str


class ProfileListResponse(CamelModel):
    profiles: List[ProfileOut]
