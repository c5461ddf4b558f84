import logging

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from streamhub.config import APP_ENV, OTP_RATE_LIMIT, LOGIN_RATE_LIMIT
from streamhub.database import get_async_session
from streamhub.limiter import limiter
from streamhub.schemas.user_schemas import (
    AuthResponse,
    LoginRequest,
    SendOtpRequest,
    SendOtpResponse,
    SignupRequest,
)
from streamhub.services import otp as otp_service
from streamhub.services import users as user_service
from streamhub.utils.token_utils import create_access_token

router = APIRouter(prefix="/auth", tags=["auth"])

logger = logging.getLogger(__name__)


@router.post("/send-otp", response_model=SendOtpResponse, response_model_exclude_none=True)
@limiter.limit(OTP_RATE_LIMIT)
async def send_otp(
    request: Request,
    payload: SendOtpRequest,
    session: AsyncSession = Depends(get_async_session),
):
    otp = await otp_service.issue_otp(session, payload.phone)
    logger.info("OTP issued for %s", payload.phone)

    return {
        "message": "OTP sent successfully",
        # never echo the code outside development
        "otp": otp if APP_ENV == "development" else None,
    }


@router.post("/login", response_model=AuthResponse)
@limiter.limit(LOGIN_RATE_LIMIT)
async def login(
    request: Request,
    payload: LoginRequest,
    session: AsyncSession = Depends(get_async_session),
):
    if payload.login_type == "email":
        user = await user_service.login_with_email(session, payload.identifier, payload.password)
        message = "Login successful"
    else:
        user, created = await user_service.login_with_phone(session, payload.identifier, payload.otp)
        message = "User created and logged in successfully" if created else "Login successful"

    return {
        "user": user,
        "access_token": create_access_token(user),
        "message": message,
    }


@router.post("/signup", response_model=AuthResponse, status_code=201)
@limiter.limit(LOGIN_RATE_LIMIT)
async def signup(
    request: Request,
    payload: SignupRequest,
    session: AsyncSession = Depends(get_async_session),
):
    user = await user_service.signup(session, str(payload.email), payload.password, payload.name)
    return {
        "user": user,
        "access_token": create_access_token(user),
        "message": "User created successfully",
    }
