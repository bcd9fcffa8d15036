"""
Authentication endpoints for API v1.

Each login returns a bearer token for the matching account kind.  The
password reset routes cover studio and judge accounts.
"""

from fastapi import APIRouter

from eodsa_api.app.schemas.auth import (
    CredentialsLogin,
    DancerLogin,
    DancerSession,
    ForgotPassword,
    JudgeSession,
    ResetPassword,
    StudioSession,
)
from eodsa_api.app.schemas.base import Message
from eodsa_api.app.services.auth_service import AuthService
from eodsa_api.app.services.password_reset_service import PasswordResetService


router = APIRouter()


@router.post("/dancer", response_model=DancerSession)
async def login_dancer(data: DancerLogin) -> DancerSession:
    return await AuthService.login_dancer(data)


@router.post("/studio", response_model=StudioSession)
async def login_studio(data: CredentialsLogin) -> StudioSession:
    return await AuthService.login_studio(data)


@router.post("/judge", response_model=JudgeSession)
async def login_judge(data: CredentialsLogin) -> JudgeSession:
    return await AuthService.login_judge(data)


@router.post("/forgot-password", response_model=Message)
async def forgot_password(data: ForgotPassword) -> Message:
    """Request a reset token.  The answer is the same for unknown addresses."""
    await PasswordResetService.request_reset(data.email)
    return Message(message="If an account exists for this email, a reset link has been sent.")


@router.post("/reset-password", response_model=Message)
async def reset_password(data: ResetPassword) -> Message:
    await PasswordResetService.reset_password(data.token, data.new_password)
    return Message(message="Password has been reset.")
