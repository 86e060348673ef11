"""
Authentication and account routes.

Handlers are plain functions: FastAPI runs them in its thread pool, which
keeps bcrypt hashing off the event loop.
"""
import logging

from fastapi import APIRouter, Depends, status

from ..dependencies import get_account_service, get_current_account, get_password_manager
from .models import Account
from .passwords import PasswordLifecycleManager
from .schemas import (
    ChangePasswordRequest,
    EmailRequest,
    LoginRequest,
    ProfileUpdate,
    RegistrationRequest,
    ResetPasswordRequest,
    VerifyEmailRequest,
)
from .service import AccountService

# Set up logging
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/auth", tags=["Authentication"])


def success(message: str, data=None) -> dict:
    body = {"success": True, "message": message}
    if data is not None:
        body["data"] = data
    return body


@router.post("/register", status_code=status.HTTP_201_CREATED, summary="Member registration")
def register(payload: RegistrationRequest, service: AccountService = Depends(get_account_service)):
    return success("Registration successful", service.register(payload))


@router.post("/login", summary="Member login")
def login(payload: LoginRequest, service: AccountService = Depends(get_account_service)):
    return success("Login successful", service.login(payload.email, payload.password))


@router.get("/profile")
def get_profile(
    current_account: Account = Depends(get_current_account),
    service: AccountService = Depends(get_account_service),
):
    return success("Profile fetched successfully", service.get_profile(current_account.id))


@router.patch("/profile")
def update_profile(
    payload: ProfileUpdate,
    current_account: Account = Depends(get_current_account),
    service: AccountService = Depends(get_account_service),
):
    changes = payload.model_dump(exclude_unset=True)
    return success("Profile updated successfully", service.update_profile(current_account.id, changes))


@router.post("/verify-email")
def verify_email(payload: VerifyEmailRequest, manager: PasswordLifecycleManager = Depends(get_password_manager)):
    result = manager.verify_email(payload.email, payload.code)
    return success(result["message"])


@router.post("/resend-verification")
def resend_verification(payload: EmailRequest, manager: PasswordLifecycleManager = Depends(get_password_manager)):
    return success(manager.resend_verification(payload.email)["message"])


@router.post("/forgot-password")
def forgot_password(payload: EmailRequest, manager: PasswordLifecycleManager = Depends(get_password_manager)):
    return success(manager.forgot_password(payload.email)["message"])


@router.post("/reset-password")
def reset_password(payload: ResetPasswordRequest, manager: PasswordLifecycleManager = Depends(get_password_manager)):
    result = manager.reset_password(payload.token, payload.new_password, payload.confirm_password)
    return success(result["message"])


@router.post("/change-password")
def change_password(
    payload: ChangePasswordRequest,
    current_account: Account = Depends(get_current_account),
    manager: PasswordLifecycleManager = Depends(get_password_manager),
):
    result = manager.change_password(
        current_account.id, payload.old_password, payload.new_password, payload.confirm_password
    )
    return success(result["message"])
