# council_portal/routes/users.py
from typing import List
import logging

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Request, Response, status
from sqlalchemy.orm import Session

from council_portal.auth.dependencies import AUTH_COOKIE_NAME, get_current_user
from council_portal.config import settings
from council_portal.database import get_db
from council_portal.models import User
from council_portal.schemas import (
    RegistrationForm,
    RegisteredUser,
    RegisterResponse,
    LoginRequest,
    LoginUser,
    LoginResponse,
    UserProfile,
    ProfileResponse,
    ForgotPasswordRequest,
    ForgotPasswordResponse,
    ResetPasswordRequest,
    ResetPasswordResponse,
    MessageResponse,
    ReferenceItem
)
from council_portal.services import auth_service, reference_service
from council_portal.services.email_service import send_welcome_email
from council_portal.services.registration_service import RegistrationService
from council_portal.services.storage_service import DocumentStorage, get_storage
from council_portal.utils.forms import api_error, read_multipart

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/users", tags=["Users"])


def get_registration_service(storage: DocumentStorage = Depends(get_storage)) -> RegistrationService:
    return RegistrationService(storage)


def _set_auth_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=AUTH_COOKIE_NAME,
        value=token,
        httponly=True,
        secure=settings.is_production,
        samesite="strict",
        max_age=settings.JWT_EXPIRE_DAYS * 24 * 60 * 60
    )


async def send_welcome_email_task(email: str, name: str):
    sent = await send_welcome_email(email, name)
    if not sent:
        logger.error(f"Welcome email to {email} was not delivered; registration is kept")


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
async def register_user(
    request: Request,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    service: RegistrationService = Depends(get_registration_service)
):
    """
    Register a council member from a multipart form.

    Text fields carry the profile, file fields carry PDF documents. The
    welcome email goes out after the response and never fails the request.
    """
    fields, documents = await read_multipart(request)
    form = RegistrationForm(**fields)

    try:
        user, token = await service.register(db, form, documents)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Registration Error: {str(e)}", exc_info=True)
        raise api_error(status.HTTP_500_INTERNAL_SERVER_ERROR, "INTERNAL_ERROR", str(e))

    background_tasks.add_task(send_welcome_email_task, user.email, user.f_name)

    return RegisterResponse(
        message="User registered successfully.",
        token=token,
        data=RegisteredUser.model_validate(user)
    )


@router.post("/login", response_model=LoginResponse)
def login_user(data: LoginRequest, response: Response, db: Session = Depends(get_db)):
    user, token = auth_service.login(db, data.email, data.password)
    _set_auth_cookie(response, token)

    return LoginResponse(
        message="Login successful",
        user=LoginUser(id=user.id, fullname=user.full_name, email=user.email)
    )


@router.post("/logout", response_model=MessageResponse)
def logout_user(response: Response):
    response.delete_cookie(
        key=AUTH_COOKIE_NAME,
        httponly=True,
        secure=settings.is_production,
        samesite="strict"
    )
    return MessageResponse(message="Logged out successfully")


@router.get("/profile", response_model=ProfileResponse)
def get_profile(current_user: User = Depends(get_current_user)):
    return ProfileResponse(data=UserProfile.model_validate(current_user))


@router.post("/forgot-password", response_model=ForgotPasswordResponse)
async def forgot_password(data: ForgotPasswordRequest, request: Request, db: Session = Depends(get_db)):
    base_url = settings.PUBLIC_BASE_URL or str(request.base_url)
    reset_url = await auth_service.request_password_reset(db, data.email, base_url)

    return ForgotPasswordResponse(message="Reset password email sent.", resetUrl=reset_url)


@router.post("/reset-password/{token}", response_model=ResetPasswordResponse)
def reset_password(token: str, data: ResetPasswordRequest, db: Session = Depends(get_db)):
    _, auth_token = auth_service.reset_password(db, token, data.password)
    return ResetPasswordResponse(token=auth_token, message="Password updated successfully.")


@router.get("/registration-categories", response_model=List[ReferenceItem])
def get_registration_categories(db: Session = Depends(get_db)):
    try:
        return reference_service.list_registration_categories(db)
    except Exception as e:
        logger.error(f"Failed to fetch registration categories: {str(e)}")
        raise api_error(status.HTTP_500_INTERNAL_SERVER_ERROR, "FETCH_FAILURE", "Failed to fetch registration categories.")


@router.get("/nationalities", response_model=List[ReferenceItem])
def get_nationalities(db: Session = Depends(get_db)):
    try:
        return reference_service.list_nationalities(db)
    except Exception as e:
        logger.error(f"Failed to fetch nationalities: {str(e)}")
        raise api_error(status.HTTP_500_INTERNAL_SERVER_ERROR, "FETCH_FAILURE", "Failed to fetch nationalities.")
