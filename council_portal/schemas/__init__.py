# council_portal/schemas/__init__.py
from .user import (
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
    MessageResponse
)
from .reference import ReferenceItem
from .noc import (
    NocForm,
    NocApplicationResponse,
    NocCreateResponse,
    NocListResponse
)

__all__ = [
    "RegistrationForm",
    "RegisteredUser",
    "RegisterResponse",
    "LoginRequest",
    "LoginUser",
    "LoginResponse",
    "UserProfile",
    "ProfileResponse",
    "ForgotPasswordRequest",
    "ForgotPasswordResponse",
    "ResetPasswordRequest",
    "ResetPasswordResponse",
    "MessageResponse",
    "ReferenceItem",
    "NocForm",
    "NocApplicationResponse",
    "NocCreateResponse",
    "NocListResponse"
]
