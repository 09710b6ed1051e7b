from typing import Optional
from pydantic import BaseModel, ConfigDict
from datetime import date, datetime
from uuid import UUID


class RegistrationForm(BaseModel):
    """Cleaned registration form fields; presence is checked by the service."""
    model_config = ConfigDict(extra="ignore")

    nationality_id: Optional[str] = None
    regcategory_id: Optional[str] = None
    email: Optional[str] = None
    mobile_number: Optional[str] = None
    password: Optional[str] = None

    f_name: Optional[str] = None
    m_name: Optional[str] = None
    l_name: Optional[str] = None
    father_name: Optional[str] = None
    mother_name: Optional[str] = None
    place: Optional[str] = None
    dob: Optional[str] = None
    category: Optional[str] = None
    address: Optional[str] = None
    pan_number: Optional[str] = None
    aadhaar_number: Optional[str] = None
    regtype: Optional[str] = None

    bds_qualification_year: Optional[str] = None
    mds_qualification_year: Optional[str] = None


class RegisteredUser(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    f_name: str
    m_name: Optional[str] = None
    l_name: str
    email: str
    mobile_number: str


class RegisterResponse(BaseModel):
    success: bool = True
    message: str
    token: str
    data: RegisteredUser


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class LoginUser(BaseModel):
    id: UUID
    fullname: str
    email: str


class LoginResponse(BaseModel):
    success: bool = True
    message: str
    user: LoginUser


class UserProfile(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: str
    mobile_number: str
    nationality_id: int
    regcategory_id: int

    # Personal Information
    f_name: str
    m_name: Optional[str] = None
    l_name: str
    father_name: str
    mother_name: str
    place: str
    dob: date
    category: str
    address: str
    pan_number: str
    aadhaar_number: str
    regtype: str
    bds_qualification_year: Optional[str] = None
    mds_qualification_year: Optional[str] = None

    # Documents
    bds_certificate_upload: Optional[str] = None
    mds_certificate_upload: Optional[str] = None
    internship_certificate_upload: Optional[str] = None
    ssc_certificate_upload: Optional[str] = None
    aadhaar_upload: Optional[str] = None
    pan_upload: Optional[str] = None

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ProfileResponse(BaseModel):
    success: bool = True
    data: UserProfile


class ForgotPasswordRequest(BaseModel):
    email: Optional[str] = None


class ForgotPasswordResponse(BaseModel):
    success: bool = True
    message: str
    resetUrl: str


class ResetPasswordRequest(BaseModel):
    password: Optional[str] = None


class ResetPasswordResponse(BaseModel):
    success: bool = True
    token: str
    message: str


class MessageResponse(BaseModel):
    success: bool = True
    message: str
