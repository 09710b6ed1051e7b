# council_portal/services/registration_service.py
import logging
from typing import Dict, List, Optional, Tuple

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from council_portal.models import User, Nationality, RegistrationCategory, DOCUMENT_FIELDS
from council_portal.schemas.user import RegistrationForm
from council_portal.services.storage_service import DocumentStorage
from council_portal.utils.forms import UploadedDocument, api_error, is_mm_yyyy, parse_iso_date
from council_portal.utils.hash import hash_password
from council_portal.utils.jwt_handler import create_access_token
from council_portal.utils.upload import safe_folder_name, document_filename, is_pdf

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8

PERSONAL_FIELDS = (
    "f_name", "l_name", "father_name", "mother_name", "place", "dob",
    "category", "address", "pan_number", "aadhaar_number", "regtype",
)
ACCOUNT_FIELDS = ("email", "mobile_number", "password", "nationality_id", "regcategory_id")
QUALIFICATION_YEAR_FIELDS = ("bds_qualification_year", "mds_qualification_year")
LENGTH_CHECKED_FIELDS = tuple(
    name for name in PERSONAL_FIELDS + ("email", "mobile_number") + QUALIFICATION_YEAR_FIELDS
    if name != "dob"
)


def missing_fields(form: RegistrationForm) -> List[str]:
    return [name for name in PERSONAL_FIELDS + ACCOUNT_FIELDS if not getattr(form, name)]


def too_long_fields(form: RegistrationForm) -> List[str]:
    """Fields longer than their users column allows; Text columns have no limit."""
    too_long = []
    for name in LENGTH_CHECKED_FIELDS:
        limit = getattr(User.__table__.c[name].type, "length", None)
        value = getattr(form, name)
        if limit and value and len(value) > limit:
            too_long.append(name)
    return too_long


def _parse_id(value: str) -> Optional[int]:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _duplicate_error(db: Session, email: str, mobile_number: str) -> Optional[HTTPException]:
    if db.query(User.id).filter(User.email == email).first():
        return api_error(status.HTTP_409_CONFLICT, "DUPLICATE_EMAIL", "Email already exists")
    if db.query(User.id).filter(User.mobile_number == mobile_number).first():
        return api_error(status.HTTP_409_CONFLICT, "DUPLICATE_MOBILE", "Mobile number already exists")
    return None


class RegistrationService:
    """Validates a registration, stores its documents and creates the user."""

    def __init__(self, storage: DocumentStorage):
        self.storage = storage

    @staticmethod
    def validate(
        db: Session,
        form: RegistrationForm,
        documents: Dict[str, UploadedDocument]
    ) -> dict:
        """
        Run every check in order and return the parsed values.

        Nothing is written before this returns, so a rejected registration
        leaves neither a record nor files behind.
        """
        # 1. Required fields
        missing = missing_fields(form)
        if missing:
            raise api_error(
                status.HTTP_400_BAD_REQUEST,
                "MISSING_FIELD",
                f"Missing required fields: {', '.join(missing)}"
            )

        # 2. Formats
        too_long = too_long_fields(form)
        if too_long:
            raise api_error(
                status.HTTP_400_BAD_REQUEST,
                "INVALID_FORMAT",
                f"Fields exceed their maximum length: {', '.join(too_long)}"
            )

        for name in QUALIFICATION_YEAR_FIELDS:
            value = getattr(form, name)
            if value and not is_mm_yyyy(value):
                raise api_error(status.HTTP_400_BAD_REQUEST, "INVALID_FORMAT", f"{name} must be in MM/YYYY format")

        dob = parse_iso_date(form.dob)
        if dob is None:
            raise api_error(status.HTTP_400_BAD_REQUEST, "INVALID_FORMAT", "dob must be in YYYY-MM-DD format")

        # 3-4. Reference data
        regcategory_id = _parse_id(form.regcategory_id)
        if regcategory_id is None or db.get(RegistrationCategory, regcategory_id) is None:
            raise api_error(status.HTTP_400_BAD_REQUEST, "INVALID_REFERENCE", "Invalid regcategory_id")

        nationality_id = _parse_id(form.nationality_id)
        if nationality_id is None or db.get(Nationality, nationality_id) is None:
            raise api_error(status.HTTP_400_BAD_REQUEST, "INVALID_REFERENCE", "Invalid nationality_id")

        # 5-6. Uniqueness fast path; the UNIQUE constraints decide at commit
        email = form.email.lower()
        if db.query(User.id).filter(User.email == email).first():
            raise api_error(status.HTTP_409_CONFLICT, "DUPLICATE_EMAIL", "Email already exists")

        if db.query(User.id).filter(User.mobile_number == form.mobile_number).first():
            raise api_error(status.HTTP_409_CONFLICT, "DUPLICATE_MOBILE", "Mobile number already exists")

        # 7. Credential strength
        if len(form.password) < MIN_PASSWORD_LENGTH:
            raise api_error(
                status.HTTP_400_BAD_REQUEST,
                "WEAK_CREDENTIAL",
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters long."
            )

        # 8. Documents
        for field_name, document in documents.items():
            if field_name not in DOCUMENT_FIELDS:
                raise api_error(status.HTTP_400_BAD_REQUEST, "UNEXPECTED_FILE", f"Unexpected file field '{field_name}'")
            if not is_pdf(document.filename):
                raise api_error(
                    status.HTTP_400_BAD_REQUEST,
                    "INVALID_FILE_TYPE",
                    f"Only PDF files allowed. '{document.filename}' is not a PDF."
                )

        return {
            "email": email,
            "dob": dob,
            "nationality_id": nationality_id,
            "regcategory_id": regcategory_id,
        }

    async def register(
        self,
        db: Session,
        form: RegistrationForm,
        documents: Dict[str, UploadedDocument]
    ) -> Tuple[User, str]:
        parsed = self.validate(db, form, documents)

        folder = safe_folder_name([form.f_name, form.m_name, form.l_name])
        staged = []
        document_urls: Dict[str, str] = {}

        try:
            for field_name, document in documents.items():
                filename = document_filename(field_name)
                staged.append(self.storage.write_local(folder, filename, document.content))
                document_urls[field_name] = await self.storage.upload(folder, filename, document.content)
        except Exception:
            logger.error(f"Document upload failed for {parsed['email']}; removing {len(staged)} staged file(s)")
            self.storage.remove_local(staged)
            raise

        user = User(
            nationality_id=parsed["nationality_id"],
            regcategory_id=parsed["regcategory_id"],
            email=parsed["email"],
            mobile_number=form.mobile_number,
            password_hash=hash_password(form.password),
            f_name=form.f_name,
            m_name=form.m_name,
            l_name=form.l_name,
            father_name=form.father_name,
            mother_name=form.mother_name,
            place=form.place,
            dob=parsed["dob"],
            category=form.category,
            address=form.address,
            pan_number=form.pan_number,
            aadhaar_number=form.aadhaar_number,
            regtype=form.regtype,
            bds_qualification_year=form.bds_qualification_year,
            mds_qualification_year=form.mds_qualification_year,
            **document_urls
        )

        try:
            db.add(user)
            db.commit()
        except IntegrityError:
            db.rollback()
            self.storage.remove_local(staged)
            duplicate = _duplicate_error(db, parsed["email"], form.mobile_number)
            if duplicate is None:
                logger.error(f"Integrity error registering {parsed['email']} that is not a duplicate")
                raise
            logger.warning(f"Concurrent duplicate registration for {parsed['email']}")
            raise duplicate
        except Exception:
            db.rollback()
            self.storage.remove_local(staged)
            raise

        db.refresh(user)
        token = create_access_token(user.id)

        logger.info(f"Registered user {user.id} ({user.email}) with {len(document_urls)} document(s)")
        return user, token
