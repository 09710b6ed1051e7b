# council_portal/services/noc_service.py
import logging
from typing import Dict, List

from fastapi import status
from sqlalchemy.orm import Session

from council_portal.models import NocApplication, User
from council_portal.schemas.noc import NocForm
from council_portal.services.storage_service import DocumentStorage
from council_portal.utils.forms import UploadedDocument, api_error
from council_portal.utils.upload import safe_folder_name, document_filename, is_pdf

logger = logging.getLogger(__name__)

REQUIRED_NOC_FILES = ("tdc_reg_certificate_upload", "aadhaar_upload")
NOC_TEXT_FIELDS = ("dental_council_name", "postal_address")


class NocService:
    """Submits and lists No Objection Certificate applications."""

    def __init__(self, storage: DocumentStorage, mirror_locally: bool = True):
        self.storage = storage
        self.mirror_locally = mirror_locally

    @staticmethod
    def validate(form: NocForm, documents: Dict[str, UploadedDocument]) -> None:
        for field_name in REQUIRED_NOC_FILES:
            if field_name not in documents:
                raise api_error(status.HTTP_400_BAD_REQUEST, "MISSING_FIELD", f"Missing required file: {field_name}")

        if not form.dental_council_name or not form.postal_address:
            raise api_error(status.HTTP_400_BAD_REQUEST, "MISSING_FIELD", "All fields are required")

        for name in NOC_TEXT_FIELDS:
            limit = getattr(NocApplication.__table__.c[name].type, "length", None)
            if limit and len(getattr(form, name)) > limit:
                raise api_error(status.HTTP_400_BAD_REQUEST, "INVALID_FORMAT", f"{name} exceeds {limit} characters")

        for document in documents.values():
            if not is_pdf(document.filename):
                raise api_error(
                    status.HTTP_400_BAD_REQUEST,
                    "INVALID_FILE_TYPE",
                    f"Only PDF files allowed. '{document.filename}' is not a PDF."
                )

    async def apply(
        self,
        db: Session,
        user: User,
        form: NocForm,
        documents: Dict[str, UploadedDocument]
    ) -> NocApplication:
        self.validate(form, documents)

        folder = safe_folder_name([user.f_name, user.m_name, user.l_name])
        # Without a remote store the local copy is the only copy
        keep_local = self.mirror_locally or not self.storage.remote_enabled

        mirrored = []
        saved_files: Dict[str, str] = {}
        try:
            for field_name, document in documents.items():
                filename = document_filename(field_name)
                if keep_local:
                    mirrored.append(self.storage.write_local(folder, filename, document.content))
                saved_files[field_name] = await self.storage.upload(folder, filename, document.content)
        except Exception:
            logger.error(f"NOC upload failed for user {user.id}; removing {len(mirrored)} local file(s)")
            self.storage.remove_local(mirrored)
            raise

        application = NocApplication(
            user_id=user.id,
            dental_council_name=form.dental_council_name,
            postal_address=form.postal_address,
            documents=saved_files
        )
        try:
            db.add(application)
            db.commit()
        except Exception:
            db.rollback()
            self.storage.remove_local(mirrored)
            raise
        db.refresh(application)

        logger.info(f"NOC application {application.id} submitted by user {user.id}")
        return application

    @staticmethod
    def list_for_user(db: Session, user: User) -> List[NocApplication]:
        return (
            db.query(NocApplication)
            .filter(NocApplication.user_id == user.id)
            .order_by(NocApplication.created_at.desc())
            .all()
        )
