# council_portal/routes/noc.py
import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from council_portal.auth.dependencies import get_current_user
from council_portal.config import settings
from council_portal.database import get_db
from council_portal.models import User
from council_portal.schemas import NocForm, NocApplicationResponse, NocCreateResponse, NocListResponse
from council_portal.services.noc_service import NocService
from council_portal.services.storage_service import DocumentStorage, get_storage
from council_portal.utils.forms import api_error, read_multipart

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/noc", tags=["NOC Applications"])


def get_noc_service(storage: DocumentStorage = Depends(get_storage)) -> NocService:
    return NocService(storage, mirror_locally=settings.MIRROR_NOC_UPLOADS_LOCALLY)


@router.post("", response_model=NocCreateResponse, status_code=status.HTTP_201_CREATED)
async def apply_noc(
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    service: NocService = Depends(get_noc_service)
):
    fields, documents = await read_multipart(request)

    try:
        application = await service.apply(db, current_user, NocForm(**fields), documents)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"NOC Submission Error: {str(e)}", exc_info=True)
        raise api_error(status.HTTP_500_INTERNAL_SERVER_ERROR, "INTERNAL_ERROR", str(e))

    return NocCreateResponse(
        message="NOC submitted successfully",
        data=NocApplicationResponse.model_validate(application)
    )


@router.get("", response_model=NocListResponse)
def get_noc_applications(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    try:
        applications = NocService.list_for_user(db, current_user)
    except Exception as e:
        logger.error(f"Fetch NOC Error: {str(e)}")
        raise api_error(status.HTTP_500_INTERNAL_SERVER_ERROR, "INTERNAL_ERROR", str(e))

    return NocListResponse(data=[NocApplicationResponse.model_validate(a) for a in applications])
