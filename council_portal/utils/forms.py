# council_portal/utils/forms.py
"""
Helpers that turn a multipart request into cleaned form fields plus an
in-memory map of uploaded documents.
"""
import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import Dict, Optional, Tuple

from fastapi import HTTPException, Request, status
from starlette.datastructures import UploadFile

MM_YYYY_PATTERN = re.compile(r"^(0[1-9]|1[0-2])/\d{4}$")


@dataclass
class UploadedDocument:
    field_name: str
    filename: str
    content: bytes
    content_type: Optional[str] = None


def api_error(status_code: int, code: str, message: str) -> HTTPException:
    return HTTPException(status_code=status_code, detail={"error": code, "message": message})


def clean_value(value) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


async def read_multipart(request: Request) -> Tuple[Dict[str, str], Dict[str, UploadedDocument]]:
    """
    Split a multipart body into cleaned text fields and uploaded documents.

    Empty text fields are dropped and file parts without a filename are
    ignored, so "absent" always means "not in the dict".
    """
    try:
        form = await request.form()
    except Exception as e:
        raise api_error(status.HTTP_400_BAD_REQUEST, "INVALID_FORMAT", f"Could not parse form data: {str(e)}")

    fields: Dict[str, str] = {}
    documents: Dict[str, UploadedDocument] = {}

    for key, value in form.multi_items():
        if isinstance(value, UploadFile):
            if not value.filename:
                continue
            documents[key] = UploadedDocument(
                field_name=key,
                filename=value.filename,
                content=await value.read(),
                content_type=value.content_type,
            )
        else:
            cleaned = clean_value(value)
            if cleaned is not None:
                fields[key] = cleaned

    return fields, documents


def is_mm_yyyy(value: str) -> bool:
    return bool(MM_YYYY_PATTERN.match(value))


def parse_iso_date(value: str) -> Optional[date]:
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        return None
