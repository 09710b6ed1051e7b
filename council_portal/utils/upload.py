# council_portal/utils/upload.py
import os
import re
import time
from typing import Iterable, Optional

_WHITESPACE = re.compile(r"\s+")
_UNSAFE = re.compile(r"[^a-zA-Z0-9_]")


def safe_folder_name(name_parts: Iterable[Optional[str]]) -> str:
    """Folder name for a member's documents, e.g. ("Ravi", None, "Kumar") -> "Ravi_Kumar"."""
    full_name = "_".join(part for part in name_parts if part)
    full_name = _WHITESPACE.sub("_", full_name)
    safe_name = _UNSAFE.sub("", full_name)
    return safe_name or "anonymous"


def document_filename(field_name: str, timestamp_ms: Optional[int] = None) -> str:
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    return f"{timestamp_ms}-{field_name}.pdf"


def is_pdf(filename: Optional[str]) -> bool:
    if not filename:
        return False
    return os.path.splitext(filename)[1].lower() == ".pdf"
