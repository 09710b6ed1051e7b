# council_portal/models/__init__.py

from .reference import Nationality, RegistrationCategory
from .user import User, DOCUMENT_FIELDS
from .noc import NocApplication

__all__ = ["Nationality", "RegistrationCategory", "User", "DOCUMENT_FIELDS", "NocApplication"]
