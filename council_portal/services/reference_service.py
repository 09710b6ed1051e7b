# council_portal/services/reference_service.py
from typing import List

from sqlalchemy.orm import Session

from council_portal.models import Nationality, RegistrationCategory


def list_nationalities(db: Session) -> List[Nationality]:
    return db.query(Nationality).order_by(Nationality.id).all()


def list_registration_categories(db: Session) -> List[RegistrationCategory]:
    return db.query(RegistrationCategory).order_by(RegistrationCategory.id).all()
