"""
Seed Reference Data

Populates the nationality and registration category lookup tables used by
the registration form. The nationality list is replaced on every run;
registration categories are only added when missing, since users reference
them by id.

Usage:
    python scripts/seed_reference_data.py
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from council_portal.database import Base, SessionLocal, engine
from council_portal.models import Nationality, RegistrationCategory, User

NATIONALITIES = [
    "Natural born Indian Citizen",
    "Natural born British Subject",
    "British Subject if Indian Domicile",
    "Naturalized Indian Citizen",
    "Subject of a Foreign Government",
]

REGISTRATION_CATEGORIES = [
    "Provisional Registration",
    "Permanent Registration (BDS)",
    "Additional Qualification Registration (MDS)",
    "Renewal of Registration",
]


def seed_nationalities(db) -> None:
    if db.query(User.id).first():
        print("Users already reference nationalities - adding missing entries only")
        existing = {name for (name,) in db.query(Nationality.name).all()}
        db.add_all(Nationality(name=name) for name in NATIONALITIES if name not in existing)
    else:
        deleted = db.query(Nationality).delete()
        print(f"Existing nationalities cleared ({deleted})")
        db.add_all(Nationality(name=name) for name in NATIONALITIES)
    db.commit()
    print("Nationalities seeded successfully")


def seed_registration_categories(db) -> None:
    existing = {name for (name,) in db.query(RegistrationCategory.name).all()}
    missing = [name for name in REGISTRATION_CATEGORIES if name not in existing]
    db.add_all(RegistrationCategory(name=name) for name in missing)
    db.commit()
    print(f"Registration categories seeded ({len(missing)} added)")


def main() -> None:
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        seed_nationalities(db)
        seed_registration_categories(db)
    except Exception as e:
        db.rollback()
        print(f"Reference data seeding error: {e}")
        raise
    finally:
        db.close()


if __name__ == "__main__":
    main()
