# council_portal/models/user.py
from sqlalchemy import Column, String, DateTime, Text, Date, Integer, ForeignKey, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid
from council_portal.database import Base

# Form fields that carry a PDF upload; each column holds the remote URL.
DOCUMENT_FIELDS = (
    "bds_certificate_upload",
    "mds_certificate_upload",
    "internship_certificate_upload",
    "ssc_certificate_upload",
    "aadhaar_upload",
    "pan_upload",
)


class User(Base):
    __tablename__ = "users"
    __table_args__ = {'comment': 'Registered council members'}

    id = Column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        index=True,
        comment='Unique identifier for the user'
    )
    nationality_id = Column(
        Integer,
        ForeignKey("nationalities.id", name='fk_user_nationality'),
        nullable=False
    )
    regcategory_id = Column(
        Integer,
        ForeignKey("registration_categories.id", name='fk_user_regcategory'),
        nullable=False
    )

    # Contact + credential
    email = Column(String(255), unique=True, nullable=False, index=True)
    mobile_number = Column(String(20), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)

    # Personal Information
    f_name = Column(String(100), nullable=False)
    m_name = Column(String(100), nullable=True)
    l_name = Column(String(100), nullable=False)
    father_name = Column(String(150), nullable=False)
    mother_name = Column(String(150), nullable=False)
    place = Column(String(150), nullable=False)
    dob = Column(Date, nullable=False)
    category = Column(String(50), nullable=False)
    address = Column(Text, nullable=False)
    pan_number = Column(String(20), nullable=False)
    aadhaar_number = Column(String(20), nullable=False)
    regtype = Column(String(50), nullable=False)

    # Qualifications, MM/YYYY
    bds_qualification_year = Column(String(7), nullable=True)
    mds_qualification_year = Column(String(7), nullable=True)

    # Uploaded documents
    bds_certificate_upload = Column(String(500), nullable=True)
    mds_certificate_upload = Column(String(500), nullable=True)
    internship_certificate_upload = Column(String(500), nullable=True)
    ssc_certificate_upload = Column(String(500), nullable=True)
    aadhaar_upload = Column(String(500), nullable=True)
    pan_upload = Column(String(500), nullable=True)

    # Password reset
    reset_password_token = Column(String(64), nullable=True, index=True, comment='sha256 hex of the emailed token')
    reset_password_expires = Column(DateTime, nullable=True, comment='Naive UTC expiry of the reset token')

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), server_default=func.now(), nullable=False)

    nationality = relationship("Nationality", lazy="joined")
    registration_category = relationship("RegistrationCategory", lazy="joined")
    noc_applications = relationship(
        "NocApplication",
        back_populates="user",
        order_by="NocApplication.created_at.desc()"
    )

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.f_name, self.m_name, self.l_name) if part)

    def __repr__(self):
        return f"<User id={self.id} email={self.email}>"
