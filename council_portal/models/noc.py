# council_portal/models/noc.py
from sqlalchemy import Column, String, DateTime, Text, ForeignKey, JSON, Uuid
from sqlalchemy.orm import relationship
from datetime import datetime
import uuid
from council_portal.database import Base


class NocApplication(Base):
    __tablename__ = "noc_applications"
    __table_args__ = {'comment': 'No Objection Certificate applications'}

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    user_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE", name='fk_noc_user'),
        nullable=False,
        index=True,
        comment='Owner of the application'
    )
    dental_council_name = Column(String(255), nullable=False)
    postal_address = Column(Text, nullable=False)
    documents = Column(JSON, nullable=False, default=dict, comment='Form field name to remote URL')
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)

    user = relationship("User", back_populates="noc_applications")

    def __repr__(self):
        return f"<NocApplication id={self.id} user_id={self.user_id}>"
