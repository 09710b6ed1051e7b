# council_portal/models/reference.py
from sqlalchemy import Column, Integer, String
from council_portal.database import Base


class Nationality(Base):
    __tablename__ = "nationalities"
    __table_args__ = {'comment': 'Pre-seeded nationality options for registration'}

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(150), unique=True, nullable=False)

    def __repr__(self):
        return f"<Nationality id={self.id} name={self.name}>"


class RegistrationCategory(Base):
    __tablename__ = "registration_categories"
    __table_args__ = {'comment': 'Pre-seeded registration categories'}

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(150), unique=True, nullable=False)

    def __repr__(self):
        return f"<RegistrationCategory id={self.id} name={self.name}>"
