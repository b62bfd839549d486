from sqlalchemy import Column, Date, Integer, String, Text
from employee_api.database import Base


class Employee(Base):
    __tablename__ = "employees"

    id = Column(String(7), primary_key=True)
    name = Column(String(50), nullable=False)
    role = Column(String(40), nullable=False)
    gender = Column(String(10), nullable=False)
    dob = Column(Date, nullable=False)
    location = Column(String(40), nullable=False)
    email = Column(String(50), nullable=False)
    phone = Column(String(10), nullable=False)
    join_date = Column(Date, nullable=False)
    experience = Column(Integer, nullable=False)
    skills = Column(Text, nullable=False)
    achievement = Column(Text, nullable=False)
    profile_image = Column(String(255), nullable=True)
