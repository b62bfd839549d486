from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import date


# ---------------------------------------------------------
# INPUT SCHEMA: built from the multipart form after format checks
# ---------------------------------------------------------
class EmployeeIn(BaseModel):
    id: str = Field(..., max_length=7)
    name: str = Field(..., max_length=50)
    role: str = Field(..., max_length=40)
    gender: str = Field(..., max_length=10)
    dob: date
    location: str = Field(..., max_length=40)
    email: str = Field(..., max_length=50)
    phone: str = Field(..., max_length=10)
    join_date: date = Field(..., alias="joinDate")
    experience: int
    skills: str
    achievement: str

    @field_validator("dob", "join_date", mode="before")
    @classmethod
    def iso_date(cls, v):
        # lax date parsing would also take unix timestamps such as "0"
        if isinstance(v, str):
            return date.fromisoformat(v.strip())
        return v

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "id": "ABC1234",
                "name": "John Doe",
                "role": "Engineer",
                "gender": "Male",
                "dob": "1990-04-12",
                "location": "Chennai",
                "email": "john.doe@astrolitetech.com",
                "phone": "9876543210",
                "joinDate": "2020-06-01",
                "experience": 5,
                "skills": "Python, SQL",
                "achievement": "Employee of the month",
            }
        }

    def columns(self) -> dict:
        """Column name -> value for the twelve base fields."""
        return self.model_dump(by_alias=False)


# ---------------------------------------------------------
# RESPONSE SCHEMAS
# ---------------------------------------------------------
class EmployeeSummary(BaseModel):
    id: str
    name: str
    email: str
    profile_image: Optional[str] = Field(None, alias="profileImage")

    class Config:
        from_attributes = True
        populate_by_name = True


class EmployeeRecord(EmployeeSummary):
    role: str
    gender: str
    dob: date
    location: str
    phone: str
    join_date: date = Field(..., alias="joinDate")
    experience: int
    skills: str
    achievement: str
