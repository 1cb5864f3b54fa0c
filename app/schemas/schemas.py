"""
Pydantic Schemas - Request/Response Validation

All API request and response schemas in one file for simplicity.
Field names follow the database columns (camelCase for students).
"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator
from typing import Optional, List
from datetime import date
from enum import Enum

from app.db.query import SortOrder


# ============================================================
# ENUMS
# ============================================================

class BloodGroup(str, Enum):
    a_pos = "A+"
    a_neg = "A-"
    b_pos = "B+"
    b_neg = "B-"
    ab_pos = "AB+"
    ab_neg = "AB-"
    o_pos = "O+"
    o_neg = "O-"


class Genotype(str, Enum):
    aa = "AA"
    as_ = "AS"
    ss = "SS"
    ac = "AC"


class Gender(str, Enum):
    male = "male"
    female = "female"


class GuardianStatus(str, Enum):
    father = "father"
    mother = "mother"
    guardian = "guardian"


class StudentSortField(str, Enum):
    id = "id"
    firstName = "firstName"
    lastName = "lastName"
    admissioNo = "admissioNo"
    form = "form"
    section = "section"
    email = "email"
    dob = "dob"


class ScheduleSortField(str, Enum):
    title = "title"
    category = "category"
    start_date = "start_date"
    end_date = "end_date"
    id = "id"


def _empty_or_min_two(value: Optional[str]) -> Optional[str]:
    if value and len(value) < 2:
        raise ValueError("must be empty or at least 2 characters")
    return value


def _no_nul(value: Optional[str]) -> Optional[str]:
    if value and "\x00" in value:
        raise ValueError("must not contain NUL characters")
    return value


# ============================================================
# AUTH SCHEMAS
# ============================================================

class RegistrationRequest(BaseModel):
    """Student and guardian fields submitted together at registration."""
    model_config = ConfigDict(extra="forbid")

    # Student
    firstName: str = Field(..., min_length=2, max_length=100)
    lastName: str = Field(..., min_length=2, max_length=100)
    middleName: Optional[str] = Field(None, max_length=100)
    admissioNo: str = Field(..., min_length=1, max_length=50)
    form: str = Field(..., min_length=1, max_length=20)
    section: str = Field(..., min_length=1, max_length=10)
    address: str = Field(..., min_length=10, max_length=500)
    bloodgroup: BloodGroup
    genotype: Genotype
    religion: str = Field(..., min_length=2, max_length=50)
    tribe: str = Field(..., min_length=2, max_length=50)
    gender: Gender
    dob: date
    phone: str = Field(..., min_length=10, max_length=15)
    studentImg: Optional[str] = None
    email: EmailStr
    password: str = Field(..., min_length=6)

    # Guardian
    guardianName: str = Field(..., min_length=2, max_length=100)
    guardianPhone: str = Field(..., min_length=10, max_length=20)
    guardianStatus: GuardianStatus
    guardianEmail: EmailStr
    guardianImg: Optional[str] = None

    @field_validator("middleName")
    @classmethod
    def check_middle_name(cls, value):
        return _empty_or_min_two(value)

    @field_validator("password")
    @classmethod
    def check_password(cls, value):
        return _no_nul(value)


class LoginRequest(BaseModel):
    email: str
    password: str


class TokenResponse(BaseModel):
    token: str


# ============================================================
# STUDENT SCHEMAS
# ============================================================

class StudentUpdate(BaseModel):
    """Guardian details are not updatable through this schema."""
    model_config = ConfigDict(extra="forbid")

    firstName: Optional[str] = Field(None, min_length=2, max_length=100)
    lastName: Optional[str] = Field(None, min_length=2, max_length=100)
    middleName: Optional[str] = Field(None, max_length=100)
    admissioNo: Optional[str] = Field(None, min_length=1, max_length=50)
    form: Optional[str] = Field(None, min_length=1, max_length=20)
    section: Optional[str] = Field(None, min_length=1, max_length=10)
    address: Optional[str] = Field(None, min_length=10, max_length=500)
    bloodgroup: Optional[BloodGroup] = None
    genotype: Optional[Genotype] = None
    religion: Optional[str] = Field(None, min_length=2, max_length=50)
    tribe: Optional[str] = Field(None, min_length=2, max_length=50)
    gender: Optional[Gender] = None
    dob: Optional[date] = None
    phone: Optional[str] = Field(None, min_length=10, max_length=15)
    studentImg: Optional[str] = None
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(None, min_length=6)

    @field_validator("middleName")
    @classmethod
    def check_middle_name(cls, value):
        return _empty_or_min_two(value)

    @field_validator("password")
    @classmethod
    def check_password(cls, value):
        return _no_nul(value)


class StudentWithGuardian(BaseModel):
    id: int
    firstName: str
    lastName: str
    middleName: Optional[str] = None
    admissioNo: str
    form: str
    section: str
    address: str
    bloodgroup: str
    genotype: str
    religion: str
    tribe: str
    gender: str
    dob: date
    phone: str
    studentImg: Optional[str] = None
    email: str
    guardian_id: Optional[int] = None
    guardian_name: Optional[str] = None
    guardian_phone: Optional[str] = None
    guardian_status: Optional[str] = None
    guardian_email: Optional[str] = None
    guardian_img: Optional[str] = None


class StudentPagination(BaseModel):
    totalStudents: int
    totalPages: int
    currentPage: int
    limit: int


class StudentListResponse(BaseModel):
    students: List[StudentWithGuardian]
    pagination: StudentPagination


# ============================================================
# SCHEDULE SCHEMAS
# ============================================================

class ScheduleCreate(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    title: str = Field(..., min_length=2, max_length=100)
    category: str = Field(..., min_length=2, max_length=100)
    start_date: date
    end_date: date
    img: Optional[str] = Field(None, alias="Img")

    @model_validator(mode="after")
    def check_dates(self):
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class ScheduleUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    title: Optional[str] = Field(None, min_length=2, max_length=100)
    category: Optional[str] = Field(None, min_length=2, max_length=100)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    img: Optional[str] = Field(None, alias="Img")

    @model_validator(mode="after")
    def check_dates(self):
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class Schedule(BaseModel):
    id: int
    title: str
    category: str
    start_date: date
    end_date: date
    img: Optional[str] = None


class SchedulePagination(BaseModel):
    totalSchedules: int
    totalPages: int
    currentPage: int
    limit: int


class ScheduleListResponse(BaseModel):
    schedules: List[Schedule]
    pagination: SchedulePagination


class ScheduleResponse(BaseModel):
    message: str
    schedule: Schedule


# ============================================================
# GENERIC SCHEMAS
# ============================================================

class MessageResponse(BaseModel):
    message: str


class UpdatedResponse(BaseModel):
    message: str
    id: int


__all__ = [
    "SortOrder",
    "BloodGroup", "Genotype", "Gender", "GuardianStatus",
    "StudentSortField", "ScheduleSortField",
    "RegistrationRequest", "LoginRequest", "TokenResponse",
    "StudentUpdate", "StudentWithGuardian", "StudentPagination", "StudentListResponse",
    "ScheduleCreate", "ScheduleUpdate", "Schedule", "SchedulePagination",
    "ScheduleListResponse", "ScheduleResponse",
    "MessageResponse", "UpdatedResponse",
]
