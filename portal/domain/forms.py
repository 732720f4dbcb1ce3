"""
forms.py - Form schemas
Single responsibility: validate dialog input and shape the camelCase
payloads the backend expects.
"""

import re
from typing import Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    EmailStr,
    ValidationError,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from portal.domain.catalog import DAYS

COURSE_CODE_RE = re.compile(r"^[A-Z]{2,4}\d{3,4}$")
TIME_RE = re.compile(r"^([0-1][0-9]|2[0-3]):[0-5][0-9]$")
PASSWORD_STRENGTH_RE = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)")

# Prefix of the message pydantic raises for a malformed EmailStr
INVALID_EMAIL_PREFIX = "value is not a valid email address"


def _required(value, message: str):
    if isinstance(value, str):
        value = value.strip()
    if value is None or value == "":
        raise ValueError(message)
    return value


def _length(value: str, label: str, min_len: int, max_len: Optional[int] = None) -> str:
    if len(value) < min_len:
        raise ValueError(f"{label} must be at least {min_len} characters")
    if max_len is not None and len(value) > max_len:
        raise ValueError(f"{label} must be less than {max_len} characters")
    return value


def _int_in_range(value, label: str, low: int, high: Optional[int] = None) -> int:
    try:
        number = int(str(value).strip())
    except (TypeError, ValueError):
        raise ValueError(f"{label} must be a number") from None
    if number < low:
        raise ValueError(f"{label} must be at least {low}")
    if high is not None and number > high:
        raise ValueError(f"{label} must be at most {high}")
    return number


class FormModel(BaseModel):
    """Base for dialog forms: python names in, camelCase out, blanks dropped."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_default=True,
        coerce_numbers_to_str=True,
        loc_by_alias=False,
    )

    @model_validator(mode="before")
    @classmethod
    def _blank_to_none(cls, data):
        if isinstance(data, dict):
            return {
                k: (None if isinstance(v, str) and not v.strip() else v)
                for k, v in data.items()
            }
        return data

    def to_payload(self) -> dict:
        return self.model_dump(exclude_none=True, by_alias=True)


def form_errors(exc: ValidationError) -> dict[str, str]:
    """Field name -> first message, stripped of pydantic's prefixes."""
    errors: dict[str, str] = {}
    for err in exc.errors():
        loc = err.get("loc") or ("__root__",)
        name = str(loc[0])
        msg = err.get("msg", "")
        if msg.startswith("Value error, "):
            msg = msg[len("Value error, "):]
        if msg.startswith(INVALID_EMAIL_PREFIX):
            msg = "Invalid email format"
        errors.setdefault(name, msg)
    return errors


class LoginForm(FormModel):
    email: Optional[EmailStr] = None
    password: Optional[str] = None

    @field_validator("email", mode="before")
    @classmethod
    def _check_email(cls, v):
        return _required(v, "Email is required")

    @field_validator("password", mode="before")
    @classmethod
    def _check_password(cls, v):
        return _required(v, "Password is required")


class CourseForm(FormModel):
    code: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    credit_hours: Optional[int] = None
    semester: Optional[str] = None
    teacher_id: Optional[str] = None

    @field_validator("code", mode="before")
    @classmethod
    def _check_code(cls, v):
        v = _required(v, "Course code is required").upper()
        if not COURSE_CODE_RE.match(v):
            raise ValueError("Course code must be 2-4 letters followed by 3-4 digits (e.g., CS101)")
        return v

    @field_validator("name", mode="before")
    @classmethod
    def _check_name(cls, v):
        return _length(_required(v, "Course name is required"), "Course name", 3, 200)

    @field_validator("credit_hours", mode="before")
    @classmethod
    def _check_credits(cls, v):
        _required(v, "Credit hours is required")
        return _int_in_range(v, "Credit hours", 1, 6)

    @field_validator("semester", mode="before")
    @classmethod
    def _check_semester(cls, v):
        return _required(v, "Semester is required")

    @field_validator("teacher_id", mode="before")
    @classmethod
    def _check_teacher(cls, v):
        return _required(v, "Teacher is required")


class _PersonForm(FormModel):
    full_name: Optional[str] = None
    email: Optional[EmailStr] = None

    @field_validator("full_name", mode="before")
    @classmethod
    def _check_name(cls, v):
        return _length(_required(v, "Full name is required"), "Full name", 3, 100)

    @field_validator("email", mode="before")
    @classmethod
    def _check_email(cls, v):
        return _required(v, "Email is required")


class _NewAccountForm(FormModel):
    password: Optional[str] = None

    @field_validator("password", mode="before")
    @classmethod
    def _check_password(cls, v):
        return _length(_required(v, "Password is required"), "Password", 6)


class TeacherUpdateForm(_PersonForm):
    department: Optional[str] = None
    designation: Optional[str] = None


class TeacherCreateForm(TeacherUpdateForm, _NewAccountForm):
    pass


class StudentUpdateForm(_PersonForm):
    roll_number: Optional[str] = None
    current_semester: Optional[int] = None
    program: Optional[str] = None

    @field_validator("current_semester", mode="before")
    @classmethod
    def _check_semester(cls, v):
        if v is None:
            return None
        return _int_in_range(v, "Semester", 1, 8)


class StudentCreateForm(StudentUpdateForm, _NewAccountForm):
    pass


class TimetableForm(FormModel):
    course_id: Optional[str] = None
    teacher_id: Optional[str] = None
    day_of_week: Optional[str] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    room: Optional[str] = None
    semester: Optional[str] = None

    @field_validator("course_id", mode="before")
    @classmethod
    def _check_course(cls, v):
        return _required(v, "Course is required")

    @field_validator("teacher_id", mode="before")
    @classmethod
    def _check_teacher(cls, v):
        return _required(v, "Teacher is required")

    @field_validator("day_of_week", mode="before")
    @classmethod
    def _check_day(cls, v):
        v = _required(v, "Day is required")
        if v not in DAYS:
            raise ValueError("Invalid day")
        return v

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def _check_time(cls, v, info):
        label = "Start time" if info.field_name == "start_time" else "End time"
        v = _required(v, f"{label} is required")
        if not TIME_RE.match(v):
            raise ValueError("Invalid time format (HH:MM)")
        return v

    @field_validator("room", mode="before")
    @classmethod
    def _check_room(cls, v):
        return _length(_required(v, "Room is required"), "Room", 2)

    @field_validator("semester", mode="before")
    @classmethod
    def _check_semester(cls, v):
        return _required(v, "Semester is required")


class EnrollmentForm(FormModel):
    student_id: Optional[str] = None
    course_id: Optional[str] = None
    section: Optional[str] = None

    @field_validator("student_id", mode="before")
    @classmethod
    def _check_student(cls, v):
        return _required(v, "Student is required")

    @field_validator("course_id", mode="before")
    @classmethod
    def _check_course(cls, v):
        return _required(v, "Course is required")

    @field_validator("section", mode="before")
    @classmethod
    def _check_section(cls, v):
        return _required(v, "Section is required")


class GradeForm(FormModel):
    semester: Optional[str] = None
    total_marks: Optional[int] = None
    marks_obtained: Optional[int] = None

    @field_validator("semester", mode="before")
    @classmethod
    def _check_semester(cls, v):
        return _required(v, "Semester is required")

    @field_validator("total_marks", mode="before")
    @classmethod
    def _check_total(cls, v):
        _required(v, "Total marks is required")
        return _int_in_range(v, "Total marks", 1)

    @field_validator("marks_obtained", mode="before")
    @classmethod
    def _check_obtained(cls, v):
        if v is None:
            raise ValueError("Marks obtained is required")
        return _int_in_range(v, "Marks obtained", 0)

    @model_validator(mode="after")
    def _within_total(self):
        if self.marks_obtained > self.total_marks:
            raise ValueError("Marks obtained cannot exceed total marks")
        return self


class RequestForm(FormModel):
    type: Optional[str] = None
    subject: Optional[str] = None
    description: Optional[str] = None

    @field_validator("type", mode="before")
    @classmethod
    def _check_type(cls, v):
        return _required(v, "Request type is required")

    @field_validator("subject", mode="before")
    @classmethod
    def _check_subject(cls, v):
        return _length(_required(v, "Subject is required"), "Subject", 5, 100)

    @field_validator("description", mode="before")
    @classmethod
    def _check_description(cls, v):
        return _length(_required(v, "Description is required"), "Description", 10, 1000)


class RespondForm(FormModel):
    response: Optional[str] = None
    status: Optional[str] = None

    @field_validator("response", mode="before")
    @classmethod
    def _check_response(cls, v):
        return _length(_required(v, "Response is required"), "Response", 10, 1000)

    @field_validator("status", mode="before")
    @classmethod
    def _check_status(cls, v):
        return _required(v, "Status is required")


class ProfileForm(_PersonForm):
    """Personal fields a user may change on their own profile."""

    phone: Optional[str] = None
    address: Optional[str] = None
    date_of_birth: Optional[str] = None


class ChangePasswordForm(FormModel):
    current_password: Optional[str] = None
    new_password: Optional[str] = None
    confirm_password: Optional[str] = None

    @field_validator("current_password", mode="before")
    @classmethod
    def _check_current(cls, v):
        return _required(v, "Current password is required")

    @field_validator("new_password", mode="before")
    @classmethod
    def _check_new(cls, v):
        v = _length(_required(v, "New password is required"), "Password", 8)
        if not PASSWORD_STRENGTH_RE.match(v):
            raise ValueError(
                "Password must contain at least one uppercase letter, "
                "one lowercase letter, and one number"
            )
        return v

    @field_validator("confirm_password", mode="before")
    @classmethod
    def _check_confirm(cls, v, info):
        v = _required(v, "Please confirm your password")
        new_password = info.data.get("new_password")
        if new_password is not None and v != new_password:
            raise ValueError("Passwords must match")
        return v


class ForumPostForm(FormModel):
    title: Optional[str] = None
    content: Optional[str] = None
    course_id: Optional[str] = None

    @field_validator("title", mode="before")
    @classmethod
    def _check_title(cls, v):
        return _length(_required(v, "Title is required"), "Title", 5, 200)

    @field_validator("content", mode="before")
    @classmethod
    def _check_content(cls, v):
        return _length(_required(v, "Content is required"), "Content", 10, 5000)


class ReplyForm(FormModel):
    content: Optional[str] = None

    @field_validator("content", mode="before")
    @classmethod
    def _check_content(cls, v):
        return _length(_required(v, "Reply is required"), "Reply", 5, 2000)
