# validators.py
import re
from typing import List, Mapping, Optional

from pydantic import ValidationError

from employee_api.errors import (
    InvalidEmailError,
    InvalidEmployeeIdError,
    InvalidFieldError,
    InvalidPhoneError,
    MissingFieldError,
)
from employee_api.schemas.employee_schema import EmployeeIn

# form field names, in the order the admin page sends them
REQUIRED_FIELDS = (
    "id", "name", "role", "gender", "dob", "location", "email",
    "phone", "joinDate", "experience", "skills", "achievement",
)

EMPLOYEE_ID_RE = re.compile(r"[A-Z]{3}[0-9]{4}")
PHONE_RE = re.compile(r"[0-9]{10}")


def _email_re(domain: str):
    return re.compile(r"[a-zA-Z0-9](?:[a-zA-Z0-9._-]*[a-zA-Z0-9])?@" + re.escape(domain))


def is_valid_employee_id(value: Optional[str]) -> bool:
    return bool(value) and EMPLOYEE_ID_RE.fullmatch(value) is not None


def is_valid_email(value: Optional[str], domain: str = "astrolitetech.com") -> bool:
    return bool(value) and _email_re(domain).fullmatch(value) is not None


def is_valid_phone(value: Optional[str]) -> bool:
    return bool(value) and PHONE_RE.fullmatch(value) is not None


def missing_fields(form: Mapping[str, Optional[str]]) -> List[str]:
    missing = []
    for name in REQUIRED_FIELDS:
        v = form.get(name)
        if v is None or (isinstance(v, str) and v.strip() == ""):
            missing.append(name)
    return missing


def _describe(err: ValidationError) -> str:
    first = err.errors()[0]
    loc = first.get("loc") or ("field",)
    return f"Invalid {loc[-1]}: {first.get('msg')}"


def validate_employee_form(form: Mapping[str, Optional[str]], email_domain: str = "astrolitetech.com") -> EmployeeIn:
    """
    Check an add-employee form and return the typed record.

    Rules run in order and the first failure is raised:
    presence, employee id, email, phone, then lengths/dates/integer.
    """
    missing = missing_fields(form)
    if missing:
        raise MissingFieldError(missing)

    if not is_valid_employee_id(form["id"]):
        raise InvalidEmployeeIdError()

    if not is_valid_email(form["email"], email_domain):
        raise InvalidEmailError(f"Invalid email format (must be @{email_domain})")

    if not is_valid_phone(form["phone"]):
        raise InvalidPhoneError()

    try:
        return EmployeeIn(**{name: form[name] for name in REQUIRED_FIELDS})
    except ValidationError as e:
        raise InvalidFieldError(_describe(e)) from e
