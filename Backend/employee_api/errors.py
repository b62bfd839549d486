# errors.py
from enum import Enum


class ErrorKind(str, Enum):
    MISSING_FIELD = "missing_field"
    INVALID_EMPLOYEE_ID = "invalid_employee_id"
    INVALID_EMAIL = "invalid_email"
    INVALID_PHONE = "invalid_phone"
    INVALID_FIELD = "invalid_field"
    INVALID_UPLOAD_TYPE = "invalid_upload_type"
    UPLOAD_TOO_LARGE = "upload_too_large"
    TOO_MANY_FILES = "too_many_files"
    DUPLICATE_EMPLOYEE = "duplicate_employee"
    NOT_FOUND = "not_found"
    STORE_ERROR = "store_error"


# HTTP status per error kind
STATUS_CODES = {
    ErrorKind.MISSING_FIELD: 400,
    ErrorKind.INVALID_EMPLOYEE_ID: 400,
    ErrorKind.INVALID_EMAIL: 400,
    ErrorKind.INVALID_PHONE: 400,
    ErrorKind.INVALID_FIELD: 400,
    ErrorKind.INVALID_UPLOAD_TYPE: 400,
    ErrorKind.UPLOAD_TOO_LARGE: 400,
    ErrorKind.TOO_MANY_FILES: 400,
    ErrorKind.DUPLICATE_EMPLOYEE: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.STORE_ERROR: 500,
}


class EmployeeServiceError(Exception):
    kind = ErrorKind.STORE_ERROR
    default_message = "Server error"

    def __init__(self, message=None, details=None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    @property
    def status_code(self) -> int:
        return STATUS_CODES[self.kind]


class MissingFieldError(EmployeeServiceError):
    kind = ErrorKind.MISSING_FIELD
    default_message = "All fields are required"

    def __init__(self, fields=None):
        super().__init__()
        self.fields = list(fields or [])


class InvalidEmployeeIdError(EmployeeServiceError):
    kind = ErrorKind.INVALID_EMPLOYEE_ID
    default_message = "Invalid Employee ID format (should be ABC1234 format)"


class InvalidEmailError(EmployeeServiceError):
    kind = ErrorKind.INVALID_EMAIL
    default_message = "Invalid email format"


class InvalidPhoneError(EmployeeServiceError):
    kind = ErrorKind.INVALID_PHONE
    default_message = "Phone number must be 10 digits"


class InvalidFieldError(EmployeeServiceError):
    kind = ErrorKind.INVALID_FIELD
    default_message = "Invalid field value"


class InvalidUploadTypeError(EmployeeServiceError):
    kind = ErrorKind.INVALID_UPLOAD_TYPE
    default_message = "Only JPEG or PNG images are allowed"


class UploadTooLargeError(EmployeeServiceError):
    kind = ErrorKind.UPLOAD_TOO_LARGE
    default_message = "File too large"


class TooManyFilesError(EmployeeServiceError):
    kind = ErrorKind.TOO_MANY_FILES
    default_message = "Only one profile image may be uploaded"


class DuplicateEmployeeError(EmployeeServiceError):
    kind = ErrorKind.DUPLICATE_EMPLOYEE
    default_message = "Employee ID already exists"


class EmployeeNotFoundError(EmployeeServiceError):
    kind = ErrorKind.NOT_FOUND
    default_message = "Employee not found"


class StoreError(EmployeeServiceError):
    kind = ErrorKind.STORE_ERROR
    default_message = "Server error"


class SchemaBootstrapError(RuntimeError):
    """Raised when the employees schema cannot be verified at startup."""
