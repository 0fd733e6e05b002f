"""Enums for the register - these define the valid values for roles and statuses."""
from enum import Enum


class UserRole(str, Enum):
    """The four roles, lowest to highest. Ordering lives in services.permissions."""
    STAFF = "staff"
    SECURITY = "security"
    MANAGER = "manager"
    ADMIN = "admin"


class DocumentType(str, Enum):
    """Credential documents a user can upload."""
    SECURITY_LICENSE = "security_license"
    RSA_CERTIFICATE = "rsa_certificate"


class VenueStatus(str, Enum):
    OPEN = "open"
    CLOSED = "closed"


class IncidentStatus(str, Enum):
    """Review status. PENDING is initial, the other two are terminal."""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class SignInStatus(str, Enum):
    ON_DUTY = "on-duty"
    OFF_DUTY = "off-duty"


class CameraStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    MAINTENANCE = "maintenance"


class CheckStatus(str, Enum):
    """Outcome of a CCTV camera check."""
    WORKING = "working"
    ISSUE = "issue"
    OFFLINE = "offline"


class ShiftType(str, Enum):
    """Whether a CCTV check was done at the start or end of a shift."""
    START = "start"
    END = "end"
