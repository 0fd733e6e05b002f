"""Pydantic schemas for request/response validation."""
from datetime import datetime, timezone
from typing import Annotated, List, Optional
from pydantic import AfterValidator, BaseModel, ConfigDict, Field, StrictBool
from nightguard.models.enums import (
    CameraStatus,
    CheckStatus,
    DocumentType,
    IncidentStatus,
    ShiftType,
    SignInStatus,
    UserRole,
    VenueStatus
)


TIME_OF_DAY = r"^([01]\d|2[0-3]):[0-5]\d$"


def _naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    # Rows store naive UTC; offset-aware input is converted, not rejected
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


UtcDatetime = Annotated[datetime, AfterValidator(_naive_utc)]


class ORMResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)


# User schemas
class UserResponse(ORMResponse):
    """A user as the API shows it. The password hash is never included."""
    id: int
    username: str
    name: str
    email: str
    role: UserRole
    document_path: Optional[str]
    document_type: Optional[DocumentType]
    document_verified: bool


class UserRoleUpdate(BaseModel):
    role: UserRole


class RegisterRequest(BaseModel):
    username: str = Field(..., min_length=3, max_length=64)
    password: str = Field(..., min_length=6)
    name: str = Field(..., min_length=1)
    email: str = Field(..., pattern=r"^[^@\s]+@[^@\s]+$")
    role: UserRole = UserRole.SECURITY


class LoginRequest(BaseModel):
    username: str
    password: str


# Venue schemas
class VenueCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    address: str = Field(..., min_length=1)
    contact: str = Field(..., min_length=1)
    status: VenueStatus = VenueStatus.CLOSED


class VenueUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    address: Optional[str] = Field(None, min_length=1)
    contact: Optional[str] = Field(None, min_length=1)
    status: Optional[VenueStatus] = None


class VenueResponse(ORMResponse):
    id: int
    name: str
    address: str
    contact: str
    status: VenueStatus


# Incident schemas
class IncidentCreate(BaseModel):
    """Status and review fields are not accepted: new incidents are always pending."""
    type: str = Field(..., min_length=1)
    severity: str = Field(..., min_length=1)
    date: UtcDatetime
    venue_id: int
    location: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    involved_parties: Optional[str] = None
    actions_taken: Optional[str] = None
    witnesses: Optional[str] = None
    reported_by: str = Field(..., min_length=1)
    position: str = Field(..., min_length=1)


class IncidentUpdate(BaseModel):
    """Editable report fields only. Review happens through approve/reject."""
    type: Optional[str] = Field(None, min_length=1)
    severity: Optional[str] = Field(None, min_length=1)
    date: Optional[UtcDatetime] = None
    venue_id: Optional[int] = None
    location: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = Field(None, min_length=1)
    involved_parties: Optional[str] = None
    actions_taken: Optional[str] = None
    witnesses: Optional[str] = None
    reported_by: Optional[str] = Field(None, min_length=1)
    position: Optional[str] = Field(None, min_length=1)


class IncidentResponse(ORMResponse):
    id: int
    type: str
    severity: str
    date: datetime
    venue_id: int
    location: str
    description: str
    involved_parties: Optional[str]
    actions_taken: Optional[str]
    witnesses: Optional[str]
    reported_by: str
    position: str
    status: IncidentStatus
    reviewed_by: Optional[int]
    review_date: Optional[datetime]
    review_notes: Optional[str]
    created_by: Optional[int]


class IncidentReview(BaseModel):
    notes: Optional[str] = Field(None, max_length=2000)


# Security sign-in schemas
class SecuritySignInCreate(BaseModel):
    security_name: str = Field(..., min_length=1)
    badge_number: str = Field(..., min_length=1)
    venue_id: int
    position: str = Field(..., min_length=1)
    date: UtcDatetime
    time_in: UtcDatetime
    notes: Optional[str] = None


class SecuritySignInUpdate(BaseModel):
    """time_out and status are set by sign-out only."""
    security_name: Optional[str] = Field(None, min_length=1)
    badge_number: Optional[str] = Field(None, min_length=1)
    venue_id: Optional[int] = None
    position: Optional[str] = Field(None, min_length=1)
    date: Optional[UtcDatetime] = None
    time_in: Optional[UtcDatetime] = None
    notes: Optional[str] = None


class SignOutRequest(BaseModel):
    time_out: Optional[UtcDatetime] = None


class SecuritySignInResponse(ORMResponse):
    id: int
    security_name: str
    badge_number: str
    venue_id: int
    position: str
    date: datetime
    time_in: datetime
    time_out: Optional[datetime]
    notes: Optional[str]
    status: SignInStatus


# CCTV camera schemas
class CctvCameraCreate(BaseModel):
    name: str = Field(..., min_length=1)
    type: str = Field(..., min_length=1)
    location: str = Field(..., min_length=1)
    venue_id: int
    status: CameraStatus = CameraStatus.ACTIVE
    notes: Optional[str] = None


class CctvCameraUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    type: Optional[str] = Field(None, min_length=1)
    location: Optional[str] = Field(None, min_length=1)
    venue_id: Optional[int] = None
    status: Optional[CameraStatus] = None
    notes: Optional[str] = None


class CctvCameraResponse(ORMResponse):
    id: int
    name: str
    type: str
    location: str
    venue_id: int
    status: CameraStatus
    notes: Optional[str]
    created_at: datetime


# CCTV check schemas
class CctvCheckCreate(BaseModel):
    """checked_by is the caller; resolution fields are set by resolve only."""
    camera_id: int
    venue_id: int
    shift_type: ShiftType
    status: CheckStatus
    issue_description: Optional[str] = None


class CctvCheckResolve(BaseModel):
    action_taken: Optional[str] = None


class CctvCheckResponse(ORMResponse):
    id: int
    camera_id: int
    checked_by: int
    venue_id: int
    check_time: datetime
    shift_type: ShiftType
    status: CheckStatus
    issue_description: Optional[str]
    action_taken: Optional[str]
    resolved: bool


# Shift schedule schemas
class ShiftScheduleCreate(BaseModel):
    venue_id: int
    name: str = Field(..., min_length=1)
    start_time: str = Field(..., pattern=TIME_OF_DAY)
    end_time: str = Field(..., pattern=TIME_OF_DAY)
    active: bool = True


class ShiftScheduleUpdate(BaseModel):
    venue_id: Optional[int] = None
    name: Optional[str] = Field(None, min_length=1)
    start_time: Optional[str] = Field(None, pattern=TIME_OF_DAY)
    end_time: Optional[str] = Field(None, pattern=TIME_OF_DAY)
    active: Optional[bool] = None


class ShiftScheduleResponse(ORMResponse):
    id: int
    venue_id: int
    name: str
    start_time: str
    end_time: str
    active: bool


# Document schemas
class DocumentVerify(BaseModel):
    verified: StrictBool


class DocumentResult(BaseModel):
    message: str
    user: UserResponse


# Dashboard schemas
class DashboardStats(BaseModel):
    total_incidents: int
    pending_incidents: int
    total_sign_ins: int
    active_venues: int
    total_venues: int
    total_cameras: int
    recent_incidents: List[IncidentResponse]
    active_sign_ins: List[SecuritySignInResponse]
    venues: List[VenueResponse]


class PermissionsResponse(BaseModel):
    """Role order and page minimums, for hiding UI the API would refuse."""
    roles: List[UserRole]
    pages: dict
    role: Optional[UserRole] = None
    accessible_pages: List[str] = []


# Error response
class ErrorResponse(BaseModel):
    message: str
    errors: List[dict] = []
