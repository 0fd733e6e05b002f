"""Domain models - the seven register tables."""
from datetime import datetime
from sqlalchemy import Boolean, Column, DateTime, Enum as SQLEnum, Integer, String, Text
from nightguard.database import Base
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


def _values(enum_cls):
    # Persist enum values ("on-duty"), not member names ("ON_DUTY")
    return [member.value for member in enum_cls]


class User(Base):
    """
    A register account.

    Invariants:
    - password holds an opaque salted hash, never plain text
    - document_verified is reset to False on every upload
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    username = Column(String, nullable=False, unique=True, index=True)
    password = Column(String, nullable=False)
    name = Column(String, nullable=False)
    email = Column(String, nullable=False)
    role = Column(SQLEnum(UserRole, values_callable=_values), nullable=False, default=UserRole.SECURITY)

    # Uploaded security licence or RSA certificate
    document_path = Column(String, nullable=True)
    document_type = Column(SQLEnum(DocumentType, values_callable=_values), nullable=True)
    document_verified = Column(Boolean, nullable=False, default=False)


class Venue(Base):
    __tablename__ = "venues"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String, nullable=False)
    address = Column(String, nullable=False)
    contact = Column(String, nullable=False)
    status = Column(SQLEnum(VenueStatus, values_callable=_values), nullable=False, default=VenueStatus.CLOSED)


class Incident(Base):
    """
    A reported event at a venue, reviewed by a manager or admin.

    Invariants:
    - Created as pending (handled in the storage layer)
    - pending -> approved | rejected, exactly once
    - reviewed_by, review_date and review_notes are written together with status
    """
    __tablename__ = "incidents"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    type = Column(String, nullable=False)
    severity = Column(String, nullable=False)
    date = Column(DateTime, nullable=False)
    venue_id = Column(Integer, nullable=False, index=True)  # No FK: venue deletes do not cascade
    location = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    involved_parties = Column(Text, nullable=True)
    actions_taken = Column(Text, nullable=True)
    witnesses = Column(Text, nullable=True)
    reported_by = Column(String, nullable=False)
    position = Column(String, nullable=False)

    # Approval workflow
    status = Column(SQLEnum(IncidentStatus, values_callable=_values), nullable=False, default=IncidentStatus.PENDING)
    reviewed_by = Column(Integer, nullable=True)
    review_date = Column(DateTime, nullable=True)
    review_notes = Column(Text, nullable=True)
    created_by = Column(Integer, nullable=True, index=True)


class SecuritySignIn(Base):
    """
    One guard's shift attendance.

    Invariants:
    - time_out and off-duty status are set together, exactly once
    """
    __tablename__ = "security_sign_ins"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    security_name = Column(String, nullable=False)
    badge_number = Column(String, nullable=False)
    venue_id = Column(Integer, nullable=False, index=True)
    position = Column(String, nullable=False)
    date = Column(DateTime, nullable=False)
    time_in = Column(DateTime, nullable=False)
    time_out = Column(DateTime, nullable=True)
    notes = Column(Text, nullable=True)
    status = Column(SQLEnum(SignInStatus, values_callable=_values), nullable=False, default=SignInStatus.ON_DUTY)


class CctvCamera(Base):
    __tablename__ = "cctv_cameras"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String, nullable=False)
    type = Column(String, nullable=False)  # e.g. "PTZ", "Fixed"
    location = Column(String, nullable=False)
    venue_id = Column(Integer, nullable=False, index=True)
    status = Column(SQLEnum(CameraStatus, values_callable=_values), nullable=False, default=CameraStatus.ACTIVE)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)


class CctvCheck(Base):
    """
    A periodic inspection of one camera.

    Invariants:
    - action_taken and resolved=True are written together, once
    """
    __tablename__ = "cctv_checks"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    camera_id = Column(Integer, nullable=False, index=True)
    checked_by = Column(Integer, nullable=False)  # User ID
    venue_id = Column(Integer, nullable=False, index=True)
    check_time = Column(DateTime, nullable=False, default=datetime.utcnow)
    shift_type = Column(SQLEnum(ShiftType, values_callable=_values), nullable=False)
    status = Column(SQLEnum(CheckStatus, values_callable=_values), nullable=False)
    issue_description = Column(Text, nullable=True)
    action_taken = Column(Text, nullable=True)
    resolved = Column(Boolean, nullable=False, default=False)


class ShiftSchedule(Base):
    __tablename__ = "shift_schedules"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    venue_id = Column(Integer, nullable=False, index=True)
    name = Column(String, nullable=False)
    start_time = Column(String, nullable=False)  # 24h "HH:MM"
    end_time = Column(String, nullable=False)
    active = Column(Boolean, nullable=False, default=True)
