"""
Storage contract shared by the database and in-memory backends.

Backends implement the handful of primitives below; every named accessor the
API uses is built on them here, so the two backends cannot drift apart.
Accessors return None (or False for deletes) when the entity is absent.
"""
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, List, Optional, Type

from nightguard.models.domain import (
    CctvCamera,
    CctvCheck,
    Incident,
    SecuritySignIn,
    ShiftSchedule,
    User,
    Venue
)
from nightguard.models.enums import IncidentStatus, SignInStatus
from nightguard.models.session import UserSession


class Storage(ABC):
    """CRUD accessors over every register table."""

    # Primitives

    @abstractmethod
    def get(self, model: Type, entity_id: int) -> Optional[Any]:
        """Fetch one row by id."""

    @abstractmethod
    def list(self, model: Type, **filters) -> List[Any]:
        """All rows whose fields equal `filters`, in insertion order."""

    @abstractmethod
    def add(self, model: Type, data: Dict[str, Any]) -> Any:
        """Insert a row; the backend assigns the id and column defaults."""

    @abstractmethod
    def update(self, model: Type, entity_id: int, data: Dict[str, Any]) -> Optional[Any]:
        """Overwrite the given fields of one row."""

    @abstractmethod
    def delete(self, model: Type, entity_id: int) -> bool:
        """Remove one row. False if it did not exist."""

    @abstractmethod
    def delete_where(self, model: Type, **filters) -> int:
        """Remove every matching row and return how many went."""

    @abstractmethod
    def transition(
        self,
        model: Type,
        entity_id: int,
        expected: Dict[str, Any],
        changes: Dict[str, Any]
    ) -> Optional[Any]:
        """
        Apply `changes` only if every field in `expected` still holds.

        The check and the write are a single step, so two callers racing on
        the same row cannot both succeed. Returns the updated row, or None
        when the row is absent or no longer matches.
        """

    def find_one(self, model: Type, **filters) -> Optional[Any]:
        rows = self.list(model, **filters)
        return rows[0] if rows else None

    # Users

    def get_user(self, user_id: int) -> Optional[User]:
        return self.get(User, user_id)

    def get_user_by_username(self, username: str) -> Optional[User]:
        return self.find_one(User, username=username)

    def get_users(self) -> List[User]:
        return self.list(User)

    def create_user(self, data: Dict[str, Any]) -> User:
        return self.add(User, data)

    def update_user(self, user_id: int, data: Dict[str, Any]) -> Optional[User]:
        return self.update(User, user_id, data)

    def delete_user(self, user_id: int) -> bool:
        return self.delete(User, user_id)

    # Venues

    def get_venue(self, venue_id: int) -> Optional[Venue]:
        return self.get(Venue, venue_id)

    def get_venues(self) -> List[Venue]:
        return self.list(Venue)

    def create_venue(self, data: Dict[str, Any]) -> Venue:
        return self.add(Venue, data)

    def update_venue(self, venue_id: int, data: Dict[str, Any]) -> Optional[Venue]:
        return self.update(Venue, venue_id, data)

    def delete_venue(self, venue_id: int) -> bool:
        return self.delete(Venue, venue_id)

    # Incidents

    def get_incident(self, incident_id: int) -> Optional[Incident]:
        return self.get(Incident, incident_id)

    def get_incidents(self) -> List[Incident]:
        return self.list(Incident)

    def get_incidents_by_venue(self, venue_id: int) -> List[Incident]:
        return self.list(Incident, venue_id=venue_id)

    def get_incidents_by_status(self, status: IncidentStatus) -> List[Incident]:
        return self.list(Incident, status=IncidentStatus(status))

    def get_incidents_by_user(self, user_id: int) -> List[Incident]:
        return self.list(Incident, created_by=user_id)

    def create_incident(self, data: Dict[str, Any]) -> Incident:
        """New incidents always start pending with no review fields."""
        data = dict(data)
        data["status"] = IncidentStatus.PENDING
        for field in ("reviewed_by", "review_date", "review_notes"):
            data.pop(field, None)
        return self.add(Incident, data)

    def update_incident(self, incident_id: int, data: Dict[str, Any]) -> Optional[Incident]:
        return self.update(Incident, incident_id, data)

    def delete_incident(self, incident_id: int) -> bool:
        return self.delete(Incident, incident_id)

    def approve_incident(self, incident_id: int, reviewer_id: int, notes: Optional[str] = None) -> Optional[Incident]:
        return self._review_incident(incident_id, IncidentStatus.APPROVED, reviewer_id, notes)

    def reject_incident(self, incident_id: int, reviewer_id: int, notes: Optional[str] = None) -> Optional[Incident]:
        return self._review_incident(incident_id, IncidentStatus.REJECTED, reviewer_id, notes)

    def _review_incident(
        self,
        incident_id: int,
        status: IncidentStatus,
        reviewer_id: int,
        notes: Optional[str]
    ) -> Optional[Incident]:
        return self.transition(
            Incident,
            incident_id,
            expected={"status": IncidentStatus.PENDING},
            changes={
                "status": status,
                "reviewed_by": reviewer_id,
                "review_date": datetime.utcnow(),
                "review_notes": notes or None,
            }
        )

    # Security sign-ins

    def get_security_sign_in(self, sign_in_id: int) -> Optional[SecuritySignIn]:
        return self.get(SecuritySignIn, sign_in_id)

    def get_security_sign_ins(self) -> List[SecuritySignIn]:
        return self.list(SecuritySignIn)

    def get_active_security_sign_ins(self) -> List[SecuritySignIn]:
        return self.list(SecuritySignIn, status=SignInStatus.ON_DUTY)

    def get_security_sign_ins_by_venue(self, venue_id: int) -> List[SecuritySignIn]:
        return self.list(SecuritySignIn, venue_id=venue_id)

    def create_security_sign_in(self, data: Dict[str, Any]) -> SecuritySignIn:
        data = dict(data)
        data["status"] = SignInStatus.ON_DUTY
        data.pop("time_out", None)
        return self.add(SecuritySignIn, data)

    def update_security_sign_in(self, sign_in_id: int, data: Dict[str, Any]) -> Optional[SecuritySignIn]:
        return self.update(SecuritySignIn, sign_in_id, data)

    def sign_out_security(self, sign_in_id: int, time_out: datetime) -> Optional[SecuritySignIn]:
        return self.transition(
            SecuritySignIn,
            sign_in_id,
            expected={"status": SignInStatus.ON_DUTY},
            changes={"time_out": time_out, "status": SignInStatus.OFF_DUTY}
        )

    # CCTV cameras

    def get_cctv_camera(self, camera_id: int) -> Optional[CctvCamera]:
        return self.get(CctvCamera, camera_id)

    def get_cctv_cameras(self) -> List[CctvCamera]:
        return self.list(CctvCamera)

    def get_cctv_cameras_by_venue(self, venue_id: int) -> List[CctvCamera]:
        return self.list(CctvCamera, venue_id=venue_id)

    def create_cctv_camera(self, data: Dict[str, Any]) -> CctvCamera:
        return self.add(CctvCamera, data)

    def update_cctv_camera(self, camera_id: int, data: Dict[str, Any]) -> Optional[CctvCamera]:
        return self.update(CctvCamera, camera_id, data)

    def delete_cctv_camera(self, camera_id: int) -> bool:
        return self.delete(CctvCamera, camera_id)

    # CCTV checks

    def get_cctv_check(self, check_id: int) -> Optional[CctvCheck]:
        return self.get(CctvCheck, check_id)

    def get_cctv_checks(self) -> List[CctvCheck]:
        return self.list(CctvCheck)

    def get_cctv_checks_by_venue(self, venue_id: int) -> List[CctvCheck]:
        return self.list(CctvCheck, venue_id=venue_id)

    def get_cctv_checks_by_camera(self, camera_id: int) -> List[CctvCheck]:
        return self.list(CctvCheck, camera_id=camera_id)

    def get_recent_cctv_checks(self, venue_id: int, limit: int = 10) -> List[CctvCheck]:
        """Newest first by check_time."""
        checks = self.get_cctv_checks_by_venue(venue_id)
        checks.sort(key=lambda check: check.check_time, reverse=True)
        return checks[:limit]

    def create_cctv_check(self, data: Dict[str, Any]) -> CctvCheck:
        data = dict(data)
        data["resolved"] = False
        data.pop("action_taken", None)
        return self.add(CctvCheck, data)

    def resolve_cctv_issue(self, check_id: int, action_taken: str) -> Optional[CctvCheck]:
        return self.transition(
            CctvCheck,
            check_id,
            expected={"resolved": False},
            changes={"action_taken": action_taken, "resolved": True}
        )

    # Shift schedules

    def get_shift_schedule(self, schedule_id: int) -> Optional[ShiftSchedule]:
        return self.get(ShiftSchedule, schedule_id)

    def get_shift_schedules(self) -> List[ShiftSchedule]:
        return self.list(ShiftSchedule)

    def get_shift_schedules_by_venue(self, venue_id: int) -> List[ShiftSchedule]:
        return self.list(ShiftSchedule, venue_id=venue_id)

    def create_shift_schedule(self, data: Dict[str, Any]) -> ShiftSchedule:
        return self.add(ShiftSchedule, data)

    def update_shift_schedule(self, schedule_id: int, data: Dict[str, Any]) -> Optional[ShiftSchedule]:
        return self.update(ShiftSchedule, schedule_id, data)

    def delete_shift_schedule(self, schedule_id: int) -> bool:
        return self.delete(ShiftSchedule, schedule_id)

    # Login sessions

    def create_session(self, token: str, user_id: int, expires_at: datetime) -> UserSession:
        return self.add(UserSession, {"token": token, "user_id": user_id, "expires_at": expires_at})

    def get_session(self, token: str) -> Optional[UserSession]:
        return self.find_one(UserSession, token=token)

    def delete_session(self, token: str) -> None:
        self.delete_where(UserSession, token=token)

    def delete_user_sessions(self, user_id: int) -> None:
        self.delete_where(UserSession, user_id=user_id)
