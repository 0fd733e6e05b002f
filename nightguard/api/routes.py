"""API routes for venue operations: venues, incidents, guards, CCTV and shifts."""
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from pydantic import BaseModel

from nightguard.api.deps import require_manager, require_security, require_staff
from nightguard.api.schemas import (
    CctvCameraCreate,
    CctvCameraResponse,
    CctvCameraUpdate,
    CctvCheckCreate,
    CctvCheckResolve,
    CctvCheckResponse,
    DashboardStats,
    ErrorResponse,
    IncidentCreate,
    IncidentResponse,
    IncidentReview,
    IncidentUpdate,
    PermissionsResponse,
    SecuritySignInCreate,
    SecuritySignInResponse,
    SecuritySignInUpdate,
    ShiftScheduleCreate,
    ShiftScheduleResponse,
    ShiftScheduleUpdate,
    SignOutRequest,
    VenueCreate,
    VenueResponse,
    VenueUpdate
)
from nightguard.models.domain import User
from nightguard.models.enums import IncidentStatus, UserRole
from nightguard.services.dashboard import build_dashboard_stats
from nightguard.services.errors import NotFound
from nightguard.services.permissions import PAGE_PERMISSIONS, ROLE_RANK, accessible_pages
from nightguard.services.workflow import Workflow
from nightguard.storage.base import Storage
from nightguard.storage.factory import get_storage

router = APIRouter()


def _changes(payload: BaseModel, clearable: Iterable[str] = ()) -> Dict[str, Any]:
    """Fields the client actually sent. Explicit nulls only count for clearable fields."""
    return {
        field: value
        for field, value in payload.model_dump(exclude_unset=True).items()
        if value is not None or field in clearable
    }


def _found(entity, message: str):
    if entity is None:
        raise NotFound(message)
    return entity


def _deleted(deleted: bool, message: str) -> Response:
    if not deleted:
        raise NotFound(message)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# Venue endpoints
@router.get("/venues", response_model=List[VenueResponse])
def list_venues(storage: Storage = Depends(get_storage), user: User = Depends(require_staff)):
    return storage.get_venues()


@router.get("/venues/{venue_id}", response_model=VenueResponse)
def get_venue(venue_id: int, storage: Storage = Depends(get_storage), user: User = Depends(require_staff)):
    return _found(storage.get_venue(venue_id), "Venue not found")


@router.post("/venues", response_model=VenueResponse, status_code=status.HTTP_201_CREATED)
def create_venue(
    venue_data: VenueCreate,
    storage: Storage = Depends(get_storage),
    user: User = Depends(require_staff)
):
    return storage.create_venue(venue_data.model_dump())


@router.put("/venues/{venue_id}", response_model=VenueResponse)
def update_venue(
    venue_id: int,
    venue_data: VenueUpdate,
    storage: Storage = Depends(get_storage),
    user: User = Depends(require_staff)
):
    return _found(storage.update_venue(venue_id, _changes(venue_data)), "Venue not found")


@router.delete("/venues/{venue_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_venue(venue_id: int, storage: Storage = Depends(get_storage), user: User = Depends(require_manager)):
    """Delete a venue. Incidents, cameras and sign-ins referencing it are left as they are."""
    return _deleted(storage.delete_venue(venue_id), "Venue not found")


# Incident endpoints
@router.get("/incidents", response_model=List[IncidentResponse])
def list_incidents(
    venue_id: Optional[int] = None,
    incident_status: Optional[IncidentStatus] = Query(None, alias="status"),
    user_id: Optional[int] = None,
    storage: Storage = Depends(get_storage),
    user: User = Depends(require_staff)
):
    """List incidents in insertion order, optionally filtered by venue, status and creator."""
    if venue_id is not None:
        incidents = storage.get_incidents_by_venue(venue_id)
    elif incident_status is not None:
        incidents = storage.get_incidents_by_status(incident_status)
    elif user_id is not None:
        incidents = storage.get_incidents_by_user(user_id)
    else:
        return storage.get_incidents()

    return [
        incident for incident in incidents
        if (incident_status is None or incident.status == incident_status)
        and (user_id is None or incident.created_by == user_id)
    ]


@router.get("/incidents/status/{incident_status}", response_model=List[IncidentResponse])
def list_incidents_by_status(
    incident_status: IncidentStatus,
    storage: Storage = Depends(get_storage),
    user: User = Depends(require_staff)
):
    return storage.get_incidents_by_status(incident_status)


@router.get("/incidents/user/{user_id}", response_model=List[IncidentResponse])
def list_incidents_by_user(user_id: int, storage: Storage = Depends(get_storage), user: User = Depends(require_staff)):
    """Incidents reported by one user account."""
    return storage.get_incidents_by_user(user_id)


@router.get("/incidents/{incident_id}", response_model=IncidentResponse)
def get_incident(incident_id: int, storage: Storage = Depends(get_storage), user: User = Depends(require_staff)):
    return _found(storage.get_incident(incident_id), "Incident not found")


@router.post("/incidents", response_model=IncidentResponse, status_code=status.HTTP_201_CREATED)
def create_incident(
    incident_data: IncidentCreate,
    storage: Storage = Depends(get_storage),
    user: User = Depends(require_staff)
):
    """Report an incident. It starts pending and is attributed to the caller."""
    data = incident_data.model_dump()
    data["created_by"] = user.id
    return storage.create_incident(data)


@router.put("/incidents/{incident_id}", response_model=IncidentResponse)
def update_incident(
    incident_id: int,
    incident_data: IncidentUpdate,
    storage: Storage = Depends(get_storage),
    user: User = Depends(require_security)
):
    changes = _changes(incident_data, clearable=("involved_parties", "actions_taken", "witnesses"))
    return _found(storage.update_incident(incident_id, changes), "Incident not found")


@router.delete("/incidents/{incident_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_incident(incident_id: int, storage: Storage = Depends(get_storage), user: User = Depends(require_manager)):
    return _deleted(storage.delete_incident(incident_id), "Incident not found")


@router.post("/incidents/{incident_id}/approve", response_model=IncidentResponse, responses={
    400: {"model": ErrorResponse, "description": "Incident is not pending"}
})
def approve_incident(
    incident_id: int,
    review: Optional[IncidentReview] = None,
    storage: Storage = Depends(get_storage),
    user: User = Depends(require_manager)
):
    """
    Approve a pending incident.
    Refused with 400 if the incident was already reviewed.
    """
    return Workflow(storage).approve_incident(incident_id, user, review.notes if review else None)


@router.post("/incidents/{incident_id}/reject", response_model=IncidentResponse, responses={
    400: {"model": ErrorResponse, "description": "Incident is not pending"}
})
def reject_incident(
    incident_id: int,
    review: Optional[IncidentReview] = None,
    storage: Storage = Depends(get_storage),
    user: User = Depends(require_manager)
):
    """
    Reject a pending incident. Notes are mandatory.
    Refused with 400 if the incident was already reviewed.
    """
    return Workflow(storage).reject_incident(incident_id, user, review.notes if review else None)


# Security sign-in endpoints
@router.get("/security-sign-ins", response_model=List[SecuritySignInResponse])
def list_security_sign_ins(
    venue_id: Optional[int] = None,
    active: bool = False,
    storage: Storage = Depends(get_storage),
    user: User = Depends(require_security)
):
    """List sign-ins; `active=true` keeps only guards currently on duty."""
    if active:
        sign_ins = storage.get_active_security_sign_ins()
        if venue_id is not None:
            sign_ins = [sign_in for sign_in in sign_ins if sign_in.venue_id == venue_id]
        return sign_ins
    if venue_id is not None:
        return storage.get_security_sign_ins_by_venue(venue_id)
    return storage.get_security_sign_ins()


@router.get("/security-sign-ins/{sign_in_id}", response_model=SecuritySignInResponse)
def get_security_sign_in(
    sign_in_id: int,
    storage: Storage = Depends(get_storage),
    user: User = Depends(require_security)
):
    return _found(storage.get_security_sign_in(sign_in_id), "Security sign-in not found")


@router.post("/security-sign-ins", response_model=SecuritySignInResponse, status_code=status.HTTP_201_CREATED)
def create_security_sign_in(
    sign_in_data: SecuritySignInCreate,
    storage: Storage = Depends(get_storage),
    user: User = Depends(require_security)
):
    """Sign a guard in. Every sign-in starts on duty."""
    return storage.create_security_sign_in(sign_in_data.model_dump())


@router.put("/security-sign-ins/{sign_in_id}", response_model=SecuritySignInResponse)
def update_security_sign_in(
    sign_in_id: int,
    sign_in_data: SecuritySignInUpdate,
    storage: Storage = Depends(get_storage),
    user: User = Depends(require_security)
):
    changes = _changes(sign_in_data, clearable=("notes",))
    return _found(storage.update_security_sign_in(sign_in_id, changes), "Security sign-in not found")


@router.post("/security-sign-ins/{sign_in_id}/sign-out", response_model=SecuritySignInResponse, responses={
    400: {"model": ErrorResponse, "description": "Guard already signed out"}
})
def sign_out_security(
    sign_in_id: int,
    sign_out: Optional[SignOutRequest] = None,
    storage: Storage = Depends(get_storage),
    user: User = Depends(require_security)
):
    """
    Sign a guard out. time_out defaults to now.
    Refused with 400 if the guard is already off duty.
    """
    time_out: Optional[datetime] = sign_out.time_out if sign_out else None
    return Workflow(storage).sign_out(sign_in_id, time_out)


# CCTV camera endpoints
@router.get("/cctv/cameras", response_model=List[CctvCameraResponse])
def list_cctv_cameras(
    venue_id: Optional[int] = None,
    storage: Storage = Depends(get_storage),
    user: User = Depends(require_security)
):
    if venue_id is not None:
        return storage.get_cctv_cameras_by_venue(venue_id)
    return storage.get_cctv_cameras()


@router.get("/cctv/cameras/{camera_id}", response_model=CctvCameraResponse)
def get_cctv_camera(camera_id: int, storage: Storage = Depends(get_storage), user: User = Depends(require_security)):
    return _found(storage.get_cctv_camera(camera_id), "Camera not found")


@router.post("/cctv/cameras", response_model=CctvCameraResponse, status_code=status.HTTP_201_CREATED)
def create_cctv_camera(
    camera_data: CctvCameraCreate,
    storage: Storage = Depends(get_storage),
    user: User = Depends(require_manager)
):
    return storage.create_cctv_camera(camera_data.model_dump())


@router.put("/cctv/cameras/{camera_id}", response_model=CctvCameraResponse)
def update_cctv_camera(
    camera_id: int,
    camera_data: CctvCameraUpdate,
    storage: Storage = Depends(get_storage),
    user: User = Depends(require_manager)
):
    changes = _changes(camera_data, clearable=("notes",))
    return _found(storage.update_cctv_camera(camera_id, changes), "Camera not found")


@router.delete("/cctv/cameras/{camera_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_cctv_camera(camera_id: int, storage: Storage = Depends(get_storage), user: User = Depends(require_manager)):
    return _deleted(storage.delete_cctv_camera(camera_id), "Camera not found")


# CCTV check endpoints
@router.get("/cctv/checks", response_model=List[CctvCheckResponse])
def list_cctv_checks(
    venue_id: Optional[int] = None,
    camera_id: Optional[int] = None,
    limit: Optional[int] = Query(None, ge=1, le=500),
    storage: Storage = Depends(get_storage),
    user: User = Depends(require_security)
):
    """
    List checks filtered by venue and camera. With limit, returns the most
    recent matching checks newest-first; otherwise insertion order.
    """
    if venue_id is not None and limit is not None and camera_id is None:
        return storage.get_recent_cctv_checks(venue_id, limit)

    if venue_id is not None:
        checks = storage.get_cctv_checks_by_venue(venue_id)
    elif camera_id is not None:
        checks = storage.get_cctv_checks_by_camera(camera_id)
    else:
        checks = storage.get_cctv_checks()

    if camera_id is not None:
        checks = [check for check in checks if check.camera_id == camera_id]
    if limit is not None:
        checks = sorted(checks, key=lambda check: check.check_time, reverse=True)[:limit]
    return checks


@router.get("/cctv/checks/{check_id}", response_model=CctvCheckResponse)
def get_cctv_check(check_id: int, storage: Storage = Depends(get_storage), user: User = Depends(require_security)):
    return _found(storage.get_cctv_check(check_id), "Check record not found")


@router.post("/cctv/checks", response_model=CctvCheckResponse, status_code=status.HTTP_201_CREATED)
def create_cctv_check(
    check_data: CctvCheckCreate,
    storage: Storage = Depends(get_storage),
    user: User = Depends(require_security)
):
    """Record a camera check. The checker is the caller; the check starts unresolved."""
    data = check_data.model_dump()
    data["checked_by"] = user.id
    return storage.create_cctv_check(data)


@router.post("/cctv/checks/{check_id}/resolve", response_model=CctvCheckResponse, responses={
    400: {"model": ErrorResponse, "description": "Missing action or issue already resolved"}
})
def resolve_cctv_issue(
    check_id: int,
    resolution: CctvCheckResolve,
    storage: Storage = Depends(get_storage),
    user: User = Depends(require_security)
):
    return Workflow(storage).resolve_check(check_id, resolution.action_taken)


# Shift schedule endpoints
@router.get("/shift-schedules", response_model=List[ShiftScheduleResponse])
def list_shift_schedules(
    venue_id: Optional[int] = None,
    storage: Storage = Depends(get_storage),
    user: User = Depends(require_staff)
):
    if venue_id is not None:
        return storage.get_shift_schedules_by_venue(venue_id)
    return storage.get_shift_schedules()


@router.get("/shift-schedules/{schedule_id}", response_model=ShiftScheduleResponse)
def get_shift_schedule(
    schedule_id: int,
    storage: Storage = Depends(get_storage),
    user: User = Depends(require_staff)
):
    return _found(storage.get_shift_schedule(schedule_id), "Shift schedule not found")


@router.post("/shift-schedules", response_model=ShiftScheduleResponse, status_code=status.HTTP_201_CREATED)
def create_shift_schedule(
    schedule_data: ShiftScheduleCreate,
    storage: Storage = Depends(get_storage),
    user: User = Depends(require_manager)
):
    return storage.create_shift_schedule(schedule_data.model_dump())


@router.put("/shift-schedules/{schedule_id}", response_model=ShiftScheduleResponse)
def update_shift_schedule(
    schedule_id: int,
    schedule_data: ShiftScheduleUpdate,
    storage: Storage = Depends(get_storage),
    user: User = Depends(require_manager)
):
    return _found(storage.update_shift_schedule(schedule_id, _changes(schedule_data)), "Shift schedule not found")


@router.delete("/shift-schedules/{schedule_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_shift_schedule(
    schedule_id: int,
    storage: Storage = Depends(get_storage),
    user: User = Depends(require_manager)
):
    return _deleted(storage.delete_shift_schedule(schedule_id), "Shift schedule not found")


# Dashboard endpoints
@router.get("/dashboard/stats", response_model=DashboardStats)
def dashboard_stats(storage: Storage = Depends(get_storage), user: User = Depends(require_staff)):
    """Counts and recent activity for the dashboard landing page."""
    return build_dashboard_stats(storage)


@router.get("/permissions", response_model=PermissionsResponse)
def permissions(user: User = Depends(require_staff)):
    """The server's role table, so the dashboard hides what it would refuse."""
    return {
        "roles": sorted(ROLE_RANK, key=ROLE_RANK.get),
        "pages": {page: required.value for page, required in PAGE_PERMISSIONS.items()},
        "role": UserRole(user.role),
        "accessible_pages": accessible_pages(user.role),
    }
