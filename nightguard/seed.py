"""
Load demo data: a manager and a guard account plus one fully set-up venue.

Run with `python -m nightguard.seed`. Safe to run twice: existing demo
users and the demo venue are left alone.
"""
import logging
from datetime import datetime, timedelta

from nightguard.logging_config import configure_logging
from nightguard.models.enums import CameraStatus, CheckStatus, ShiftType, UserRole, VenueStatus
from nightguard.services.auth import ensure_default_admin
from nightguard.services.passwords import hash_password
from nightguard.services.workflow import Workflow
from nightguard.storage.base import Storage
from nightguard.storage.factory import provider

logger = logging.getLogger(__name__)

DEMO_VENUE = "iDU Nightclub"

DEMO_USERS = [
    ("manager", "manager123", "Venue Manager", "manager@idunightclub.com", UserRole.MANAGER),
    ("security", "security123", "Security Guard", "security@idunightclub.com", UserRole.SECURITY),
]

DEMO_CAMERAS = [
    ("Front Entrance Cam 1", "PTZ", "Main Entrance", "Covers the main entrance and queue area"),
    ("Main Bar Cam 2", "Fixed", "Behind Main Bar", "Monitors the bar service area"),
    ("Dance Floor Cam 3", "PTZ", "Above Dance Floor", "Full view of dance floor and DJ booth"),
    ("VIP Area Cam 4", "Fixed", "VIP Section", "Monitors exclusive VIP lounge area"),
]

DEMO_SHIFTS = [
    ("Evening Shift", "18:00", "02:00"),
    ("Night Shift", "22:00", "06:00"),
    ("Weekend Special", "20:00", "08:00"),
]


def seed_users(storage: Storage) -> None:
    ensure_default_admin(storage)
    for username, password, name, email, role in DEMO_USERS:
        if storage.get_user_by_username(username) is not None:
            logger.info("User %r already exists, skipping", username)
            continue
        storage.create_user({
            "username": username,
            "password": hash_password(password),
            "name": name,
            "email": email,
            "role": role,
        })
        logger.info("Created %s user %r", role.value, username)


def seed_venue(storage: Storage, now: datetime) -> None:
    if any(venue.name == DEMO_VENUE for venue in storage.get_venues()):
        logger.info("Venue %r already exists, skipping", DEMO_VENUE)
        return

    venue = storage.create_venue({
        "name": DEMO_VENUE,
        "address": "123 Nightlife Blvd, Downtown",
        "contact": "+1 (555) 123-4567",
        "status": VenueStatus.OPEN,
    })

    cameras = [
        storage.create_cctv_camera({
            "name": name,
            "type": camera_type,
            "location": location,
            "notes": notes,
            "venue_id": venue.id,
            "status": CameraStatus.ACTIVE,
        })
        for name, camera_type, location, notes in DEMO_CAMERAS
    ]

    for name, start_time, end_time in DEMO_SHIFTS:
        storage.create_shift_schedule({
            "venue_id": venue.id,
            "name": name,
            "start_time": start_time,
            "end_time": end_time,
            "active": True,
        })

    storage.create_incident({
        "date": now - timedelta(days=3),
        "type": "Disturbance",
        "severity": "medium",
        "venue_id": venue.id,
        "location": "Main Bar",
        "description": "Verbal altercation between patrons over a spilled drink",
        "reported_by": "Mike Johnson",
        "position": "Security",
        "involved_parties": "Two male patrons in their 20s",
        "actions_taken": "Parties separated and one escorted outside to cool off",
        "witnesses": "Bartender and three other patrons",
    })
    storage.create_incident({
        "date": now - timedelta(days=1),
        "type": "Theft",
        "severity": "medium",
        "venue_id": venue.id,
        "location": "Coat Check",
        "description": "Patron reported missing phone from coat pocket",
        "reported_by": "Chris Taylor",
        "position": "Security Lead",
        "involved_parties": "Male patron claiming theft",
        "actions_taken": "Report taken, CCTV footage reviewed, police contacted",
        "witnesses": "Coat check attendant",
    })

    workflow = Workflow(storage)

    # Yesterday's shift, already finished
    finished = storage.create_security_sign_in({
        "date": now - timedelta(days=1),
        "venue_id": venue.id,
        "position": "Door Security",
        "security_name": "John Smith",
        "badge_number": "SG12345",
        "time_in": now - timedelta(hours=26),
        "notes": "Routine shift with no incidents",
    })
    workflow.sign_out(finished.id, now - timedelta(hours=18))

    storage.create_security_sign_in({
        "date": now,
        "venue_id": venue.id,
        "position": "Floor Security",
        "security_name": "Alex Rodriguez",
        "badge_number": "SG67890",
        "time_in": now - timedelta(hours=4),
        "notes": "Covering main floor and VIP area",
    })

    checker = storage.get_user_by_username("security") or storage.get_users()[0]
    storage.create_cctv_check({
        "camera_id": cameras[0].id,
        "checked_by": checker.id,
        "venue_id": venue.id,
        "check_time": now - timedelta(hours=12),
        "shift_type": ShiftType.START,
        "status": CheckStatus.WORKING,
    })
    dirty_lens = storage.create_cctv_check({
        "camera_id": cameras[1].id,
        "checked_by": checker.id,
        "venue_id": venue.id,
        "check_time": now - timedelta(hours=8),
        "shift_type": ShiftType.START,
        "status": CheckStatus.ISSUE,
        "issue_description": "Poor image quality - camera lens appears dirty",
    })
    workflow.resolve_check(dirty_lens.id, "Lens cleaned and focus adjusted")
    storage.create_cctv_check({
        "camera_id": cameras[2].id,
        "checked_by": checker.id,
        "venue_id": venue.id,
        "check_time": now - timedelta(hours=2),
        "shift_type": ShiftType.END,
        "status": CheckStatus.ISSUE,
        "issue_description": "Camera feed intermittently dropping",
    })

    logger.info("Created demo venue %r (id %s)", DEMO_VENUE, venue.id)


def seed(storage: Storage) -> None:
    seed_users(storage)
    seed_venue(storage, datetime.utcnow())


def main() -> None:
    configure_logging()
    if provider.backend == "memory":
        # MemStorage lives and dies with this process
        logger.error("Refusing to seed the memory backend; set NIGHTGUARD_STORAGE=database")
        raise SystemExit(1)
    provider.startup()

    storages = provider()
    try:
        seed(next(storages))
    finally:
        storages.close()


if __name__ == "__main__":
    main()
