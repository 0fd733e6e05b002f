"""Aggregated counts and lists for the dashboard."""
from typing import Any, Dict

from nightguard.models.enums import IncidentStatus, VenueStatus
from nightguard.storage.base import Storage

RECENT_INCIDENT_LIMIT = 10


def build_dashboard_stats(storage: Storage) -> Dict[str, Any]:
    """
    Simple, deterministic aggregation over current rows.

    recent_incidents is newest-first by incident date; active_sign_ins is
    newest-first by time_in. Everything else is a plain count.
    """
    venues = storage.get_venues()
    incidents = storage.get_incidents()
    active_sign_ins = storage.get_active_security_sign_ins()

    recent_incidents = sorted(incidents, key=lambda incident: incident.date, reverse=True)
    active_sign_ins.sort(key=lambda sign_in: sign_in.time_in, reverse=True)

    return {
        "total_incidents": len(incidents),
        "pending_incidents": sum(1 for i in incidents if i.status == IncidentStatus.PENDING),
        "total_sign_ins": len(storage.get_security_sign_ins()),
        "active_venues": sum(1 for v in venues if v.status == VenueStatus.OPEN),
        "total_venues": len(venues),
        "total_cameras": len(storage.get_cctv_cameras()),
        "recent_incidents": recent_incidents[:RECENT_INCIDENT_LIMIT],
        "active_sign_ins": active_sign_ins,
        "venues": venues,
    }
