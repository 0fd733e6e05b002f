"""
Workflow that enforces the register's state-transition invariants.

All composite operations MUST go through here: incident review, guard
sign-out, CCTV issue resolution, credential documents and account removal.
"""
import logging
from datetime import datetime
from typing import Optional

from nightguard.models.domain import CctvCheck, Incident, SecuritySignIn, User
from nightguard.models.enums import DocumentType, IncidentStatus, SignInStatus, UserRole
from nightguard.services.errors import Forbidden, InvalidState, NotFound, RegisterError, ValidationError
from nightguard.services.permissions import REQUIRED_DOCUMENT_TYPE, has_permission
from nightguard.storage.base import Storage

logger = logging.getLogger(__name__)


class Workflow:
    """Enforces state transition invariants on top of a Storage backend."""

    def __init__(self, storage: Storage):
        self.storage = storage

    def approve_incident(
        self,
        incident_id: int,
        reviewer: User,
        notes: Optional[str] = None
    ) -> Incident:
        """
        Approve a pending incident.

        Review invariants:
        - Only a manager or admin may review
        - Only pending incidents can be reviewed, and only once
        - status, reviewed_by, review_date and review_notes change together
        """
        self._ensure_reviewer(reviewer, "approve")
        incident = self._pending_incident(incident_id)

        approved = self.storage.approve_incident(incident.id, reviewer.id, notes)
        if approved is None:
            # Another reviewer got there between our read and our write
            raise self._already_reviewed(self.storage.get_incident(incident_id))

        logger.info("Incident %s approved by user %s", incident_id, reviewer.id)
        return approved

    def reject_incident(
        self,
        incident_id: int,
        reviewer: User,
        notes: Optional[str]
    ) -> Incident:
        """
        Reject a pending incident. Same invariants as approval, and the
        reviewer must say why: rejection notes are mandatory.
        """
        self._ensure_reviewer(reviewer, "reject")
        if not notes or not notes.strip():
            raise ValidationError(
                "Rejection notes are required",
                errors=[{"field": "notes", "message": "Rejection notes are required"}]
            )
        incident = self._pending_incident(incident_id)

        rejected = self.storage.reject_incident(incident.id, reviewer.id, notes)
        if rejected is None:
            raise self._already_reviewed(self.storage.get_incident(incident_id))

        logger.info("Incident %s rejected by user %s", incident_id, reviewer.id)
        return rejected

    def sign_out(self, sign_in_id: int, time_out: Optional[datetime] = None) -> SecuritySignIn:
        """
        Sign a guard out of their shift.

        Invariants:
        - time_out and off-duty status are set together, exactly once
        - time_out defaults to now
        - A new shift is a new sign-in record, never a reopened one
        """
        sign_in = self.storage.get_security_sign_in(sign_in_id)
        if sign_in is None:
            raise NotFound("Security sign-in not found")
        if sign_in.status != SignInStatus.ON_DUTY:
            raise InvalidState("Security staff is already signed out")

        signed_out = self.storage.sign_out_security(sign_in_id, time_out or datetime.utcnow())
        if signed_out is None:
            raise InvalidState("Security staff is already signed out")

        logger.info("Sign-in %s (%s) signed out", sign_in_id, signed_out.badge_number)
        return signed_out

    def resolve_check(self, check_id: int, action_taken: Optional[str]) -> CctvCheck:
        """
        Resolve the issue recorded by a CCTV check.

        Invariants:
        - action_taken is required and is written together with resolved=True
        - A check resolves once
        """
        check = self.storage.get_cctv_check(check_id)
        if check is None:
            raise NotFound("Check record not found")
        if check.resolved:
            raise InvalidState("Issue already resolved")
        if not action_taken or not action_taken.strip():
            raise ValidationError(
                "Action taken is required",
                errors=[{"field": "action_taken", "message": "Action taken is required"}]
            )

        resolved = self.storage.resolve_cctv_issue(check_id, action_taken)
        if resolved is None:
            raise InvalidState("Issue already resolved")

        logger.info("CCTV check %s resolved", check_id)
        return resolved

    def check_document_type(self, user: User, document_type: str) -> DocumentType:
        """
        Validate an upload's document type before anything is stored.

        Security staff must upload a security licence and venue staff an RSA
        certificate. Managers and admins may upload either.
        """
        try:
            doc_type = DocumentType(document_type)
        except ValueError:
            raise ValidationError(
                "Invalid document type. Must be 'security_license' or 'rsa_certificate'",
                errors=[{"field": "document_type", "message": "Unknown document type"}]
            )

        required = REQUIRED_DOCUMENT_TYPE.get(UserRole(user.role))
        if required is not None and doc_type.value != required:
            role = UserRole(user.role).value
            raise ValidationError(
                f"Invalid document type for {role} role. Security staff must upload "
                f"'security_license', venue staff must upload 'rsa_certificate'",
                errors=[{"field": "document_type", "message": f"{role} users must upload {required}"}]
            )
        return doc_type

    def attach_document(self, user: User, document_type: str, document_path: str) -> User:
        """Record an uploaded document on its owner. Every upload awaits admin verification."""
        doc_type = self.check_document_type(user, document_type)
        updated = self.storage.update_user(user.id, {
            "document_path": document_path,
            "document_type": doc_type,
            "document_verified": False,
        })
        if updated is None:
            raise NotFound("User not found")

        logger.info("User %s uploaded %s", user.id, doc_type.value)
        return updated

    def verify_document(self, user_id: int, verified: bool) -> User:
        """Set document_verified independently of upload."""
        if self.storage.get_user(user_id) is None:
            raise NotFound("User not found")
        updated = self.storage.update_user(user_id, {"document_verified": verified})
        logger.info("Document of user %s marked verified=%s", user_id, verified)
        return updated

    def change_role(self, user_id: int, role: UserRole) -> User:
        updated = self.storage.update_user(user_id, {"role": UserRole(role)})
        if updated is None:
            raise NotFound("User not found")
        logger.info("User %s role set to %s", user_id, UserRole(role).value)
        return updated

    def delete_user(self, actor: User, user_id: int) -> None:
        """Remove an account and its sessions. Nobody can delete themselves."""
        if actor.id == user_id:
            raise ValidationError("Cannot delete your own account")
        if not self.storage.delete_user(user_id):
            raise NotFound("User not found")
        self.storage.delete_user_sessions(user_id)
        logger.info("User %s deleted by user %s", user_id, actor.id)

    def _ensure_reviewer(self, reviewer: User, action: str) -> None:
        if not has_permission(reviewer.role, UserRole.MANAGER):
            logger.warning("User %s (%s) refused: cannot %s incidents", reviewer.id, reviewer.role, action)
            raise Forbidden(f"Not authorized. Only admin or manager can {action} incidents.")

    def _pending_incident(self, incident_id: int) -> Incident:
        incident = self.storage.get_incident(incident_id)
        if incident is None:
            raise NotFound("Incident not found")
        if incident.status != IncidentStatus.PENDING:
            raise self._already_reviewed(incident)
        return incident

    @staticmethod
    def _already_reviewed(incident: Optional[Incident]) -> RegisterError:
        if incident is None:
            return NotFound("Incident not found")
        return InvalidState(f"Incident is already {IncidentStatus(incident.status).value}")
