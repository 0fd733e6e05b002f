"""
Errors raised by the workflow and storage layers.

Each carries the HTTP status the API answers with, so route handlers never
translate them one by one; see nightguard.api.errors.
"""
from typing import Any, Dict, List, Optional


class RegisterError(Exception):
    """Base class for expected, caller-visible failures."""
    status_code = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class ValidationError(RegisterError):
    """Malformed or missing input. `errors` holds field-level details."""
    status_code = 400

    def __init__(self, message: str, errors: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message)
        self.errors = errors or []


class NotFound(RegisterError):
    """The referenced entity does not exist."""
    status_code = 404


class Forbidden(RegisterError):
    """The caller's role is below what the action requires."""
    status_code = 403


class NotAuthenticated(Forbidden):
    """No valid session."""
    status_code = 401


class InvalidState(RegisterError):
    """
    The entity exists but its current state does not allow the action,
    e.g. approving an approved incident or signing out twice.
    """
    status_code = 400
