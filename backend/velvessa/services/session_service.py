# Overview: Service-layer operations for login, registration and team access.

"""
Session / Access Workflow

WHY: Every audited action is attributed to the session user, so the session
user is the gate for the whole console.

SECURITY NOTES:
- Credentials are compared as plaintext, exact and case-sensitive.
- Only Approved users can log in; registration always lands in Pending.
- Role checks (e.g. only Admin approves users) are NOT enforced here. The
  calling layer (routes/decorators) owns authorization; these functions trust
  their caller.
"""

from __future__ import annotations

import dataclasses

from ..models import User, UserRole, UserStatus, new_id
from ..validation import (
    OPTIONAL_TEXT,
    TEXT,
    ModelValidationPolicy,
    validate_payload,
)
from .audit_service import add_log
from .state_service import DomainState


DEFAULT_IDENTIFIER = "admin"
DEFAULT_CREDENTIAL = "admin"
DEFAULT_REGISTRATION_PASSWORD = "password"


class AuthError(Exception):
    """Base class for session/access rejections."""


class InvalidCredentials(AuthError):
    def __init__(self):
        super().__init__("Invalid credentials")


class AccessDenied(AuthError):
    """Credentials matched but the account is not Approved."""

    def __init__(self, status: UserStatus):
        super().__init__(f"Access Denied: Your account is {status.value}. Contact Admin.")
        self.status = status


class DuplicateIdentifier(AuthError):
    def __init__(self, identifier: str):
        super().__init__("Email already registered")
        self.identifier = identifier


class UnknownUser(AuthError):
    def __init__(self, user_id: str):
        super().__init__(f"User {user_id} not found")
        self.user_id = user_id


REGISTRATION_POLICY = ModelValidationPolicy(
    field_types={
        "name": OPTIONAL_TEXT,
        "email": TEXT,
        "password": OPTIONAL_TEXT,
        "phone": OPTIONAL_TEXT,
        "role": UserRole,
        # Accepted but ignored: new accounts are always Pending.
        "status": OPTIONAL_TEXT,
    },
    required_on_create=frozenset({"email"}),
)

PROFILE_POLICY = ModelValidationPolicy(
    field_types={
        "name": TEXT,
        "email": TEXT,
        "phone": OPTIONAL_TEXT,
        "profile_image": OPTIONAL_TEXT,
        "password": TEXT,
    },
)


def find_user(state: DomainState, user_id: str) -> User | None:
    return next((u for u in state.users if u.id == user_id), None)


def login(state: DomainState, identifier: str | None, credential: str | None) -> User:
    """
    Authenticate against the user directory and open the session.

    Empty identifier/credential fall back to the default admin pair.

    Raises:
        InvalidCredentials: no user matches identifier + credential
        AccessDenied: a user matches but is Pending or Rejected
    """
    identifier = identifier or DEFAULT_IDENTIFIER
    credential = credential or DEFAULT_CREDENTIAL

    user = next(
        (u for u in state.users if u.email == identifier and u.password == credential),
        None,
    )
    if user is None:
        raise InvalidCredentials()
    if not user.is_approved:
        raise AccessDenied(user.status)

    state.replace("current_user", user)
    add_log(state, "Login", "Logged into the system")
    return user


def logout(state: DomainState) -> None:
    state.replace("current_user", None)


def register_user(state: DomainState, data: dict) -> User:
    """
    Open self-registration. The new account is Pending regardless of input
    and the caller is not logged in.
    """
    fields = validate_payload(payload=data, policy=REGISTRATION_POLICY, partial=False)
    email = fields["email"]

    if any(u.email == email for u in state.users):
        raise DuplicateIdentifier(email)

    user = User(
        id=new_id("u"),
        name=fields.get("name") or "",
        email=email,
        password=fields.get("password") or DEFAULT_REGISTRATION_PASSWORD,
        role=fields.get("role") or UserRole.SALES,
        status=UserStatus.PENDING,
        phone=fields.get("phone"),
    )
    state.replace("users", lambda prev: [*prev, user])
    return user


def update_user_status(state: DomainState, user_id: str, status: UserStatus) -> User:
    """
    Overwrite a user's approval status.

    No self-protection: an admin may reset themselves or another active user
    to Pending, which blocks that user's next login.
    """
    target = find_user(state, user_id)
    if target is None:
        raise UnknownUser(user_id)

    updated = dataclasses.replace(target, status=status)
    state.replace("users", lambda prev: [updated if u.id == user_id else u for u in prev])

    current = state.current_user
    if current is not None and current.id == user_id:
        state.replace("current_user", updated)

    add_log(state, "User Approval", f"User {user_id} status updated to {status.value}")
    return updated


def update_profile(state: DomainState, data: dict) -> User | None:
    """Merge profile fields into the session user. No-op without a session."""
    current = state.current_user
    if current is None:
        return None

    fields = validate_payload(payload=data, policy=PROFILE_POLICY, partial=True)
    updated = dataclasses.replace(current, **fields)
    with state.transaction():
        state.replace("current_user", updated)
        state.replace("users", lambda prev: [updated if u.id == current.id else u for u in prev])
        add_log(state, "Update Profile", "Updated personal profile details")
    return updated
