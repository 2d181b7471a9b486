# Overview: Session and role decorators for API routes.

from functools import wraps
from flask import jsonify, g

from .models import UserRole
from .services.state_service import current_state


def _is_authenticated() -> bool:
    return getattr(g, "current_user", None) is not None


def require_auth(f):
    """
    Require an open console session.

    Sets the following Flask g attributes:
    - g.state: The DomainState for this request
    - g.current_user: The session User

    Returns 401 when nobody is logged in.

    The session is the single console-wide `v_user` snapshot, not a per-client
    cookie: every caller acts as whoever logged in last, and the role gate
    below checks that user.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        state = current_state()
        if state.current_user is None:
            return jsonify({"error": "Authentication required"}), 401

        g.state = state
        g.current_user = state.current_user
        return f(*args, **kwargs)

    return decorated_function


def require_role(*roles: UserRole):
    """
    Require the session user to hold one of `roles`.

    This is the only authorization check in the system: the services trust
    whoever calls them.
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            # Ensure @require_auth was called first
            if not _is_authenticated():
                return jsonify({"error": "Authentication required"}), 401

            if g.current_user.role not in roles:
                return jsonify({
                    "error": "Permission denied",
                    "required_roles": [r.value for r in roles],
                    "message": f"Requires any of: {', '.join(r.value for r in roles)}",
                }), 403

            return f(*args, **kwargs)

        return decorated_function
    return decorator
