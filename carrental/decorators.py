from functools import wraps

from flask import abort
from flask_login import current_user

from carrental.errors import UnauthorizedError


def role_required(*roles):
    def wrapper(func):
        @wraps(func)
        def inner(*args, **kwargs):
            if not current_user.is_authenticated:
                abort(401)
            if current_user.role not in roles:
                abort(403)
            return func(*args, **kwargs)

        return inner

    return wrapper


def require_role(actor, roles):
    """Capability check run at the top of privileged service operations."""
    if actor is None or getattr(actor, "role", None) not in roles:
        raise UnauthorizedError("You are not allowed to perform this action.")
    return actor
