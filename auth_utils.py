from functools import wraps
from flask import current_app, g

from errors import UnknownUser


def user_required(fn):
    """Resolve the ``user_id`` path argument into ``g.user``; unknown ids get a 401."""
    @wraps(fn)
    def wrapper(*args, **kwargs):
        user = current_app.storage.users.get_by_id(kwargs['user_id'])
        if user is None:
            raise UnknownUser()
        g.user = user
        return fn(*args, **kwargs)
    return wrapper
