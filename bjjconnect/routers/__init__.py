# bjjconnect/routers/__init__.py
from . import health
from . import auth
from . import sessions
from . import users

__all__ = ["health", "auth", "sessions", "users"]
