"""
Student records package.

Validation rules, the in-memory record store and the HTTP router that
exposes them. The store is constructed by the application factory and
reached from request handlers through ``app.state``.
"""

from .router import router  # noqa: F401
from .store import StudentStore  # noqa: F401
