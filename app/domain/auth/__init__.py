"""Auth domain - OAuth sign-in, persistence adapter and sessions"""

from .router import router

__all__ = ["router"]
