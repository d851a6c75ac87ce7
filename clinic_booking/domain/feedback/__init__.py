"""Feedback domain - patient ratings and the admin rating summary"""

from .router import router

__all__ = ["router"]
