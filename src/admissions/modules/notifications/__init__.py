"""
Notifications module - recent activity feed and important dates.
"""

from .router import router

__all__ = ["router"]
