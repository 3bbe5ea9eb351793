"""
Adapters layer - Data access for reservations and attendance.
"""

from .json_store import JsonStore

__all__ = ["JsonStore"]
