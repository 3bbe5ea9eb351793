"""
roomtime - time-interval reasoning for room booking and attendance.
"""

__version__ = "0.1.0"
