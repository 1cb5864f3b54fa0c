"""
School Management API
Registers students and their guardians, issues session tokens on login,
and manages students and schedules over PostgreSQL.
"""

__version__ = "1.0.0"
