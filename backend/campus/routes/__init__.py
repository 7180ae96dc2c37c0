"""HTTP routers, one module per resource."""

from . import announcements, auth, departments, notifications, students

__all__ = ["announcements", "auth", "departments", "notifications", "students"]
