# routers/__init__.py
from . import applications, auth, conversations, leases, maintenance, notifications, payments, properties, realtime, rent_schedule

__all__ = [
     "applications",
     "auth",
     "conversations",
     "leases",
     "maintenance",
     "notifications",
     "payments",
     "properties",
     "realtime",
     "rent_schedule",
]
