"""RentMate backend: leases, payments, notifications and realtime chat."""

__version__ = "0.1.0"
