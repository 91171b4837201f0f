# services/__init__.py
from .notification_service import NotificationService, resolve_notification_link
from .lease_service import LeaseService, DeadlineStatus, hours_until
from .payment_service import PaymentService, PaymentSummary, AcceptancePaymentResult
from .rent_schedule_service import RentScheduleService
from .application_service import ApplicationService
from .conversation_service import ConversationService
from .contact_flow import ContactLandlordFlow, ContactStep
from .property_service import PropertyService
from .maintenance_service import MaintenanceService, MaintenanceSummary, PropertyMaintenanceSummary
from . import ledger_service

__all__ = [
     "NotificationService",
     "resolve_notification_link",
     "LeaseService",
     "DeadlineStatus",
     "hours_until",
     "PaymentService",
     "PaymentSummary",
     "AcceptancePaymentResult",
     "RentScheduleService",
     "ApplicationService",
     "ConversationService",
     "ContactLandlordFlow",
     "ContactStep",
     "PropertyService",
     "MaintenanceService",
     "MaintenanceSummary",
     "PropertyMaintenanceSummary",
     "ledger_service",
]
