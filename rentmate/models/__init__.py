# models/__init__.py
from .base import Base
from .user import User, UserRole
from .property import Property
from .lease_application import LeaseApplication, ApplicationStatus
from .lease import LeaseAgreement, LeaseDocument, LeaseStatus, PaymentStatus, DocumentKind
from .payment import Payment, PaymentType, PaymentRecordStatus
from .payment_ledger import PaymentLedger
from .rent_installment import RentInstallment, InstallmentStatus
from .notification import Notification, NotificationType, RelatedEntityType
from .conversation import Conversation, Message, ConversationStatus, SenderRole
from .maintenance import (
     MaintenanceRequest,
     MaintenanceComment,
     MaintenanceEvent,
     MaintenanceStatus,
     MaintenancePriority,
     ActorType,
)

__all__ = [
     "Base",
     "User",
     "UserRole",
     "Property",
     "LeaseApplication",
     "ApplicationStatus",
     "LeaseAgreement",
     "LeaseDocument",
     "LeaseStatus",
     "PaymentStatus",
     "DocumentKind",
     "Payment",
     "PaymentType",
     "PaymentRecordStatus",
     "PaymentLedger",
     "RentInstallment",
     "InstallmentStatus",
     "Notification",
     "NotificationType",
     "RelatedEntityType",
     "Conversation",
     "Message",
     "ConversationStatus",
     "SenderRole",
     "MaintenanceRequest",
     "MaintenanceComment",
     "MaintenanceEvent",
     "MaintenanceStatus",
     "MaintenancePriority",
     "ActorType",
]
