# schemas/__init__.py
from .lease import (
     LeaseCreate,
     LeaseTermsUpdate,
     LeaseDocumentCreate,
     LeaseRejectRequest,
     LeaseTerminateRequest,
     LeaseResponse,
     DeadlineStatusResponse,
)
from .payment import (
     AcceptancePaymentRequest,
     AcceptancePaymentResponse,
     PaymentResponse,
     PaymentSummaryResponse,
     LogPaymentRequest,
     LedgerVerificationResponse,
     RentInstallmentResponse,
     InstallmentPayRequest,
)
from .notification import NotificationResponse
from .conversation import MessageResponse

__all__ = [
     "LeaseCreate",
     "LeaseTermsUpdate",
     "LeaseDocumentCreate",
     "LeaseRejectRequest",
     "LeaseTerminateRequest",
     "LeaseResponse",
     "DeadlineStatusResponse",
     "AcceptancePaymentRequest",
     "AcceptancePaymentResponse",
     "PaymentResponse",
     "PaymentSummaryResponse",
     "LogPaymentRequest",
     "LedgerVerificationResponse",
     "RentInstallmentResponse",
     "InstallmentPayRequest",
     "NotificationResponse",
     "MessageResponse",
]
