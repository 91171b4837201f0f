# exceptions.py
"""
Typed exceptions for the RentMate domain.

Every error carries a machine-readable ``code`` and the HTTP status the API
layer answers with. Callers catch by type, never by message text.

     RentmateError
     +-- ValidationError            (422)
     +-- StateConflictError         (409)
     |   +-- LeaseExpiredError
     |   +-- AlreadyRespondedError
     |   +-- InvalidTransitionError
     |   +-- DuplicateResourceError
     +-- PaymentError               (402)
     |   +-- InsufficientPaymentError
     +-- AuthenticationError        (401)
     +-- AuthorizationError         (403)
     +-- NotFoundError              (404)
     +-- TransportError             (push channel / network, not an HTTP answer)
"""
from decimal import Decimal
from typing import Optional


class RentmateError(Exception):
     code = "error"
     status_code = 400

     def __init__(self, message: str, code: Optional[str] = None):
          super().__init__(message)
          self.message = message
          if code is not None:
               self.code = code


class ValidationError(RentmateError):
     code = "validation_error"
     status_code = 422


class StateConflictError(RentmateError):
     code = "state_conflict"
     status_code = 409


class LeaseExpiredError(StateConflictError):
     code = "expired"

     def __init__(self, lease_id: int):
          super().__init__(f"Lease {lease_id} has expired: the acceptance deadline has passed")
          self.lease_id = lease_id


class AlreadyRespondedError(StateConflictError):
     code = "already_responded"

     def __init__(self, lease_id: int, status: str):
          super().__init__(f"Lease {lease_id} has already been responded to (status: {status})")
          self.lease_id = lease_id
          self.status = status


class InvalidTransitionError(StateConflictError):
     code = "invalid_transition"


class DuplicateResourceError(StateConflictError):
     code = "duplicate"


class PaymentError(RentmateError):
     code = "payment_error"
     status_code = 402


class InsufficientPaymentError(PaymentError):
     code = "insufficient_payment"

     def __init__(self, amount: Decimal, total_due: Decimal):
          super().__init__(
               f"Payment of {amount} is less than the total due of {total_due}; "
               "partial payments are not accepted"
          )
          self.amount = amount
          self.total_due = total_due


class AuthenticationError(RentmateError):
     code = "unauthenticated"
     status_code = 401


class AuthorizationError(RentmateError):
     code = "forbidden"
     status_code = 403


class NotFoundError(RentmateError):
     code = "not_found"
     status_code = 404

     def __init__(self, resource: str, resource_id):
          super().__init__(f"{resource} with ID {resource_id} not found")
          self.resource = resource
          self.resource_id = resource_id


class TransportError(RentmateError):
     """Push channel or network failure."""
     code = "transport_error"
     status_code = 503
