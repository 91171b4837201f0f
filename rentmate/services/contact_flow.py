# services/contact_flow.py
"""
"Contact landlord" dialog as an explicit state machine.

     checking -> existing_conversation
              -> compose -> sending -> sent
                                    -> failed -> compose (retry)
"""
import enum
import logging
from typing import Optional

from rentmate.exceptions import InvalidTransitionError, RentmateError, ValidationError
from .conversation_service import ConversationService

logger = logging.getLogger(__name__)


class ContactStep(str, enum.Enum):
     CHECKING = "checking"
     EXISTING_CONVERSATION = "existing_conversation"
     COMPOSE = "compose"
     SENDING = "sending"
     SENT = "sent"
     FAILED = "failed"


class ContactLandlordFlow:

     def __init__(self, conversations: ConversationService, tenant_id: int, property_id: int, property_title: str):
          self.conversations = conversations
          self.tenant_id = tenant_id
          self.property_id = property_id
          self.subject = f"Inquiry about {property_title}"
          self.step = ContactStep.CHECKING
          self.conversation_id: Optional[int] = None
          self.error: Optional[str] = None

     def _require(self, *steps: ContactStep) -> None:
          if self.step not in steps:
               raise InvalidTransitionError(f"Contact dialog cannot do that while {self.step.value}")

     def begin(self) -> ContactStep:
          """Route to the existing conversation if there is one, else to the compose form."""
          self._require(ContactStep.CHECKING)
          existing = self.conversations.find_for_property(self.tenant_id, self.property_id)
          if existing is not None:
               self.conversation_id = existing.id
               self.step = ContactStep.EXISTING_CONVERSATION
          else:
               self.step = ContactStep.COMPOSE
          return self.step

     def submit(self, message: str, subject: Optional[str] = None) -> ContactStep:
          self._require(ContactStep.COMPOSE)
          if not message or not message.strip():
               self.error = "Please write a message"
               raise ValidationError(self.error)

          self.error = None
          self.step = ContactStep.SENDING
          try:
               conversation, _ = self.conversations.start_conversation(
                    self.tenant_id, self.property_id, subject or self.subject, message
               )
          except RentmateError as exc:
               self.step = ContactStep.FAILED
               self.error = exc.message
               logger.warning("Contacting landlord about property %s failed: %s", self.property_id, exc.message)
               raise
          self.conversation_id = conversation.id
          self.step = ContactStep.SENT
          return self.step

     def retry(self) -> ContactStep:
          self._require(ContactStep.FAILED)
          self.step = ContactStep.COMPOSE
          return self.step
