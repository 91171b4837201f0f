# services/conversation_service.py
"""
Conversation Service - tenant/landlord messaging about a property.

Messages are stored, then pushed to ``/topic/conversations/{id}`` for anyone
subscribed, and the recipient gets a MESSAGE notification.
"""
import logging
from typing import List, Optional, Tuple

from rentmate.clock import Clock, SystemClock
from rentmate.exceptions import (
     AuthorizationError,
     DuplicateResourceError,
     InvalidTransitionError,
     NotFoundError,
     ValidationError,
)
from rentmate.models import (
     Conversation,
     ConversationStatus,
     Message,
     NotificationType,
     RelatedEntityType,
     SenderRole,
     UserRole,
)
from rentmate.realtime import RealtimeHub, conversation_topic
from rentmate.repositories import Store
from rentmate.schemas.conversation import MessageResponse

logger = logging.getLogger(__name__)

MAX_MESSAGE_LENGTH = 5000


def _clean_content(content: Optional[str]) -> str:
     content = (content or "").strip()
     if not content:
          raise ValidationError("Message content cannot be empty")
     if len(content) > MAX_MESSAGE_LENGTH:
          raise ValidationError(f"Message cannot exceed {MAX_MESSAGE_LENGTH} characters")
     return content


class ConversationService:

     def __init__(
          self,
          store: Store,
          clock: Optional[Clock] = None,
          hub: Optional[RealtimeHub] = None,
          notifier=None,
     ):
          self.store = store
          self.clock = clock or SystemClock()
          self.hub = hub
          self.notifier = notifier

     def get_conversation(self, actor_id: int, conversation_id: int) -> Conversation:
          conversation = self.store.conversations.get(conversation_id)
          if conversation is None:
               raise NotFoundError("Conversation", conversation_id)
          if not conversation.is_participant(actor_id):
               raise AuthorizationError("You are not part of this conversation")
          return conversation

     def find_for_property(self, actor_id: int, property_id: int) -> Optional[Conversation]:
          """The tenant's existing conversation about ``property_id``, if any."""
          return self.store.conversations.first(tenant_id=actor_id, property_id=property_id)

     def start_conversation(
          self,
          actor_id: int,
          property_id: int,
          subject: str,
          content: str
     ) -> Tuple[Conversation, Message]:
          """
          Open a conversation with the property's landlord.

          Only tenants start conversations, and only one per property.
          """
          user = self.store.users.get(actor_id)
          if user is None:
               raise NotFoundError("User", actor_id)
          if user.role != UserRole.TENANT:
               raise AuthorizationError("Only tenants can start a conversation")
          prop = self.store.properties.get(property_id)
          if prop is None:
               raise NotFoundError("Property", property_id)
          if self.find_for_property(actor_id, property_id) is not None:
               raise DuplicateResourceError("You already have a conversation about this property")

          subject = (subject or "").strip() or f"Inquiry about {prop.title}"
          content = _clean_content(content)

          now = self.clock.now()
          conversation = Conversation(
               property_id=property_id,
               tenant_id=actor_id,
               landlord_id=prop.landlord_id,
               subject=subject[:255],
               status=ConversationStatus.ACTIVE,
               last_message_at=now,
               created_at=now,
               updated_at=now,
          )
          self.store.conversations.add(conversation)
          message = self._post(conversation, actor_id, SenderRole.TENANT, content)
          logger.info("Conversation %s started about property %s", conversation.id, property_id)
          return conversation, message

     def send_message(self, actor_id: int, conversation_id: int, content: str) -> Message:
          conversation = self.get_conversation(actor_id, conversation_id)
          if conversation.status == ConversationStatus.ARCHIVED:
               raise InvalidTransitionError(f"Conversation {conversation_id} is archived")
          content = _clean_content(content)
          role = SenderRole.TENANT if actor_id == conversation.tenant_id else self._landlord_role(actor_id)
          return self._post(conversation, actor_id, role, content)

     def _landlord_role(self, user_id: int) -> SenderRole:
          user = self.store.users.get(user_id)
          if user is not None and user.role == UserRole.PROPERTY_MANAGER:
               return SenderRole.PROPERTY_MANAGER
          return SenderRole.LANDLORD

     def _post(self, conversation: Conversation, sender_id: int, role: SenderRole, content: str) -> Message:
          now = self.clock.now()
          message = Message(
               conversation_id=conversation.id,
               sender_id=sender_id,
               sender_role=role,
               content=content,
               read=False,
               created_at=now,
          )
          self.store.messages.add(message)
          conversation.last_message_at = now
          conversation.updated_at = now

          if self.hub is not None:
               payload = MessageResponse.model_validate(message).model_dump(mode="json")
               self.hub.publish(conversation_topic(conversation.id), payload)

          if self.notifier is not None:
               recipient = conversation.other_party(sender_id)
               preview = content if len(content) <= 80 else content[:77] + "..."
               self.notifier.notify(
                    recipient,
                    NotificationType.MESSAGE,
                    f"New message: {conversation.subject}",
                    preview,
                    link=f"/dashboard/messages/{conversation.id}",
                    related_entity_id=conversation.id,
                    related_entity_type=RelatedEntityType.CONVERSATION,
               )
          return message

     def messages(self, actor_id: int, conversation_id: int) -> List[Message]:
          self.get_conversation(actor_id, conversation_id)
          return self.store.messages.list(conversation_id=conversation_id)

     def last_message(self, conversation_id: int) -> Optional[Message]:
          return self.store.messages.last(conversation_id=conversation_id)

     def unread_in(self, actor_id: int, conversation_id: int) -> int:
          return self.store.messages.count(
               lambda m: m.sender_id != actor_id,
               conversation_id=conversation_id,
               read=False,
          )

     def list_conversations(
          self,
          actor_id: int,
          status: Optional[ConversationStatus] = ConversationStatus.ACTIVE
     ) -> List[Conversation]:
          """Conversations the user is part of, most recent activity first."""
          rows = self.store.conversations.list(
               lambda c: c.is_participant(actor_id) and (status is None or c.status == status)
          )
          rows.sort(key=lambda c: (c.last_message_at or c.created_at, c.id), reverse=True)
          return rows

     def mark_read(self, actor_id: int, conversation_id: int) -> int:
          """Mark the other party's messages as read. Returns how many changed."""
          self.get_conversation(actor_id, conversation_id)
          unread = self.store.messages.list(
               lambda m: m.sender_id != actor_id,
               conversation_id=conversation_id,
               read=False,
          )
          for message in unread:
               message.read = True
          return len(unread)

     def unread_count(self, actor_id: int) -> Tuple[int, int]:
          """(unread messages, conversations with unread messages) for the user."""
          messages = 0
          conversations = 0
          for conversation in self.list_conversations(actor_id, status=None):
               unread = self.unread_in(actor_id, conversation.id)
               messages += unread
               if unread:
                    conversations += 1
          return messages, conversations

     def archive(self, actor_id: int, conversation_id: int) -> Conversation:
          conversation = self.get_conversation(actor_id, conversation_id)
          conversation.status = ConversationStatus.ARCHIVED
          conversation.updated_at = self.clock.now()
          return conversation
