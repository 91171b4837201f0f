# routers/conversations.py
"""
Conversation API. The same send/read operations are reachable over the push
channel (/app/chat.send/{id}, /app/chat.read/{id}); these routes are what
clients fall back to when the channel is down.
"""
from typing import Optional

from fastapi import APIRouter, Depends, status

from rentmate.auth import verify_token
from rentmate.dependencies import get_conversation_service
from rentmate.models import Conversation, ConversationStatus
from rentmate.schemas.conversation import (
     ConversationDetailResponse,
     ConversationExistsResponse,
     ConversationListResponse,
     ConversationResponse,
     ConversationUnreadResponse,
     MarkReadResponse,
     MessageResponse,
     SendMessageRequest,
     StartConversationRequest,
     StartConversationResponse,
)
from rentmate.services import ConversationService

router = APIRouter(prefix="/api/conversations", tags=["conversations"])


def conversation_view(service: ConversationService, actor_id: int, conversation: Conversation) -> dict:
     last = service.last_message(conversation.id)
     return dict(
          id=conversation.id,
          property_id=conversation.property_id,
          tenant_id=conversation.tenant_id,
          landlord_id=conversation.landlord_id,
          subject=conversation.subject,
          status=conversation.status,
          last_message=last.content if last else None,
          last_message_at=conversation.last_message_at,
          unread_count=service.unread_in(actor_id, conversation.id),
          created_at=conversation.created_at,
     )


@router.post("", response_model=StartConversationResponse, status_code=status.HTTP_201_CREATED)
def start_conversation(
     body: StartConversationRequest,
     service: ConversationService = Depends(get_conversation_service),
     token: dict = Depends(verify_token),
):
     conversation, message = service.start_conversation(token["id"], body.property_id, body.subject, body.message)
     return StartConversationResponse(
          conversation=ConversationResponse(**conversation_view(service, token["id"], conversation)),
          message=MessageResponse.model_validate(message),
     )


@router.get("", response_model=ConversationListResponse)
def list_conversations(
     archived: bool = False,
     service: ConversationService = Depends(get_conversation_service),
     token: dict = Depends(verify_token),
):
     wanted = ConversationStatus.ARCHIVED if archived else ConversationStatus.ACTIVE
     rows = service.list_conversations(token["id"], wanted)
     return ConversationListResponse(
          content=[ConversationResponse(**conversation_view(service, token["id"], c)) for c in rows],
          total_elements=len(rows),
     )


@router.get("/unread-count", response_model=ConversationUnreadResponse)
def unread_count(service: ConversationService = Depends(get_conversation_service), token: dict = Depends(verify_token)):
     messages, conversations = service.unread_count(token["id"])
     return ConversationUnreadResponse(unread_count=messages, unread_conversations=conversations)


@router.get("/property/{property_id}", response_model=ConversationExistsResponse)
def find_for_property(
     property_id: int,
     service: ConversationService = Depends(get_conversation_service),
     token: dict = Depends(verify_token),
):
     conversation: Optional[Conversation] = service.find_for_property(token["id"], property_id)
     return ConversationExistsResponse(
          exists=conversation is not None,
          conversation_id=conversation.id if conversation else None,
     )


@router.get("/{conversation_id}", response_model=ConversationDetailResponse)
def get_conversation(
     conversation_id: int,
     service: ConversationService = Depends(get_conversation_service),
     token: dict = Depends(verify_token),
):
     conversation = service.get_conversation(token["id"], conversation_id)
     messages = service.messages(token["id"], conversation_id)
     return ConversationDetailResponse(
          **conversation_view(service, token["id"], conversation),
          messages=[MessageResponse.model_validate(m) for m in messages],
     )


@router.post("/{conversation_id}/messages", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
def send_message(
     conversation_id: int,
     body: SendMessageRequest,
     service: ConversationService = Depends(get_conversation_service),
     token: dict = Depends(verify_token),
):
     return service.send_message(token["id"], conversation_id, body.content)


@router.put("/{conversation_id}/read", response_model=MarkReadResponse)
def mark_read(
     conversation_id: int,
     service: ConversationService = Depends(get_conversation_service),
     token: dict = Depends(verify_token),
):
     count = service.mark_read(token["id"], conversation_id)
     return MarkReadResponse(marked_as_read=count, conversation_id=conversation_id)


@router.delete("/{conversation_id}", response_model=ConversationResponse)
def archive_conversation(
     conversation_id: int,
     service: ConversationService = Depends(get_conversation_service),
     token: dict = Depends(verify_token),
):
     conversation = service.archive(token["id"], conversation_id)
     return ConversationResponse(**conversation_view(service, token["id"], conversation))
