# routers/realtime.py
"""
Push channel endpoint: /ws

Frames are JSON objects with a ``command``:

     client -> server
          {"command": "connect", "token": "<jwt>"}                   (must be first)
          {"command": "subscribe", "destination": "/topic/conversations/5"}
          {"command": "unsubscribe", "destination": "..."}
          {"command": "send", "destination": "/app/chat.send/5", "body": {"content": "Hi"}}
          {"command": "send", "destination": "/app/chat.read/5", "body": {}}

     server -> client
          {"command": "connected", "user_id": 7}
          {"command": "subscribed", "destination": "..."}
          {"command": "message", "destination": "...", "body": {...}}
          {"command": "error", "message": "...", "code": "..."}

A user may subscribe to their own notification queue and to the topics of
conversations they take part in. Nothing is queued for a user who is not
connected.
"""
import asyncio
import json
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect, status
from fastapi.concurrency import run_in_threadpool

from rentmate.auth import authenticate_token
from rentmate.database import get_session_context
from rentmate.exceptions import AuthenticationError, RentmateError, ValidationError
from rentmate.realtime import Inbox, RealtimeHub, conversation_id_of, notification_owner_of
from rentmate.repositories import Store
from rentmate.services import ConversationService, NotificationService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["realtime"])

_closing = set()


def authorize_destination(store: Store, user_id: int, destination: str) -> bool:
     """May ``user_id`` subscribe to ``destination``?"""
     owner = notification_owner_of(destination)
     if owner is not None:
          return owner == user_id
     if not destination.startswith("/topic/"):
          return False
     conversation_id = conversation_id_of(destination)
     if conversation_id is None:
          return False
     conversation = store.conversations.get(conversation_id)
     return conversation is not None and conversation.is_participant(user_id)


def handle_client_message(store: Store, clock, hub: RealtimeHub, user_id: int, destination: str, body: dict):
     """Apply a client ``send`` frame; returns the stored result."""
     conversation_id = conversation_id_of(destination)
     if conversation_id is None or not destination.startswith("/app/"):
          raise ValidationError(f"Unknown destination: {destination}")

     service = ConversationService(store, clock, hub, NotificationService(store, hub, clock))
     if destination.startswith("/app/chat.send/"):
          return service.send_message(user_id, conversation_id, (body or {}).get("content"))
     return service.mark_read(user_id, conversation_id)


async def _pump(websocket: WebSocket, inbox: Inbox) -> None:
     while True:
          destination, body = await inbox.get()
          await websocket.send_json({"command": "message", "destination": destination, "body": json.loads(body)})


def pump_stopped(websocket: WebSocket, user_id: int):
     """Done-callback for the delivery task: if it failed, log why and close the socket."""

     def done(task: asyncio.Task) -> None:
          if task.cancelled() or task.exception() is None:
               return
          logger.error("Push delivery for user %s failed", user_id, exc_info=task.exception())
          closing = task.get_loop().create_task(_close(websocket, status.WS_1011_INTERNAL_ERROR))
          _closing.add(closing)
          closing.add_done_callback(_closing.discard)

     return done


async def _close(websocket: WebSocket, code: int) -> None:
     try:
          await websocket.close(code=code)
     except RuntimeError as exc:
          logger.debug("Push channel already closed: %s", exc)


async def _error(websocket: WebSocket, exc: RentmateError) -> None:
     await websocket.send_json({"command": "error", "message": exc.message, "code": exc.code})


@router.websocket("/ws")
async def realtime_endpoint(websocket: WebSocket):
     app = websocket.app
     hub: RealtimeHub = app.state.hub
     factory = app.state.session_factory

     await websocket.accept()
     try:
          frame = await websocket.receive_json()
          if frame.get("command") != "connect":
               raise AuthenticationError("First frame must be connect")
          user_id = authenticate_token(frame.get("token") or "")
     except AuthenticationError as exc:
          await _error(websocket, exc)
          await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
          return
     except WebSocketDisconnect:
          return

     inbox = Inbox()
     await websocket.send_json({"command": "connected", "user_id": user_id})
     pump = asyncio.create_task(_pump(websocket, inbox))
     pump.add_done_callback(pump_stopped(websocket, user_id))
     logger.info("Push channel connected for user %s", user_id)

     def authorize(destination):
          with get_session_context(factory) as db:
               return authorize_destination(Store.for_session(db), user_id, destination)

     def apply(destination, body):
          with get_session_context(factory) as db:
               handle_client_message(Store.for_session(db), app.state.clock, hub, user_id, destination, body)

     try:
          while not pump.done():
               frame = await websocket.receive_json()
               command = frame.get("command")
               destination = frame.get("destination") or ""
               try:
                    if command == "subscribe":
                         if not await run_in_threadpool(authorize, destination):
                              raise RentmateError(f"Subscription to {destination} refused", code="forbidden")
                         hub.subscribe(destination, inbox)
                         await websocket.send_json({"command": "subscribed", "destination": destination})
                    elif command == "unsubscribe":
                         hub.unsubscribe(destination, inbox)
                    elif command == "send":
                         await run_in_threadpool(apply, destination, frame.get("body"))
                    else:
                         raise ValidationError(f"Unknown command: {command}")
               except RentmateError as exc:
                    await _error(websocket, exc)
     except WebSocketDisconnect:
          logger.info("Push channel closed for user %s", user_id)
     finally:
          hub.drop(inbox)
          pump.cancel()
