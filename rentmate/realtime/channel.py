# realtime/channel.py
"""
Client side of the push channel.

A ``PushChannel`` is an explicit connection object: the session creates it at
login and closes it at logout. It keeps one ``Subscription`` per destination,
each with its own queue (or a callback), reconnects on a fixed delay while the
session still has a token, and never buffers or replays: whatever arrives while
disconnected is lost here and must be re-fetched over REST.
"""
import asyncio
import enum
import inspect
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from rentmate import config
from rentmate.exceptions import AuthenticationError, TransportError
from .transport import Transport

logger = logging.getLogger(__name__)


class ConnectionStatus(str, enum.Enum):
     DISCONNECTED = "disconnected"
     CONNECTING = "connecting"
     CONNECTED = "connected"
     ERROR = "error"


class Subscription:
     """
     Registration for one destination.

     Messages go to ``callback`` when one is given, otherwise onto the
     subscription's queue, read with ``await sub.get()`` or ``async for``.
     """

     def __init__(self, destination: str, callback: Optional[Callable[[Any], None]] = None):
          self.destination = destination
          self.callback = callback
          self.queue: asyncio.Queue = asyncio.Queue()
          self.active = True

     def dispatch(self, payload: Any) -> None:
          if self.callback is not None:
               self.callback(payload)
          else:
               self.queue.put_nowait(payload)

     async def get(self) -> Any:
          return await self.queue.get()

     def __aiter__(self):
          return self

     async def __anext__(self) -> Any:
          if not self.active and self.queue.empty():
               raise StopAsyncIteration
          return await self.queue.get()


@dataclass
class SendResult:
     """How an outbound message left: ``push`` or ``fallback`` (with its response)."""
     via: str
     response: Any = None


class PushChannel:

     def __init__(
          self,
          transport: Transport,
          token_provider: Callable[[], Optional[str]],
          reconnect_delay: float = config.REALTIME_RECONNECT_DELAY,
          fallback: Optional[Callable[[str, dict], Any]] = None,
          on_status_change: Optional[Callable[[ConnectionStatus], None]] = None,
          on_error: Optional[Callable[[Exception], None]] = None,
     ):
          self.transport = transport
          self.token_provider = token_provider
          self.reconnect_delay = reconnect_delay
          self.fallback = fallback
          self.on_status_change = on_status_change
          self.on_error = on_error
          self._status = ConnectionStatus.DISCONNECTED
          self._subscriptions: Dict[str, Subscription] = {}
          self._closed = False

     @property
     def status(self) -> ConnectionStatus:
          return self._status

     @property
     def is_connected(self) -> bool:
          return self._status == ConnectionStatus.CONNECTED and self.transport.connected

     @property
     def destinations(self):
          return list(self._subscriptions)

     def _set_status(self, status: ConnectionStatus) -> None:
          if status == self._status:
               return
          self._status = status
          logger.info("Push channel %s", status.value)
          if self.on_status_change is not None:
               self.on_status_change(status)

     def _fail(self, exc: Exception) -> None:
          logger.error("Push channel transport error: %s", exc)
          self._set_status(ConnectionStatus.ERROR)
          if self.on_error is not None:
               self.on_error(exc)

     async def connect(self) -> None:
          """Open the connection and restore every registered subscription."""
          if self.is_connected:
               return
          token = self.token_provider()
          if not token:
               self._set_status(ConnectionStatus.DISCONNECTED)
               raise AuthenticationError("No session token; push channel not opened")

          self._closed = False
          self._set_status(ConnectionStatus.CONNECTING)
          try:
               await self.transport.connect(token)
          except TransportError as exc:
               self._fail(exc)
               raise
          for destination, subscription in list(self._subscriptions.items()):
               try:
                    await self.transport.subscribe(destination)
               except TransportError as exc:
                    if not self.transport.connected:
                         self._fail(exc)
                         raise
                    self._refuse(subscription, exc)
          self._set_status(ConnectionStatus.CONNECTED)

     def _refuse(self, subscription: Subscription, exc: TransportError) -> None:
          # A refused destination is dropped; the rest of the connection stays up.
          self._subscriptions.pop(subscription.destination, None)
          subscription.active = False
          logger.warning("Subscription to %s dropped: %s", subscription.destination, exc)
          if self.on_error is not None:
               self.on_error(exc)

     async def subscribe(self, destination: str, callback: Optional[Callable[[Any], None]] = None) -> Subscription:
          """Register ``destination``. A second call for the same one is a no-op."""
          existing = self._subscriptions.get(destination)
          if existing is not None:
               logger.debug("Already subscribed to %s", destination)
               return existing

          subscription = Subscription(destination, callback)
          if self.is_connected:
               await self.transport.subscribe(destination)
          self._subscriptions[destination] = subscription
          logger.info("Subscribed to %s", destination)
          return subscription

     async def unsubscribe(self, destination: str) -> bool:
          subscription = self._subscriptions.pop(destination, None)
          if subscription is None:
               return False
          subscription.active = False
          if self.is_connected:
               await self.transport.unsubscribe(destination)
          logger.info("Unsubscribed from %s", destination)
          return True

     async def send(self, destination: str, payload: dict) -> SendResult:
          """
          Publish over the push channel when connected, otherwise hand the
          message to the request/response fallback. Fallback errors propagate.
          """
          if self.is_connected:
               try:
                    await self.transport.publish(destination, payload)
                    return SendResult(via="push")
               except TransportError as exc:
                    self._fail(exc)

          if self.fallback is None:
               raise TransportError("Push channel is not connected and no fallback is configured")
          logger.info("Push channel unavailable, sending %s via fallback", destination)
          response = self.fallback(destination, payload)
          if inspect.isawaitable(response):
               response = await response
          return SendResult(via="fallback", response=response)

     def _dispatch(self, destination: str, payload: Any) -> None:
          subscription = self._subscriptions.get(destination)
          if subscription is None:
               logger.debug("No subscription for %s, message dropped", destination)
               return
          try:
               subscription.dispatch(payload)
          except Exception:
               logger.exception("Subscriber callback for %s failed", destination)

     async def run(self) -> None:
          """
          Receive and dispatch until closed or the session token goes away,
          reconnecting after ``reconnect_delay`` on transport failure.
          """
          while not self._closed:
               if not self.is_connected:
                    try:
                         await self.connect()
                    except AuthenticationError:
                         break
                    except TransportError:
                         await asyncio.sleep(self.reconnect_delay)
                         continue

               try:
                    destination, payload = await self.transport.receive()
               except TransportError as exc:
                    if self._closed:
                         break
                    self._fail(exc)
                    await asyncio.sleep(self.reconnect_delay)
                    continue
               self._dispatch(destination, payload)

          if self._status != ConnectionStatus.DISCONNECTED:
               self._set_status(ConnectionStatus.DISCONNECTED)

     async def close(self) -> None:
          """Tear the channel down (logout or end of session)."""
          self._closed = True
          for subscription in self._subscriptions.values():
               subscription.active = False
          self._subscriptions.clear()
          await self.transport.close()
          self._set_status(ConnectionStatus.DISCONNECTED)
