# realtime/fallback.py
"""
Request/response fallback for ``PushChannel.send``.

When the push channel is down, chat frames are replayed against the REST
API instead:

     /app/chat.send/{id}  ->  POST /api/conversations/{id}/messages
     /app/chat.read/{id}  ->  PUT  /api/conversations/{id}/read

Failures are raised to the caller, never swallowed.
"""
import asyncio
import logging
from typing import Any, Callable, Optional

import requests

from rentmate.exceptions import AuthenticationError, RentmateError, TransportError, ValidationError
from .destinations import conversation_id_of

logger = logging.getLogger(__name__)


class RestFallback:

     def __init__(
          self,
          base_url: str,
          token_provider: Callable[[], Optional[str]],
          session: Optional[requests.Session] = None,
          timeout: float = 10,
     ):
          self.base_url = base_url.rstrip("/")
          self.token_provider = token_provider
          self.session = session or requests.Session()
          self.timeout = timeout

     async def __call__(self, destination: str, payload: dict) -> Any:
          return await asyncio.to_thread(self.deliver, destination, payload)

     def deliver(self, destination: str, payload: dict) -> Any:
          conversation_id = conversation_id_of(destination)
          if conversation_id is None:
               raise ValidationError(f"No request/response route for {destination}")
          token = self.token_provider()
          if not token:
               raise AuthenticationError("No session token")
          headers = {"Authorization": f"Bearer {token}", "Content-Type": "application/json"}

          url = f"{self.base_url}/api/conversations/{conversation_id}"
          try:
               if destination.startswith("/app/chat.send/"):
                    response = self.session.post(f"{url}/messages", json=payload, headers=headers, timeout=self.timeout)
               elif destination.startswith("/app/chat.read/"):
                    response = self.session.put(f"{url}/read", headers=headers, timeout=self.timeout)
               else:
                    raise ValidationError(f"No request/response route for {destination}")
          except requests.RequestException as exc:
               raise TransportError(f"Fallback request failed: {exc}") from exc

          if response.status_code >= 400:
               raise _error_from(response)
          return response.json()


def _error_from(response) -> RentmateError:
     try:
          body = response.json()
     except ValueError:
          body = {}
     error = RentmateError(body.get("detail") or response.text or "Request failed", code=body.get("code"))
     error.status_code = response.status_code
     return error
