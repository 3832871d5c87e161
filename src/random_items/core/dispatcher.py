"""Action dispatchers that hand a drawn item to the receiving side."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, Protocol

import httpx

logger = logging.getLogger(__name__)


class DispatchError(Exception):
    """The item could not be handed out (e.g. nobody to receive it)."""


class Dispatcher(Protocol):
    def dispatch(self, title: str, identifier: str, spawn_in_world: bool) -> None: ...


class LogDispatcher:
    """Dispatcher that only reports what would be spawned or added.

    ``has_subject`` mirrors the receiving side's precondition check: when it
    returns False the dispatch fails with DispatchError.
    """

    def __init__(self, has_subject: Callable[[], bool] | None = None) -> None:
        self.has_subject = has_subject
        self.dispatched: list[tuple[str, str, bool]] = []

    def dispatch(self, title: str, identifier: str, spawn_in_world: bool) -> None:
        if self.has_subject is not None and not self.has_subject():
            raise DispatchError("No active subject.")

        if spawn_in_world:
            logger.info("Spawning in world: %s", title)
        else:
            logger.info("Adding to inventory: %s %s", title, identifier)
        self.dispatched.append((title, identifier, spawn_in_world))


class WebhookDispatcher:
    """POST each drawn item as JSON to an HTTP endpoint using httpx."""

    def __init__(
        self,
        url: str,
        api_key: str = "",
        timeout: float = 10.0,
    ) -> None:
        self.url = url
        headers: dict[str, str] = {"Content-Type": "application/json"}
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"

        self._client = httpx.Client(
            headers=headers,
            timeout=httpx.Timeout(timeout, connect=5.0),
        )

    def close(self) -> None:
        self._client.close()

    def dispatch(self, title: str, identifier: str, spawn_in_world: bool) -> None:
        payload: dict[str, Any] = {
            "title": title,
            "repository_id": identifier,
            "mode": "world" if spawn_in_world else "inventory",
        }
        try:
            response = self._client.post(self.url, json=payload)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 409:
                raise DispatchError("No active subject.") from e
            raise DispatchError(
                f"HTTP {e.response.status_code}: {e.response.text[:200]}"
            ) from e
        except httpx.HTTPError as e:
            raise DispatchError(f"Request to {self.url} failed: {e}") from e

        logger.info("Dispatched %s (%s) to %s", title, payload["mode"], self.url)
