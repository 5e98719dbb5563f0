"""HTTP client for a content-addressed blob service."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, Self

import httpx
from pydantic import ValidationError

from orghash.config.storage import DEFAULT_HTTP_TIMEOUT_SECONDS
from orghash.domain.model import Algorithm, ContentStoreError

from .schema import ErrorResponse, SaveResponse

if TYPE_CHECKING:
    from collections.abc import Callable
    from types import TracebackType

    from orghash.config.storage import ContentStoreConfig
    from orghash.domain.ports import ContentStore

log = getLogger(__name__)

_OCTET_STREAM = "application/octet-stream"


def _default_client_factory(base_url: str, timeout: float) -> httpx.Client:
    return httpx.Client(base_url=base_url, timeout=timeout)


def _error_message(response: httpx.Response) -> str:
    try:
        payload = ErrorResponse.model_validate(response.json())
    except (ValueError, ValidationError):
        return f"HTTP {response.status_code}"
    if payload.detail:
        return f"HTTP {response.status_code} {payload.error}: {payload.detail}"
    return f"HTTP {response.status_code} {payload.error}"


@dataclass(slots=True)
class HttpContentStore:
    """Content store backed by ``POST /blobs/{alg}`` and ``GET /blobs/{alg}/{handle}``.

    Requests are never retried; a failed save surfaces as :class:`ContentStoreError`
    before the caller mutates anything.
    """

    base_url: str
    timeout_seconds: float = DEFAULT_HTTP_TIMEOUT_SECONDS
    client_factory: Callable[[str, float], httpx.Client] = field(
        default=_default_client_factory
    )
    _client: httpx.Client | None = field(default=None, init=False, repr=False)

    @classmethod
    def from_config(cls, config: ContentStoreConfig) -> HttpContentStore:
        if config.base_url is None:
            raise ContentStoreError("HTTP content store requires a base URL")
        return cls(base_url=config.base_url, timeout_seconds=config.timeout_seconds)

    @property
    def client(self) -> httpx.Client:
        if self._client is None:
            self._client = self.client_factory(self.base_url, self.timeout_seconds)
        return self._client

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.close()

    def save(self, content: bytes, algorithm: Algorithm) -> str:
        resolved = Algorithm.parse(algorithm)
        try:
            response = self.client.post(
                f"/blobs/{resolved.value}",
                content=content,
                headers={"Content-Type": _OCTET_STREAM},
            )
        except httpx.HTTPError as exc:
            raise ContentStoreError(f"Saving blob failed: {exc}") from exc

        if response.is_error:
            raise ContentStoreError(f"Saving blob failed: {_error_message(response)}")
        try:
            payload = SaveResponse.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise ContentStoreError("Unexpected blob service response payload") from exc
        if payload.algorithm != resolved.value:
            raise ContentStoreError(
                f"Blob service stored with {payload.algorithm}, expected {resolved.value}"
            )

        log.debug("Saved %s bytes as %s %s", len(content), resolved, payload.handle)
        return payload.handle

    def get(self, handle: str, algorithm: Algorithm) -> bytes | None:
        resolved = Algorithm.parse(algorithm)
        try:
            response = self.client.get(f"/blobs/{resolved.value}/{handle}")
        except httpx.HTTPError as exc:
            raise ContentStoreError(f"Fetching blob {handle} failed: {exc}") from exc

        if response.status_code == httpx.codes.NOT_FOUND:
            return None
        if response.is_error:
            raise ContentStoreError(f"Fetching blob {handle} failed: {_error_message(response)}")
        return response.content


if TYPE_CHECKING:
    _store_check: ContentStore = HttpContentStore(base_url="http://localhost")
