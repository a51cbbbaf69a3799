"""
Key-set transport.

The verification pipeline only needs something that turns a location into
the raw bytes of a key-set document. ``HttpJwksFetcher`` does that over
HTTP(S); ``StaticJwksFetcher`` serves in-memory documents.
"""

from __future__ import annotations

import json
from typing import Any, Dict, Mapping, Optional, Protocol, Union

import httpx

from ..errors import JwksHttpError
from ..logging import get_logger
from .models import Jwks, parse_jwks

logger = get_logger("jwks_verifier.client")


class JwksFetcher(Protocol):
    def __call__(self, location: str) -> bytes:  # pragma: no cover - protocol definition
        ...


class HttpJwksFetcher:
    """Fetches key-set documents with an HTTP GET."""

    def __init__(self, timeout: float = 10.0, client: Optional[httpx.Client] = None) -> None:
        self.timeout = timeout
        self._client = client

    def __call__(self, location: str) -> bytes:
        if self._client is not None:
            response = self._client.get(location, timeout=self.timeout)
        else:
            with httpx.Client(timeout=self.timeout) as client:
                response = client.get(location)
        response.raise_for_status()
        return response.content


class StaticJwksFetcher:
    """Serves key-set documents held in memory, keyed by location."""

    def __init__(self, documents: Optional[Mapping[str, Union[bytes, str, Dict[str, Any]]]] = None) -> None:
        self._documents: Dict[str, bytes] = {}
        for location, document in (documents or {}).items():
            self.add(location, document)

    def add(self, location: str, document: Union[bytes, str, Dict[str, Any]]) -> None:
        """Register *document* under *location*."""
        if isinstance(document, dict):
            document = json.dumps(document)
        if isinstance(document, str):
            document = document.encode("utf-8")
        self._documents[location] = document

    def __call__(self, location: str) -> bytes:
        try:
            return self._documents[location]
        except KeyError:
            raise JwksHttpError(f"no document registered for {location}") from None


def load_jwks(location: str, fetcher: JwksFetcher) -> Jwks:
    """Fetch and parse the key set at *location*.

    Raises:
        JwksHttpError: The fetcher failed.
        JwksJsonError: The document could not be parsed.
    """
    try:
        raw = fetcher(location)
    except JwksHttpError:
        raise
    except Exception as exc:
        logger.error("Failed to fetch JWKS", location=location, error=str(exc))
        raise JwksHttpError(str(exc)) from exc

    jwks = parse_jwks(raw)
    logger.info("JWKS refreshed successfully", location=location, keys_count=len(jwks.keys))
    return jwks
