"""
JWKS package.

Contains the key-set document model, key resolution by ``kid``, the
TTL-bounded key-set cache and the transport used to fetch key sets.

Key points:
- Cache key sets per location for a fixed TTL to avoid hammering the issuer.
- A stale entry is replaced as a whole; a failed fetch leaves it untouched.
- Only OKP/Ed25519 keys are usable; other records are skipped.
"""

from .cache import JwksCache, get_default_cache, reset_default_cache
from .client import HttpJwksFetcher, JwksFetcher, StaticJwksFetcher, load_jwks
from .models import Jwk, Jwks, parse_jwks, resolve_key

__all__ = [
    "HttpJwksFetcher",
    "Jwk",
    "Jwks",
    "JwksCache",
    "JwksFetcher",
    "StaticJwksFetcher",
    "get_default_cache",
    "load_jwks",
    "parse_jwks",
    "reset_default_cache",
    "resolve_key",
]
