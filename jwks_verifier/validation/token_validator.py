"""
Token verification pipeline.

Decode -> check alg -> check kid -> resolve key (through the cache) ->
verify signature -> parse claims -> validate claims. Every stage raises a
``VerifyError`` on failure and nothing after it runs.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from cryptography.exceptions import InvalidSignature
from pydantic import BaseModel, ValidationError

from ..codec import split_and_decode
from ..config import get_settings
from ..errors import (
    AlgorithmError,
    JsonDecodeError,
    KidError,
    NoKeyError,
    SignatureError,
    VerifyError,
)
from ..jwks.cache import JwksCache, get_default_cache
from ..jwks.client import HttpJwksFetcher, JwksFetcher, load_jwks
from ..jwks.models import Jwks, resolve_key
from ..logging import get_logger
from .claims import Claims, VerifyOptions, validate_claims

SUPPORTED_ALG = "EdDSA"

logger = get_logger("jwks_verifier.validator")


def _default_fetcher() -> JwksFetcher:
    return HttpJwksFetcher(timeout=get_settings().http_timeout_seconds)


def verify(
    token: str,
    jwks_uri: str,
    options: Optional[VerifyOptions] = None,
    fetcher: Optional[JwksFetcher] = None,
) -> Claims:
    """Verify *token* against the key set at *jwks_uri* using the default cache."""
    return verify_with_cache(token, jwks_uri, get_default_cache(), options, fetcher)


def verify_with_cache(
    token: str,
    jwks_uri: str,
    cache: JwksCache,
    options: Optional[VerifyOptions] = None,
    fetcher: Optional[JwksFetcher] = None,
) -> Claims:
    """Verify *token* against the key set at *jwks_uri* using *cache*.

    Returns:
        The typed claim set, unknown claims included.

    Raises:
        VerifyError: The specific rejection reason.
    """
    options = options or VerifyOptions()
    kid: Optional[str] = None
    try:
        decoded = split_and_decode(token)

        alg = decoded.header.get("alg")
        if not isinstance(alg, str) or alg != SUPPORTED_ALG:
            raise AlgorithmError()
        kid = decoded.header.get("kid")
        if not isinstance(kid, str) or not kid:
            raise KidError()

        jwks = _get_jwks(jwks_uri, cache, fetcher)
        public_key = resolve_key(jwks, kid)
        if public_key is None:
            raise NoKeyError()

        try:
            public_key.verify(decoded.signature, decoded.signing_input)
        except InvalidSignature as exc:
            raise SignatureError() from exc

        try:
            claims = Claims.model_validate(decoded.payload)
        except ValidationError as exc:
            raise JsonDecodeError("claims do not match the expected shape") from exc

        validate_claims(claims, options)
    except VerifyError as exc:
        logger.warning("Token verification failed", code=exc.code.value, kid=kid)
        raise

    logger.info("Token verified successfully", sub=claims.sub, kid=kid)
    return claims


def _get_jwks(jwks_uri: str, cache: JwksCache, fetcher: Optional[JwksFetcher]) -> Jwks:
    """Return a fresh cached key set, fetching and storing it on a miss."""
    jwks = cache.get_fresh(jwks_uri)
    if jwks is not None:
        return jwks
    jwks = load_jwks(jwks_uri, fetcher or _default_fetcher())
    cache.put(jwks_uri, jwks)
    return jwks


class TokenVerificationResponse(BaseModel):
    """Response model for token verification."""
    valid: bool
    claims: Optional[Dict[str, Any]] = None
    error: Optional[str] = None
    code: Optional[str] = None


class TokenValidator:
    """Token validation service bound to one key-set location."""

    def __init__(
        self,
        jwks_url: str,
        cache: Optional[JwksCache] = None,
        options: Optional[VerifyOptions] = None,
        fetcher: Optional[JwksFetcher] = None,
    ):
        self.jwks_url = jwks_url
        self.cache = cache if cache is not None else get_default_cache()
        self.options = options or VerifyOptions.from_settings(get_settings())
        self.fetcher = fetcher
        self.logger = get_logger("jwks_verifier.token_validator")

    @classmethod
    def from_settings(cls) -> "TokenValidator":
        settings = get_settings()
        if not settings.jwks_url:
            raise ValueError("JWKS_VERIFIER_JWKS_URL is not configured")
        return cls(
            settings.jwks_url,
            cache=JwksCache(ttl_seconds=settings.cache_ttl_seconds),
            options=VerifyOptions.from_settings(settings),
        )

    def verify_token(self, token: str) -> TokenVerificationResponse:
        """Verify a JWT token."""
        try:
            claims = self.extract_claims(token)
        except VerifyError as e:
            return TokenVerificationResponse(
                valid=False,
                error=e.message,
                code=e.code.value
            )

        return TokenVerificationResponse(
            valid=True,
            claims=claims.to_dict()
        )

    def extract_claims(self, token: str) -> Claims:
        """Extract claims from a valid token, raising on rejection."""
        # Remove Bearer prefix if present
        if token.startswith("Bearer "):
            token = token[7:].strip()

        return verify_with_cache(token, self.jwks_url, self.cache, self.options, self.fetcher)

    def clear_cache(self) -> None:
        """Drop the cached key set for this validator's location."""
        self.cache.invalidate(self.jwks_url)
        self.logger.info("JWKS cache cleared", location=self.jwks_url)
