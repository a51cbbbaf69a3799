"""
Ed25519 bearer-token verification against remote JWKS documents.

Typical use::

    from jwks_verifier import VerifyOptions, verify

    claims = verify(token, "https://issuer.example/.well-known/jwks.json",
                    VerifyOptions().with_issuer("issuer").with_audience("api"))
"""

from .clock import current_time
from .config import VerifierSettings, get_settings
from .errors import (
    AlgorithmError,
    AudienceError,
    BadFormatError,
    Base64DecodeError,
    ErrorResponse,
    ExpiredError,
    IssuerError,
    JsonDecodeError,
    JwksHttpError,
    JwksJsonError,
    KidError,
    MissingSubError,
    NoKeyError,
    NotYetValidError,
    SignatureError,
    VerifyError,
    VerifyErrorCode,
)
from .jwks import (
    HttpJwksFetcher,
    Jwk,
    Jwks,
    JwksCache,
    JwksFetcher,
    StaticJwksFetcher,
    get_default_cache,
    reset_default_cache,
)
from .validation.claims import AudienceList, Claims, SingleAudience, VerifyOptions, validate_claims
from .validation.token_validator import (
    TokenValidator,
    TokenVerificationResponse,
    verify,
    verify_with_cache,
)

__all__ = [
    "AlgorithmError",
    "AudienceError",
    "AudienceList",
    "BadFormatError",
    "Base64DecodeError",
    "Claims",
    "ErrorResponse",
    "ExpiredError",
    "HttpJwksFetcher",
    "IssuerError",
    "JsonDecodeError",
    "Jwk",
    "Jwks",
    "JwksCache",
    "JwksFetcher",
    "JwksHttpError",
    "JwksJsonError",
    "KidError",
    "MissingSubError",
    "NoKeyError",
    "NotYetValidError",
    "SignatureError",
    "SingleAudience",
    "StaticJwksFetcher",
    "TokenValidator",
    "TokenVerificationResponse",
    "VerifierSettings",
    "VerifyError",
    "VerifyErrorCode",
    "VerifyOptions",
    "current_time",
    "get_default_cache",
    "get_settings",
    "reset_default_cache",
    "validate_claims",
    "verify",
    "verify_with_cache",
]
