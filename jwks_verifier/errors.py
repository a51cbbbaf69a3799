"""
Error taxonomy for token verification.

Every failure of the verification pipeline is raised as one of the
``VerifyError`` subclasses below. The set is closed and flat: callers can
switch on ``error.code`` without inspecting causes. Only transport failures
while fetching a key set carry an embedded detail message.
"""

from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel


class VerifyErrorCode(str, Enum):
    """Closed set of rejection reasons."""
    BAD_FORMAT = "BAD_FORMAT"
    BASE64 = "BASE64"
    JSON = "JSON"
    ALG = "ALG"
    KID = "KID"
    JWKS_HTTP = "JWKS_HTTP"
    JWKS_JSON = "JWKS_JSON"
    NO_KEY = "NO_KEY"
    SIGNATURE = "SIGNATURE"
    EXPIRED = "EXPIRED"
    NOT_YET_VALID = "NOT_YET_VALID"
    ISSUER = "ISSUER"
    AUDIENCE = "AUDIENCE"
    MISSING_SUB = "MISSING_SUB"


class ErrorResponse(BaseModel):
    """Serializable form of a rejection."""

    code: VerifyErrorCode
    message: str
    details: Dict[str, Any] = {}


class VerifyError(Exception):
    """Base exception for token verification failures."""

    code: VerifyErrorCode
    default_message: str = "token verification failed"

    def __init__(self, message: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        self.message = message or self.default_message
        self.details = details or {}
        super().__init__(self.message)

    def to_response(self) -> ErrorResponse:
        """Convert to error response."""
        return ErrorResponse(code=self.code, message=self.message, details=self.details)


class BadFormatError(VerifyError):
    code = VerifyErrorCode.BAD_FORMAT
    default_message = "bad token format"


class Base64DecodeError(VerifyError):
    code = VerifyErrorCode.BASE64
    default_message = "base64 decode failed"


class JsonDecodeError(VerifyError):
    code = VerifyErrorCode.JSON
    default_message = "json parse failed"


class AlgorithmError(VerifyError):
    code = VerifyErrorCode.ALG
    default_message = "alg not allowed (expected EdDSA)"


class KidError(VerifyError):
    code = VerifyErrorCode.KID
    default_message = "missing kid in JWT header"


class JwksHttpError(VerifyError):
    """Transport failure while fetching a key-set document."""

    code = VerifyErrorCode.JWKS_HTTP

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(f"jwks http error: {detail}", details={"detail": detail})


class JwksJsonError(VerifyError):
    code = VerifyErrorCode.JWKS_JSON
    default_message = "jwks parse error"


class NoKeyError(VerifyError):
    code = VerifyErrorCode.NO_KEY
    default_message = "no matching key for kid"


class SignatureError(VerifyError):
    code = VerifyErrorCode.SIGNATURE
    default_message = "invalid signature"


class ExpiredError(VerifyError):
    code = VerifyErrorCode.EXPIRED
    default_message = "claim 'exp' expired"


class NotYetValidError(VerifyError):
    code = VerifyErrorCode.NOT_YET_VALID
    default_message = "claim 'nbf' in future"


class IssuerError(VerifyError):
    code = VerifyErrorCode.ISSUER
    default_message = "issuer mismatch"


class AudienceError(VerifyError):
    code = VerifyErrorCode.AUDIENCE
    default_message = "audience mismatch"


class MissingSubError(VerifyError):
    code = VerifyErrorCode.MISSING_SUB
    default_message = "missing sub"
