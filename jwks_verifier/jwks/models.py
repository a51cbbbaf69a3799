"""
Key-set document model and key resolution.
"""

from __future__ import annotations

import json
from typing import List, Optional

from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PublicKey
from pydantic import BaseModel, ConfigDict, ValidationError

from ..codec import b64url_decode
from ..errors import JwksJsonError
from ..logging import get_logger

SUPPORTED_KTY = "OKP"
SUPPORTED_CRV = "Ed25519"

# Encodings of the small-order Ed25519 points, compared with the sign bit
# cleared: 0 (order 4), 1 (order 1), two points of order 8, p - 1 (order 2),
# and the non-canonical p and p + 1.
_SMALL_ORDER_POINTS = frozenset(bytes.fromhex(h) for h in (
    "0000000000000000000000000000000000000000000000000000000000000000",
    "0100000000000000000000000000000000000000000000000000000000000000",
    "26e8958fc2b227b045c3f489f2ef98f0d5dfac05d3c63339b13802886d53fc05",
    "c7176a703d4dd84fba3c0b760d10670f2a2053fa2c39ccc64ec7fd7792ac037a",
    "ecffffffffffffffffffffffffffffffffffffffffffffffffffffffffffff7f",
    "edffffffffffffffffffffffffffffffffffffffffffffffffffffffffffff7f",
    "eeffffffffffffffffffffffffffffffffffffffffffffffffffffffffffff7f",
))

logger = get_logger("jwks_verifier.jwks")


class Jwk(BaseModel):
    """A single public-key record of a key-set document."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    kty: str
    crv: Optional[str] = None
    x: Optional[str] = None
    kid: Optional[str] = None

    def is_supported(self) -> bool:
        """Whether this record belongs to the supported key family and curve."""
        return self.kty == SUPPORTED_KTY and self.crv == SUPPORTED_CRV

    def matches_kid(self, kid: str) -> bool:
        """Match on ``kid``; a record without a ``kid`` matches any."""
        return not self.kid or self.kid == kid

    def to_public_key(self) -> Ed25519PublicKey:
        """Build the verification key from ``x``.

        Raises:
            ValueError: If ``x`` is missing, not base64url, a small-order
                point, or not a valid Ed25519 public key.
        """
        if self.x is None:
            raise ValueError("JWK has no 'x' member")
        raw = b64url_decode(self.x)
        if _is_small_order(raw):
            raise ValueError("JWK 'x' is a small-order point")
        return Ed25519PublicKey.from_public_bytes(raw)


class Jwks(BaseModel):
    """Ordered collection of key records fetched from one location."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    keys: List[Jwk]


def parse_jwks(raw: bytes) -> Jwks:
    """Parse a key-set document.

    Raises:
        JwksJsonError: If *raw* is not JSON or does not have the
            ``{"keys": [{"kty": ...}, ...]}`` shape.
    """
    try:
        return Jwks.model_validate(json.loads(raw))
    except (ValueError, ValidationError) as exc:
        raise JwksJsonError() from exc


def resolve_key(jwks: Jwks, kid: str) -> Optional[Ed25519PublicKey]:
    """Return the first usable key for *kid* in document order, or ``None``."""
    for jwk in jwks.keys:
        if not jwk.is_supported() or not jwk.matches_kid(kid):
            continue
        try:
            return jwk.to_public_key()
        except ValueError as exc:
            logger.debug("Skipping unusable JWK", kid=jwk.kid, error=str(exc))
            continue
    return None


def _is_small_order(raw: bytes) -> bool:
    if len(raw) != 32:
        return False
    return raw[:31] + bytes([raw[31] & 0x7F]) in _SMALL_ORDER_POINTS
