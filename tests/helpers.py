"""
Test helpers for building Ed25519 key sets and signed tokens.
"""

import json
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey
from cryptography.hazmat.primitives.serialization import Encoding, PublicFormat

from jwks_verifier.codec import b64url_encode

JWKS_URI = "mem://jwks"


@dataclass
class TestKey:
    """Ed25519 key pair published under ``kid``."""
    __test__ = False

    private_key: Ed25519PrivateKey
    kid: Optional[str] = "test"

    @classmethod
    def generate(cls, kid: Optional[str] = "test") -> "TestKey":
        return cls(private_key=Ed25519PrivateKey.generate(), kid=kid)

    @property
    def x(self) -> str:
        raw = self.private_key.public_key().public_bytes(Encoding.Raw, PublicFormat.Raw)
        return b64url_encode(raw)

    def to_jwk(self) -> Dict[str, Any]:
        jwk: Dict[str, Any] = {"kty": "OKP", "crv": "Ed25519", "x": self.x}
        if self.kid is not None:
            jwk["kid"] = self.kid
        return jwk


@dataclass
class TestTokenFactory:
    """Factory for signed compact tokens."""
    __test__ = False

    key: TestKey
    header: Dict[str, Any] = field(default_factory=dict)

    def sign_segments(self, header_segment: str, payload_segment: str) -> str:
        signing_input = f"{header_segment}.{payload_segment}"
        signature = self.key.private_key.sign(signing_input.encode("ascii"))
        return f"{signing_input}.{b64url_encode(signature)}"

    def build(self, payload: Any, header: Optional[Dict[str, Any]] = None) -> str:
        if header is None:
            header = {"alg": "EdDSA", "kid": self.key.kid, "typ": "JWT", **self.header}
        header_segment = b64url_encode(json.dumps(header).encode("utf-8"))
        payload_segment = b64url_encode(json.dumps(payload).encode("utf-8"))
        return self.sign_segments(header_segment, payload_segment)


def make_jwks(*keys: TestKey, extra: Optional[List[Dict[str, Any]]] = None) -> Dict[str, Any]:
    """Build a key-set document from test keys plus arbitrary raw records."""
    return {"keys": list(extra or []) + [key.to_jwk() for key in keys]}


def standard_claims(now: Optional[int] = None, **overrides: Any) -> Dict[str, Any]:
    """Claims that satisfy the default policy at *now*."""
    now = int(time.time()) if now is None else now
    claims = {
        "sub": "did:key:zTest",
        "iss": "https://id.example",
        "aud": "demo",
        "iat": now,
        "nbf": now - 5,
        "exp": now + 3600,
    }
    claims.update(overrides)
    return claims


class FakeClock:
    """Settable clock for cache freshness tests."""

    def __init__(self, now: int = 1_700_000_000):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: int) -> None:
        self.now += seconds
