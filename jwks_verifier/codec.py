"""
Compact token codec.

Splits a ``header.payload.signature`` token into its segments, decodes each
one and keeps the original header and payload segment text so the signing
input can be checked byte for byte. The signing input is never rebuilt by
re-serializing the parsed header or payload.
"""

from __future__ import annotations

import base64
import binascii
import json
import re
from dataclasses import dataclass
from typing import Any, Dict

from .errors import BadFormatError, Base64DecodeError, JsonDecodeError, SignatureError

# Raw Ed25519 signature length in bytes.
ED25519_SIGNATURE_LENGTH = 64

_B64URL_ALPHABET = re.compile(r"^[A-Za-z0-9_-]*$")


@dataclass(frozen=True)
class DecodedToken:
    """Decoded parts of a compact token.

    Attributes:
        header:         Parsed JOSE header.
        payload:        Parsed payload, not yet mapped onto claims.
        signature:      Raw signature bytes.
        signing_input:  Original ``header.payload`` segment text as bytes.
    """

    header: Dict[str, Any]
    payload: Any
    signature: bytes
    signing_input: bytes


def b64url_encode(data: bytes) -> str:
    """Encode bytes as URL-safe base64 without padding."""
    return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")


def b64url_decode(segment: str) -> bytes:
    """Decode URL-safe, unpadded base64.

    Padding characters, the standard ``+``/``/`` alphabet and non-zero
    trailing bits are rejected.

    Raises:
        ValueError: If *segment* is not valid unpadded base64url.
    """
    if not _B64URL_ALPHABET.match(segment):
        raise ValueError("invalid base64url alphabet")
    if len(segment) % 4 == 1:
        raise ValueError("invalid base64url length")
    padded = segment + "=" * (-len(segment) % 4)
    try:
        decoded = base64.urlsafe_b64decode(padded)
    except binascii.Error as exc:
        raise ValueError(str(exc)) from exc
    # Unused trailing bits must be zero.
    if b64url_encode(decoded) != segment:
        raise ValueError("non-canonical base64url encoding")
    return decoded


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-standard JSON constant {name}")


def _decode_text_segment(segment: str) -> str:
    try:
        return b64url_decode(segment).decode("utf-8")
    except ValueError as exc:  # UnicodeDecodeError is a ValueError
        raise Base64DecodeError() from exc


def split_and_decode(token: str) -> DecodedToken:
    """Split *token* and decode its three segments.

    Raises:
        BadFormatError:     Not exactly three dot-separated segments.
        Base64DecodeError:  A segment is not base64url, or header/payload
                            bytes are not UTF-8.
        SignatureError:     The signature has the wrong length.
        JsonDecodeError:    Header or payload is not JSON, or the header is
                            not a JSON object.
    """
    parts = token.split(".")
    if len(parts) != 3:
        raise BadFormatError()
    header_segment, payload_segment, signature_segment = parts

    header_text = _decode_text_segment(header_segment)
    payload_text = _decode_text_segment(payload_segment)
    try:
        signature = b64url_decode(signature_segment)
    except ValueError as exc:
        raise Base64DecodeError() from exc
    if len(signature) != ED25519_SIGNATURE_LENGTH:
        raise SignatureError()

    try:
        header = json.loads(header_text, parse_constant=_reject_constant)
        payload = json.loads(payload_text, parse_constant=_reject_constant)
    except ValueError as exc:
        raise JsonDecodeError() from exc
    if not isinstance(header, dict):
        raise JsonDecodeError("JWT header is not a JSON object")

    signing_input = f"{header_segment}.{payload_segment}".encode("ascii")
    return DecodedToken(
        header=header,
        payload=payload,
        signature=signature,
        signing_input=signing_input,
    )
