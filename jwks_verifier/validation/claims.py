"""
Claim model and claim validation.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, StrictStr, field_validator, model_serializer

from ..clock import current_time
from ..config import VerifierSettings
from ..errors import (
    AudienceError,
    ExpiredError,
    IssuerError,
    MissingSubError,
    NotYetValidError,
)

DEFAULT_LEEWAY_SECONDS = 300


class SingleAudience(BaseModel):
    """``aud`` given as one string."""

    model_config = ConfigDict(frozen=True)

    value: StrictStr

    def matches(self, expected: str) -> bool:
        return self.value == expected

    @model_serializer
    def serialize_audience(self) -> str:
        return self.value


class AudienceList(BaseModel):
    """``aud`` given as a list of strings."""

    model_config = ConfigDict(frozen=True)

    values: Tuple[StrictStr, ...]

    def matches(self, expected: str) -> bool:
        return expected in self.values

    @model_serializer
    def serialize_audience(self) -> List[str]:
        return list(self.values)


Audience = Union[SingleAudience, AudienceList]


class Claims(BaseModel):
    """Typed claim set of a verified token.

    Registered claims are typed fields; every other claim is kept verbatim
    in :attr:`extra`.
    """

    model_config = ConfigDict(extra="allow", frozen=True, strict=True)

    sub: str
    iss: Optional[str] = None
    aud: Optional[Audience] = None
    exp: Optional[int] = None
    nbf: Optional[int] = None
    iat: Optional[int] = None
    jti: Optional[str] = None
    scope: Optional[str] = None

    @field_validator("aud", mode="before")
    @classmethod
    def tag_audience(cls, value: Any) -> Any:
        if value is None or isinstance(value, (SingleAudience, AudienceList)):
            return value
        if isinstance(value, str):
            return SingleAudience(value=value)
        if isinstance(value, list) and all(isinstance(item, str) for item in value):
            return AudienceList(values=tuple(value))
        raise ValueError("aud must be a string or a list of strings")

    @property
    def extra(self) -> Dict[str, Any]:
        """Claims outside the registered set."""
        return dict(self.model_extra or {})

    def to_dict(self) -> Dict[str, Any]:
        """Return the claims as a plain mapping, omitting absent registered claims."""
        data = self.model_dump()
        for name in type(self).model_fields:
            if data.get(name) is None:
                data.pop(name, None)
        return data


@dataclass(frozen=True)
class VerifyOptions:
    """Per-call claim policy."""

    leeway_seconds: int = DEFAULT_LEEWAY_SECONDS
    issuer: Optional[str] = None
    audience: Optional[str] = None
    now: Optional[int] = None

    @classmethod
    def from_settings(cls, settings: VerifierSettings) -> "VerifyOptions":
        return cls(
            leeway_seconds=settings.leeway_seconds,
            issuer=settings.expected_issuer,
            audience=settings.expected_audience,
        )

    def with_issuer(self, issuer: str) -> "VerifyOptions":
        return replace(self, issuer=issuer)

    def with_audience(self, audience: str) -> "VerifyOptions":
        return replace(self, audience=audience)

    def with_leeway(self, seconds: int) -> "VerifyOptions":
        return replace(self, leeway_seconds=seconds)

    def with_now(self, now: int) -> "VerifyOptions":
        return replace(self, now=now)

    def current_time(self) -> int:
        """The fixed ``now`` if set, otherwise the wall clock."""
        return self.now if self.now is not None else current_time()


def validate_claims(claims: Claims, options: VerifyOptions) -> None:
    """Check time-bound and identity claims against *options*.

    Checks run in a fixed order and the first failure is raised. A token is
    accepted only if every applicable check passes.

    Raises:
        MissingSubError, ExpiredError, NotYetValidError, IssuerError,
        AudienceError
    """
    now = options.current_time()
    leeway = options.leeway_seconds

    if not claims.sub:
        raise MissingSubError()
    if claims.exp is not None and now > claims.exp + leeway:
        raise ExpiredError()
    if claims.nbf is not None and now + leeway < claims.nbf:
        raise NotYetValidError()
    if claims.iat is not None and claims.iat > now + leeway:
        raise NotYetValidError("claim 'iat' in future")

    if options.issuer is not None and claims.iss != options.issuer:
        raise IssuerError()

    if options.audience is not None:
        if claims.aud is None or not claims.aud.matches(options.audience):
            raise AudienceError()
