"""
End-to-end verification flows.
"""

import json
import time
from concurrent.futures import ThreadPoolExecutor
from unittest.mock import MagicMock

import jwt
import pytest

from jwks_verifier import (
    AlgorithmError,
    AudienceError,
    Jwks,
    JwksCache,
    StaticJwksFetcher,
    TokenValidator,
    VerifyOptions,
    current_time,
    get_default_cache,
    verify,
    verify_with_cache,
)

from ..helpers import JWKS_URI, TestKey, TestTokenFactory, make_jwks


@pytest.fixture
def demo_key():
    return TestKey.generate(kid="demo")


@pytest.fixture
def demo_cache(demo_key):
    cache = JwksCache(ttl_seconds=3600)
    cache.put(JWKS_URI, Jwks.model_validate(make_jwks(demo_key)))
    return cache


@pytest.fixture
def demo_payload():
    now = current_time()
    return {"sub": "did:key:zDemo", "iss": "issuer", "aud": "example", "iat": now, "nbf": now, "exp": now + 600}


class TestDemoScenario:
    """Issuer publishes one key under kid 'demo'."""

    def test_round_trip(self, demo_key, demo_cache, demo_payload):
        """Test a freshly issued token verifies."""
        token = TestTokenFactory(key=demo_key).build(demo_payload)
        options = VerifyOptions().with_issuer("issuer").with_audience("example")

        claims = verify_with_cache(token, JWKS_URI, demo_cache, options)

        assert claims.sub == "did:key:zDemo"

    def test_different_audience(self, demo_key, demo_cache, demo_payload):
        """Test the same token under a different expected audience."""
        token = TestTokenFactory(key=demo_key).build(demo_payload)
        options = VerifyOptions().with_issuer("issuer").with_audience("other-service")

        with pytest.raises(AudienceError):
            verify_with_cache(token, JWKS_URI, demo_cache, options)

    def test_other_algorithm(self, demo_key, demo_cache, demo_payload):
        """Test a validly signed token advertising another alg."""
        token = TestTokenFactory(key=demo_key).build(demo_payload, header={"alg": "ES256", "kid": "demo"})

        with pytest.raises(AlgorithmError):
            verify_with_cache(token, JWKS_URI, demo_cache, VerifyOptions())


class TestThirdPartyIssuer:
    """Tokens minted by PyJWT verify unchanged."""

    def test_pyjwt_eddsa_token(self, demo_key, demo_cache, demo_payload):
        """Test PyJWT EdDSA output is accepted."""
        token = jwt.encode(demo_payload, demo_key.private_key, algorithm="EdDSA", headers={"kid": "demo"})

        claims = verify_with_cache(token, JWKS_URI, demo_cache, VerifyOptions().with_audience("example"))

        assert claims.sub == "did:key:zDemo"
        assert claims.aud.matches("example")


class TestDefaultCacheFlow:
    """Verification through the process-wide cache."""

    def test_verify_fetches_once(self, demo_key, demo_payload):
        """Test verify() stores the fetched key set in the default cache."""
        fetcher = MagicMock(return_value=json.dumps(make_jwks(demo_key)).encode())
        token = TestTokenFactory(key=demo_key).build(demo_payload)

        assert verify(token, JWKS_URI, fetcher=fetcher).sub == "did:key:zDemo"
        assert verify(token, JWKS_URI, fetcher=fetcher).sub == "did:key:zDemo"

        fetcher.assert_called_once_with(JWKS_URI)
        assert get_default_cache().get_fresh(JWKS_URI) is not None

    def test_validator_defaults_to_shared_cache(self, demo_key, demo_payload):
        """Test TokenValidator without a cache uses the default one."""
        get_default_cache().put(JWKS_URI, Jwks.model_validate(make_jwks(demo_key)))
        validator = TokenValidator(JWKS_URI, options=VerifyOptions())

        result = validator.verify_token(TestTokenFactory(key=demo_key).build(demo_payload))

        assert result.valid is True


class TestConcurrentVerification:
    """Many verifications sharing one cache."""

    def test_parallel_verifications(self, demo_payload):
        """Test parallel callers all succeed while sharing a cold cache."""
        keys = [TestKey.generate(kid=f"k{i}") for i in range(3)]
        fetcher = StaticJwksFetcher({JWKS_URI: make_jwks(*keys)})
        cache = JwksCache(ttl_seconds=3600)
        tokens = [TestTokenFactory(key=keys[i % 3]).build(demo_payload) for i in range(30)]

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(
                lambda token: verify_with_cache(token, JWKS_URI, cache, VerifyOptions(), fetcher),
                tokens,
            ))

        assert all(claims.sub == "did:key:zDemo" for claims in results)
        assert len(cache) == 1

    def test_wall_clock(self):
        """Test current_time tracks time.time()."""
        assert abs(current_time() - int(time.time())) <= 1
