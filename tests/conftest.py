"""
Shared fixtures.
"""

import pytest

from jwks_verifier import JwksCache, Jwks, StaticJwksFetcher, reset_default_cache

from .helpers import JWKS_URI, FakeClock, TestKey, TestTokenFactory, make_jwks


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def signing_key():
    return TestKey.generate(kid="test")


@pytest.fixture
def token_factory(signing_key):
    return TestTokenFactory(key=signing_key)


@pytest.fixture
def jwks_document(signing_key):
    return make_jwks(signing_key)


@pytest.fixture
def cache(clock, jwks_document):
    """Cache pre-seeded with the signing key under JWKS_URI."""
    cache = JwksCache(ttl_seconds=3600, clock=clock)
    cache.put(JWKS_URI, Jwks.model_validate(jwks_document))
    return cache


@pytest.fixture
def fetcher(jwks_document):
    return StaticJwksFetcher({JWKS_URI: jwks_document})


@pytest.fixture(autouse=True)
def _reset_default_cache():
    reset_default_cache()
    yield
    reset_default_cache()
