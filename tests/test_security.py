"""Tests for shared-secret and hashing helpers."""

from brandlens.utils.security import hash_url, verify_bearer_secret


def test_verify_bearer_secret():
    assert verify_bearer_secret("s3cret", "s3cret") is True
    assert verify_bearer_secret("wrong", "s3cret") is False
    assert verify_bearer_secret(None, "s3cret") is False
    assert verify_bearer_secret("s3cret", None) is False
    assert verify_bearer_secret("", "") is False


def test_hash_url():
    digest = hash_url("https://acme.io/")

    assert len(digest) == 16
    assert digest == hash_url("https://acme.io/")
    assert digest != hash_url("https://acme.io")
    assert all(c in "0123456789abcdef" for c in digest)
