"""Tests for hash module."""

from hypothesis import given, strategies as st

from specforge.core.hash import Algorithm, digest, hash_fields, hash_string


def test_hash_string_xxhash():
    """Test xxhash string hashing."""
    result = hash_string("test", Algorithm.XXHASH64)
    assert len(result) == 16
    assert hash_string("test", Algorithm.XXHASH64) == result


def test_hash_string_sha256():
    """Test SHA256 string hashing."""
    result = hash_string("test", Algorithm.SHA256)
    assert len(result) == 64
    assert result == "9f86d081884c7d659a2feaa0c55ad015a3bf4f1b2b0b822cd15d6c15b0f00a08"


def test_hash_string_truncate():
    """Test hash truncation."""
    full = hash_string("test", Algorithm.SHA256)
    truncated = hash_string("test", Algorithm.SHA256, truncate=16)

    assert len(truncated) == 16
    assert full.startswith(truncated)


def test_hash_fields_order_sensitive():
    """Test multi-field hashing is deterministic and order-sensitive."""
    first = hash_fields("spec", "2.0.0", "options")

    assert first == hash_fields("spec", "2.0.0", "options")
    assert first != hash_fields("options", "2.0.0", "spec")


def test_hash_fields_separator():
    """Test field boundaries matter: ("ab", "c") differs from ("a", "bc")."""
    assert hash_fields("ab", "c") != hash_fields("a", "bc")


def test_digest_bytes():
    """Test raw byte digests match string hashing."""
    assert digest(b"test", Algorithm.SHA256) == hash_string("test", Algorithm.SHA256)


@given(st.text())
def test_hash_string_deterministic(text):
    """Property: same input always hashes the same."""
    assert hash_string(text) == hash_string(text)
