# tests/test_passwords.py
from __future__ import annotations

import pytest

from crypto.passwords import PasswordHasher


def test_hash_verifies(fast_hasher: PasswordHasher) -> None:
    encoded = fast_hasher.hash("secret")
    assert fast_hasher.verify("secret", encoded)
    assert not fast_hasher.verify("Secret", encoded)


def test_hash_is_salted(fast_hasher: PasswordHasher) -> None:
    assert fast_hasher.hash("secret") != fast_hasher.hash("secret")


def test_hash_carries_its_parameters(fast_hasher: PasswordHasher) -> None:
    encoded = fast_hasher.hash("secret")
    scheme, n, r, p, _salt, _key = encoded.split("$")
    assert (scheme, n, r, p) == ("scrypt", "256", "8", "1")
    # a hasher with different cost settings still verifies old hashes
    assert PasswordHasher(n=2 ** 9).verify("secret", encoded)


@pytest.mark.parametrize("encoded", ["", "secret", "bcrypt$1$2$3$x$y", "scrypt$abc$8$1$AAAA$AAAA", "scrypt$256$8$1$!!$??"])
def test_verify_rejects_garbage(fast_hasher: PasswordHasher, encoded: str) -> None:
    assert not fast_hasher.verify("secret", encoded)


def test_rejects_invalid_cost() -> None:
    with pytest.raises(ValueError):
        PasswordHasher(n=1000)
