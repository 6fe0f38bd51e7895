import base64
import os

from cryptography.exceptions import InvalidKey
from cryptography.hazmat.primitives.kdf.scrypt import Scrypt

SCHEME = "scrypt"


class PasswordHasher:
    """Salted scrypt password hashing.

    Hashes are stored as ``scrypt$n$r$p$salt$key`` (salt and key base64) so a
    stored value can be verified even after the cost parameters change.
    """

    def __init__(self, n=2 ** 14, r=8, p=1, salt_size=16, key_length=32):
        if n < 2 or n & (n - 1):
            raise ValueError("scrypt n must be a power of two greater than 1")
        self.n = n
        self.r = r
        self.p = p
        self.salt_size = salt_size
        self.key_length = key_length

    def _kdf(self, salt, n, r, p, length):
        return Scrypt(salt=salt, length=length, n=n, r=r, p=p)

    def hash(self, password: str) -> str:
        salt = os.urandom(self.salt_size)
        key = self._kdf(salt, self.n, self.r, self.p, self.key_length).derive(password.encode("utf-8"))
        return "$".join([
            SCHEME,
            str(self.n),
            str(self.r),
            str(self.p),
            base64.b64encode(salt).decode(),
            base64.b64encode(key).decode(),
        ])

    def verify(self, password: str, encoded: str) -> bool:
        try:
            scheme, n, r, p, salt_b64, key_b64 = encoded.split("$")
            if scheme != SCHEME:
                return False
            salt = base64.b64decode(salt_b64, validate=True)
            expected = base64.b64decode(key_b64, validate=True)
            kdf = self._kdf(salt, int(n), int(r), int(p), len(expected))
        except (ValueError, TypeError):
            return False
        try:
            # Scrypt.verify compares in constant time
            kdf.verify(password.encode("utf-8"), expected)
            return True
        except InvalidKey:
            return False
