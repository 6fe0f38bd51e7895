from crypto.passwords import PasswordHasher

__all__ = ["PasswordHasher"]
