from storage.credential_store import CredentialStore, SqliteUserBackend, UserBackend

__all__ = ["CredentialStore", "SqliteUserBackend", "UserBackend"]
