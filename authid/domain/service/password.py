"""Password hashing capability."""


class PasswordHasher:
    """Password hashing interface.

    Hashing primitives are supplied by an adapter; the engine only stores
    and compares the resulting hashes.
    """

    def hash(self, password: str) -> str:
        """Hash a password.

        Args:
            password: Plain-text password

        Returns:
            Encoded hash suitable for ``credential_hash``
        """
        raise NotImplementedError

    def verify(self, password: str, password_hash: str | None) -> bool:
        """Check a password against a hash.

        Must do comparable work when ``password_hash`` is None, so that
        callers can check unknown accounts without a timing difference.

        Args:
            password: Plain-text password
            password_hash: Stored hash, or None when there is no credential

        Returns:
            True only when the hash exists and matches
        """
        raise NotImplementedError
