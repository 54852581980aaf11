"""bcrypt password hasher."""

import bcrypt

from authid.adapter.error import PasswordHashError
from authid.domain.service.password import PasswordHasher

# bcrypt only looks at the first 72 bytes of a password
MAX_PASSWORD_BYTES = 72


class BcryptPasswordHasher(PasswordHasher):
    """PasswordHasher backed by bcrypt.

    A dummy hash with the configured cost is computed once so that checks
    against accounts without a credential cost the same as real ones.
    """

    def __init__(self, rounds: int = 12) -> None:
        """Initialize hasher.

        Args:
            rounds: bcrypt cost factor
        """
        self.rounds = rounds
        self._dummy_hash = bcrypt.hashpw(b"dummy-password", bcrypt.gensalt(rounds=rounds))

    def hash(self, password: str) -> str:
        """Hash a password with a fresh salt."""
        secret = password.encode()
        if len(secret) > MAX_PASSWORD_BYTES:
            raise ValueError(f"Password longer than {MAX_PASSWORD_BYTES} bytes")
        return bcrypt.hashpw(secret, bcrypt.gensalt(rounds=self.rounds)).decode()

    def verify(self, password: str, password_hash: str | None) -> bool:
        """Check a password; always does one bcrypt comparison.

        Raises:
            PasswordHashError: If the stored hash is malformed
        """
        secret = password.encode()
        too_long = len(secret) > MAX_PASSWORD_BYTES
        secret = secret[:MAX_PASSWORD_BYTES]

        if password_hash is None:
            # Security: always perform bcrypt comparison to prevent timing attacks.
            bcrypt.checkpw(secret, self._dummy_hash)
            return False

        try:
            matched = bcrypt.checkpw(secret, password_hash.encode())
        except ValueError as e:
            raise PasswordHashError("Stored password hash is invalid") from e
        return matched and not too_long
