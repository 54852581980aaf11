"""Password hashing adapters."""

from .bcrypt import BcryptPasswordHasher

__all__ = ["BcryptPasswordHasher"]
