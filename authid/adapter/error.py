"""Infrastructure layer errors."""


class AdapterError(Exception):
    """Base infrastructure error."""

    pass


class PasswordHashError(AdapterError):
    """A stored password hash could not be read."""

    pass
