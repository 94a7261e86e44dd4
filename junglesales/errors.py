"""Errors raised by the store adapter and the repositories."""


class StoreError(Exception):
    """The underlying store failed (connection, constraint or query error)."""


class DuplicateName(StoreError):
    """A company with this name already exists."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"company name already taken: {name!r}")


class DuplicateEmail(StoreError):
    """A user with this email is already registered."""

    def __init__(self, email: str):
        self.email = email
        super().__init__(f"email already registered: {email!r}")


class NotFound(KeyError):
    """The requested record does not exist."""

    def __init__(self, key):
        self.key = key
        super().__init__(key)

    def __str__(self) -> str:
        return f"not found: {self.key!r}"
