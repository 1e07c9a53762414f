"""Domain exceptions for the subsites bounded context.

These exceptions represent domain-level errors that can occur during
repository operations. They should be caught and handled by the
application and presentation layers.
"""


class GroupNotFoundError(Exception):
    """Raised when a group cannot be found.

    Scoped lookups report hidden groups the same way as missing ones.
    """

    pass


class UnauthorizedError(Exception):
    """Raised when a caller lacks permission to perform an operation.

    The presentation layer should return HTTP 403 without exposing
    internal details.
    """

    pass


class UnsavedGroupError(Exception):
    """Raised when an operation needs a persisted group identity.

    Subsite links reference the group's ID, so they can only be written
    after the group has been inserted.
    """

    pass
