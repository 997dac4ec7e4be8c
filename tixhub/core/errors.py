# tixhub/core/errors.py
from typing import Literal


class IdentityError(Exception):
    """
    Failure reported by the backend auth provider.

    Examples: invalid credentials, duplicate email, weak password,
    unconfirmed email. The message is the backend's own text and is
    passed to callers unchanged.
    """

    def __init__(
        self,
        message: str,
        status: int | None = None,
        code: str | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.status = status
        self.code = code


class ProfileStorageError(Exception):
    """Select or insert on a profile table failed."""


RoleMutationCode = Literal[
    "not_authenticated",
    "role_unavailable",
    "role_exists",
    "role_not_addable",
    "storage_failed",
]


class RoleMutationError(Exception):
    """
    Typed failure of switch_role / add_role.

    Returned (not raised) by the RoleSessionManager so callers can render
    `message` next to the form that triggered it.
    """

    def __init__(self, code: RoleMutationCode, message: str):
        super().__init__(message)
        self.code = code
        self.message = message
