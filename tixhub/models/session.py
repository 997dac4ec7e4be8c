# tixhub/models/session.py
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from tixhub.models.profile import AuthUser


class Unresolved(BaseModel):
    """Startup: the bootstrapper has not finished checking for a session."""

    model_config = ConfigDict(frozen=True)

    status: Literal["unresolved"] = "unresolved"


class Anonymous(BaseModel):
    """No session exists (never logged in, logged out, or backend down)."""

    model_config = ConfigDict(frozen=True)

    status: Literal["anonymous"] = "anonymous"


class Unprovisioned(BaseModel):
    """
    A session exists but no role profile could be found or created for it.

    Kept apart from Anonymous so support/debug tooling can tell the two
    cases apart; no AuthUser is exposed for it.
    """

    model_config = ConfigDict(frozen=True)

    status: Literal["unprovisioned"] = "unprovisioned"
    identity_id: str
    email: str
    reason: str


class Authenticated(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: Literal["authenticated"] = "authenticated"
    user: AuthUser


AuthState = Annotated[
    Union[Unresolved, Anonymous, Unprovisioned, Authenticated],
    Field(discriminator="status"),
]
