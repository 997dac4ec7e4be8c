# tixhub/repositories/role_preference.py
import json
import logging
from pathlib import Path
from typing import Protocol

from tixhub.models.profile import Role

logger = logging.getLogger(__name__)

PREFERENCE_KEY = "preferred_role"


class RolePreferenceStore(Protocol):
    """The single persisted key remembering the last-chosen role."""

    def get(self) -> Role | None: ...

    def set(self, role: Role) -> None: ...


def _parse(raw: object) -> Role | None:
    try:
        return Role(raw)
    except ValueError:
        return None


class FileRolePreferenceStore:
    """
    Keeps the preference in a small JSON file: {"preferred_role": "Organizer"}.

    A missing, unreadable or unknown value reads back as None. No expiry.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def get(self) -> Role | None:
        if not self.path.exists():
            return None
        try:
            payload = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("Could not read role preference %s: %s", self.path, exc)
            return None
        if not isinstance(payload, dict):
            return None
        return _parse(payload.get(PREFERENCE_KEY))

    def set(self, role: Role) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(
            json.dumps({PREFERENCE_KEY: role.value}), encoding="utf-8"
        )


class InMemoryRolePreferenceStore:
    """Non-persistent store for tests and demo mode."""

    def __init__(self, role: Role | None = None):
        self.role = role
        self.writes = 0

    def get(self) -> Role | None:
        return self.role

    def set(self, role: Role) -> None:
        self.role = role
        self.writes += 1
