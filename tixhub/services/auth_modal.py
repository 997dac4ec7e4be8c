# tixhub/services/auth_modal.py
from tixhub.models.profile import Role
from tixhub.schemas.auth import AuthModalRead, ModalTab


class AuthModalState:
    """Open/closed flag, active tab and preselected role of the login/register modal."""

    def __init__(self):
        self.is_open = False
        self.tab: ModalTab = "login"
        self.role = Role.CLIENT

    def open(self, tab: ModalTab = "login", role: Role = Role.CLIENT) -> None:
        self.tab = tab
        self.role = role
        self.is_open = True

    def close(self) -> None:
        self.is_open = False

    def set_tab(self, tab: ModalTab) -> None:
        self.tab = tab

    def set_role(self, role: Role) -> None:
        self.role = role

    def read(self) -> AuthModalRead:
        return AuthModalRead(is_open=self.is_open, tab=self.tab, role=self.role)
