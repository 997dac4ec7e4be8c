# tixhub/schemas/auth.py
from typing import Any, Literal, Union

from pydantic import EmailStr, ConfigDict, field_validator
from sqlmodel import SQLModel, Field

from tixhub.models.profile import AuthUser, Role
from tixhub.models.session import AuthState, Authenticated, Unprovisioned

ModalTab = Literal["login", "register"]


def _strip_required(v: str, field: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError(f"{field} cannot be empty")
    return v


class LoginRequest(SQLModel):
    model_config = ConfigDict(extra="forbid")

    email: EmailStr
    password: str


class ClientProfileCreate(SQLModel):
    """
    Fields needed to create a `customers` row.

    Used as the add-role payload and, with email/password, as the client
    registration form (staged into signup metadata until first login).
    """

    model_config = ConfigDict(extra="forbid")

    prefix: str = ""
    first_name: str = Field(max_length=100)
    last_name: str = Field(max_length=100)
    gender: str = ""
    birthday: str = ""
    id_number: str = ""
    phone: str = ""
    country_code: str = ""

    @field_validator("first_name", "last_name")
    @classmethod
    def normalize_name(cls, v: str, info) -> str:
        return _strip_required(v, info.field_name)

    def to_row(self, identity_id: str, email: str) -> dict[str, Any]:
        """Insert payload tagged with the owning identity."""
        return {
            "first_name": self.first_name,
            "last_name": self.last_name,
            "email": email,
            "supabase_user_id": identity_id,
            "prefix": self.prefix,
            "country_code": self.country_code,
            "gender": self.gender,
            "birthday": self.birthday,
            "id_number": self.id_number,
            "phone": self.phone,
        }


class OrganizerProfileCreate(SQLModel):
    """Fields needed to create an `organizers` row."""

    model_config = ConfigDict(extra="forbid")

    organizer_name: str = Field(max_length=200)
    phone: str = ""
    business_type: str = ""
    company_name: str = ""
    tax_id: str = ""
    billing_address: str = ""
    contact_person: str = ""
    invoice_email: str = ""
    maps_link: str | None = None
    additional_notes: str | None = None

    @field_validator("organizer_name")
    @classmethod
    def normalize_name(cls, v: str) -> str:
        return _strip_required(v, "organizer_name")

    def to_row(self, identity_id: str, email: str) -> dict[str, Any]:
        return {
            "organizer_name": self.organizer_name,
            "email": email,
            "supabase_user_id": identity_id,
            "phone": self.phone,
            "business_type": self.business_type,
            "maps_link": self.maps_link or None,
            "company_name": self.company_name,
            "tax_id": self.tax_id,
            "billing_address": self.billing_address,
            "contact_person": self.contact_person,
            "invoice_email": self.invoice_email,
            "additional_notes": self.additional_notes or None,
        }


ProfileCreate = ClientProfileCreate | OrganizerProfileCreate

# Every metadata key registration may stage; all are purged after the
# first profile is created.
CLIENT_STAGED_KEYS = tuple(ClientProfileCreate.model_fields)
ORGANIZER_STAGED_KEYS = tuple(OrganizerProfileCreate.model_fields)
STAGED_PROFILE_KEYS = tuple(dict.fromkeys(CLIENT_STAGED_KEYS + ORGANIZER_STAGED_KEYS))


# ----- HTTP payloads -----


class ClientRegistration(ClientProfileCreate):
    role: Literal["Client"] = "Client"
    email: EmailStr
    password: str


class OrganizerRegistration(OrganizerProfileCreate):
    role: Literal["Organizer"] = "Organizer"
    email: EmailStr
    password: str


# Each member pins `role` to a Literal, so the union is unambiguous
RegisterRequest = Union[ClientRegistration, OrganizerRegistration]


class AddClientRoleRequest(ClientProfileCreate):
    role: Literal["Client"] = "Client"


class AddOrganizerRoleRequest(OrganizerProfileCreate):
    role: Literal["Organizer"] = "Organizer"


AddRoleRequest = Union[AddClientRoleRequest, AddOrganizerRoleRequest]


class SwitchRoleRequest(SQLModel):
    model_config = ConfigDict(extra="forbid")

    role: Role


class RegisterRead(SQLModel):
    needs_confirmation: bool


class SessionRead(SQLModel):
    """
    Response schema for the current session.

    `user` is null unless status == "authenticated".
    """

    status: Literal["unresolved", "anonymous", "unprovisioned", "authenticated"]
    user: AuthUser | None = None
    identity_id: str | None = None
    reason: str | None = None

    @classmethod
    def from_state(cls, state: AuthState) -> "SessionRead":
        if isinstance(state, Authenticated):
            return cls(
                status=state.status,
                user=state.user,
                identity_id=state.user.profile.identity_id,
            )
        if isinstance(state, Unprovisioned):
            return cls(
                status=state.status,
                identity_id=state.identity_id,
                reason=state.reason,
            )
        return cls(status=state.status)


class AuthModalRead(SQLModel):
    is_open: bool
    tab: ModalTab
    role: Role


class AuthModalOpen(SQLModel):
    model_config = ConfigDict(extra="forbid")

    tab: ModalTab = "login"
    role: Role = Role.CLIENT


class AuthModalUpdate(SQLModel):
    """Partial update: switch the tab or the preselected role."""

    model_config = ConfigDict(extra="forbid")

    tab: ModalTab | None = None
    role: Role | None = None
