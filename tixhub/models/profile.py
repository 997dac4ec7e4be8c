# tixhub/models/profile.py
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, computed_field, model_validator
from sqlmodel import SQLModel, Field


class Role(str, Enum):
    """
    Application roles an identity can assume.

    Values match the `app_role` marker written into signup metadata, so
    they must not change once accounts exist.
    """

    CLIENT = "Client"
    ORGANIZER = "Organizer"
    SUPER_ADMIN = "Super Admin"


class Identity(SQLModel):
    """
    The authenticated principal as known to Supabase Auth.

    `user_metadata` is the staging area for registration fields until the
    first login turns them into a profile row.
    """

    id: str
    email: str
    user_metadata: dict[str, Any] = Field(default_factory=dict)


class ClientProfile(SQLModel):
    """
    Row of the `customers` table: a ticket-buying client.

    Identity:
      - supabase_user_id: MUST match Supabase auth.users.id
    """

    model_config = ConfigDict(extra="ignore")

    id: int
    prefix: str = ""
    first_name: str
    last_name: str
    email: str
    phone: str = ""
    country_code: str = ""
    gender: str = ""
    birthday: str = ""
    id_number: str = ""
    created_at: datetime | None = None
    supabase_user_id: str | None = None


class OrganizerProfile(SQLModel):
    """
    Row of the `organizers` table: an event-hosting entity with billing
    details.
    """

    model_config = ConfigDict(extra="ignore")

    id: int
    organizer_name: str
    email: str
    phone: str = ""
    business_type: str = ""
    company_name: str = ""
    tax_id: str = ""
    billing_address: str = ""
    contact_person: str = ""
    invoice_email: str = ""
    maps_link: str | None = None
    additional_notes: str | None = None
    created_at: datetime | None = None
    supabase_user_id: str | None = None


class SuperAdminProfile(SQLModel):
    """
    Allowlist-derived profile. There is no table behind it, so `id` is
    always 0.
    """

    id: int = 0
    first_name: str = "Admin"
    last_name: str = "User"
    email: str


RoleData = ClientProfile | OrganizerProfile | SuperAdminProfile


class UserProfile(BaseModel):
    """
    Every role profile known for one identity.

    Invariants (checked on construction):
      - available_roles lists exactly the non-null profiles, no duplicates,
        in discovery order
      - available_roles is never empty
      - a super admin carries no client/organizer profile
    """

    identity_id: str
    email: str
    customer: ClientProfile | None = None
    organizer: OrganizerProfile | None = None
    super_admin: SuperAdminProfile | None = None
    available_roles: list[Role]

    @model_validator(mode="after")
    def check_roles(self) -> "UserProfile":
        present = {
            Role.CLIENT: self.customer,
            Role.ORGANIZER: self.organizer,
            Role.SUPER_ADMIN: self.super_admin,
        }
        if not self.available_roles:
            raise ValueError("available_roles cannot be empty")
        if len(set(self.available_roles)) != len(self.available_roles):
            raise ValueError("available_roles contains duplicates")
        expected = {role for role, data in present.items() if data is not None}
        if set(self.available_roles) != expected:
            raise ValueError("available_roles does not match loaded profiles")
        if self.super_admin is not None and len(self.available_roles) > 1:
            raise ValueError("super admin cannot hold other role profiles")
        return self

    def data_for(self, role: Role) -> RoleData | None:
        if role == Role.CLIENT:
            return self.customer
        if role == Role.ORGANIZER:
            return self.organizer
        return self.super_admin

    def with_profile(self, role: Role, data: ClientProfile | OrganizerProfile) -> "UserProfile":
        """Return a copy with `data` merged in for `role` (appended last)."""
        field = "customer" if role == Role.CLIENT else "organizer"
        roles = list(self.available_roles)
        if role not in roles:
            roles.append(role)
        fields = {
            "customer": self.customer,
            "organizer": self.organizer,
            "super_admin": self.super_admin,
        }
        fields[field] = data
        return UserProfile(
            identity_id=self.identity_id,
            email=self.email,
            available_roles=roles,
            **fields,
        )


class AuthUser(BaseModel):
    """
    What the rest of the application reads: the identity's profiles viewed
    under one current role.
    """

    current_role: Role
    profile: UserProfile

    @model_validator(mode="after")
    def check_current_role(self) -> "AuthUser":
        if self.current_role not in self.profile.available_roles:
            raise ValueError(
                f"current_role {self.current_role.value!r} is not available"
            )
        return self

    @computed_field  # type: ignore[prop-decorator]
    @property
    def data(self) -> RoleData:
        return self.profile.data_for(self.current_role)  # type: ignore[return-value]

    def as_role(self, role: Role) -> "AuthUser":
        return AuthUser(current_role=role, profile=self.profile)
