"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import pytest

from tixhub.core.config import Settings
from tixhub.repositories.memory import InMemoryIdentityGateway, InMemoryProfileRepository
from tixhub.repositories.role_preference import InMemoryRolePreferenceStore
from tixhub.schemas.auth import ClientProfileCreate, OrganizerProfileCreate
from tixhub.services.auth_backend import AuthBackend, build_auth_backend
from tixhub.services.profile_resolver import ProfileResolver

ADMIN_EMAIL = "admin@tixhub.io"
PASSWORD = "s3cret-pass"


def client_fields(**overrides) -> ClientProfileCreate:
    data = {
        "prefix": "Ms.",
        "first_name": "Alex",
        "last_name": "Doe",
        "gender": "Female",
        "birthday": "1990-04-02",
        "id_number": "1101700203451",
        "phone": "0812345678",
        "country_code": "TH",
    }
    data.update(overrides)
    return ClientProfileCreate(**data)


def organizer_fields(**overrides) -> OrganizerProfileCreate:
    data = {
        "organizer_name": "Web Events",
        "phone": "0898765432",
        "business_type": "Conference",
        "company_name": "Web Events Co., Ltd.",
        "tax_id": "0105551234567",
        "billing_address": "99 Sukhumvit Rd, Bangkok",
        "contact_person": "Ben Carter",
        "invoice_email": "billing@webevents.com",
    }
    data.update(overrides)
    return OrganizerProfileCreate(**data)


@pytest.fixture
def settings() -> Settings:
    """Return settings with a super admin configured and no Supabase."""
    return Settings(
        _env_file=None,
        SUPABASE_URL=None,
        SUPABASE_KEY=None,
        SUPER_ADMIN_EMAIL=ADMIN_EMAIL,
    )


@pytest.fixture
def gateway() -> InMemoryIdentityGateway:
    return InMemoryIdentityGateway()


@pytest.fixture
def repo() -> InMemoryProfileRepository:
    return InMemoryProfileRepository()


@pytest.fixture
def preferences() -> InMemoryRolePreferenceStore:
    return InMemoryRolePreferenceStore()


@pytest.fixture
def resolver(repo, gateway, preferences) -> ProfileResolver:
    return ProfileResolver(repo, gateway, preferences, super_admin_email=ADMIN_EMAIL)


@pytest.fixture
def backend(gateway, repo, preferences, settings) -> AuthBackend:
    return build_auth_backend(gateway, repo, preferences, settings)


@pytest.fixture
def store(backend):
    return backend.store


@pytest.fixture
def manager(backend):
    return backend.manager


@pytest.fixture
def bootstrapper(backend):
    return backend.bootstrapper


async def seed_customer(repo: InMemoryProfileRepository, identity_id: str, email: str, **overrides) -> None:
    """Store a customers row without counting it as traffic."""
    await repo.insert_customer(client_fields(**overrides).to_row(identity_id, email))
    repo.insert_calls = 0


async def seed_organizer(repo: InMemoryProfileRepository, identity_id: str, email: str, **overrides) -> None:
    await repo.insert_organizer(organizer_fields(**overrides).to_row(identity_id, email))
    repo.insert_calls = 0
