"""Unit tests for profile and session models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from tixhub.models.profile import (
    AuthUser,
    ClientProfile,
    OrganizerProfile,
    Role,
    SuperAdminProfile,
    UserProfile,
)
from tixhub.models.session import Anonymous, Authenticated, Unresolved


def _customer() -> ClientProfile:
    return ClientProfile(id=1, first_name="Alex", last_name="Doe", email="alex@example.com")


def _organizer() -> OrganizerProfile:
    return OrganizerProfile(id=7, organizer_name="Web Events", email="alex@example.com")


class TestUserProfile:
    """Tests for UserProfile invariants."""

    def test_roles_must_not_be_empty(self) -> None:
        with pytest.raises(ValidationError):
            UserProfile(identity_id="u1", email="a@b.co", available_roles=[])

    def test_roles_must_match_loaded_profiles(self) -> None:
        with pytest.raises(ValidationError):
            UserProfile(
                identity_id="u1",
                email="a@b.co",
                customer=_customer(),
                available_roles=[Role.CLIENT, Role.ORGANIZER],
            )

    def test_roles_must_not_repeat(self) -> None:
        with pytest.raises(ValidationError):
            UserProfile(
                identity_id="u1",
                email="a@b.co",
                customer=_customer(),
                available_roles=[Role.CLIENT, Role.CLIENT],
            )

    def test_super_admin_is_exclusive(self) -> None:
        with pytest.raises(ValidationError):
            UserProfile(
                identity_id="u1",
                email="a@b.co",
                customer=_customer(),
                super_admin=SuperAdminProfile(email="a@b.co"),
                available_roles=[Role.CLIENT, Role.SUPER_ADMIN],
            )

    def test_with_profile_appends_role_once(self) -> None:
        profile = UserProfile(
            identity_id="u1",
            email="a@b.co",
            customer=_customer(),
            available_roles=[Role.CLIENT],
        )

        merged = profile.with_profile(Role.ORGANIZER, _organizer())
        again = merged.with_profile(Role.ORGANIZER, _organizer())

        assert merged.available_roles == [Role.CLIENT, Role.ORGANIZER]
        assert again.available_roles == [Role.CLIENT, Role.ORGANIZER]
        assert merged.customer == profile.customer
        assert profile.available_roles == [Role.CLIENT]


class TestAuthUser:
    """Tests for AuthUser."""

    @pytest.fixture
    def profile(self) -> UserProfile:
        return UserProfile(
            identity_id="u1",
            email="alex@example.com",
            customer=_customer(),
            organizer=_organizer(),
            available_roles=[Role.CLIENT, Role.ORGANIZER],
        )

    def test_current_role_must_be_available(self) -> None:
        profile = UserProfile(
            identity_id="u1",
            email="a@b.co",
            customer=_customer(),
            available_roles=[Role.CLIENT],
        )
        with pytest.raises(ValidationError):
            AuthUser(current_role=Role.ORGANIZER, profile=profile)

    def test_data_follows_current_role(self, profile: UserProfile) -> None:
        user = AuthUser(current_role=Role.CLIENT, profile=profile)

        assert user.data == profile.customer
        assert user.as_role(Role.ORGANIZER).data == profile.organizer

    def test_data_is_serialized(self, profile: UserProfile) -> None:
        dumped = AuthUser(current_role=Role.ORGANIZER, profile=profile).model_dump(mode="json")

        assert dumped["current_role"] == "Organizer"
        assert dumped["data"]["organizer_name"] == "Web Events"
        assert dumped["profile"]["available_roles"] == ["Client", "Organizer"]


class TestSessionStates:
    """Tests for the AuthState union members."""

    def test_states_are_frozen(self) -> None:
        with pytest.raises(ValidationError):
            Anonymous().status = "authenticated"

    def test_status_tags(self) -> None:
        assert Unresolved().status == "unresolved"
        assert Anonymous().status == "anonymous"

    def test_authenticated_requires_user(self) -> None:
        with pytest.raises(ValidationError):
            Authenticated()
