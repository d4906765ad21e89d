import pytest

from runas.authoring import MockUserFactory, WithMockUser, with_mock_user
from runas.domain.auth.model import Principal
from runas.domain.shared.error import DeclarationError


class TestWithMockUser:
    def test_defaults(self) -> None:
        assert with_mock_user() == WithMockUser(
            username="user",
            roles=("USER",),
            authorities=(),
            password="password",
        )

    def test_lists_are_stored_as_tuples(self) -> None:
        marker = with_mock_user(roles=["ADMIN", "USER"])

        assert marker.roles == ("ADMIN", "USER")
        assert hash(marker) == hash(with_mock_user(roles=("ADMIN", "USER")))

    def test_roles_are_prefixed(self) -> None:
        marker = with_mock_user(roles=["ADMIN"])

        assert marker.granted_authorities() == frozenset({"ROLE_ADMIN"})

    def test_authorities_replace_roles(self) -> None:
        marker = with_mock_user(authorities=["accounts:read"])

        assert marker.granted_authorities() == frozenset({"accounts:read"})

    def test_prefixed_role_rejected(self) -> None:
        with pytest.raises(DeclarationError, match="cannot start with ROLE_"):
            with_mock_user(roles=["ROLE_ADMIN"])

    def test_roles_with_authorities_rejected(self) -> None:
        with pytest.raises(DeclarationError, match="roles with authorities"):
            with_mock_user(roles=["ADMIN"], authorities=["accounts:read"])

    def test_empty_username_rejected(self) -> None:
        with pytest.raises(DeclarationError):
            with_mock_user("")


class TestMockUserFactory:
    def test_creates_context_for_declared_user(self) -> None:
        context = MockUserFactory().create_security_context(with_mock_user("alice", roles=["ADMIN"]))

        assert context.principal == Principal(
            username="alice",
            password="password",
            authorities=frozenset({"ROLE_ADMIN"}),
        )
        assert context.authentication is not None
        assert context.authentication.credentials == "password"
