"""Plugin behaviour checked through isolated pytest runs."""

import pytest

CONFTEST = 'pytest_plugins = ["runas.pytest_plugin"]\n'

EXPANDED = """
from runas import holder, with_mock_user


@with_mock_user("alice")
class TestAccounts:
    @with_mock_user("bob")
    def test_list(self):
        assert holder.current_principal() is not None

    def test_close(self):
        assert holder.current_principal().username == "alice"
"""

SHIFTING_FACTORY = """
from dataclasses import dataclass

from runas.domain.auth.model import Principal, SecurityContext
from runas.domain.shared.model.declaration import IdentityMarker


class ShiftingFactory:
    calls = 0

    def create_security_context(self, declaration):
        ShiftingFactory.calls += 1
        return SecurityContext.for_principal(Principal(username=f"user{ShiftingFactory.calls}"))


@dataclass(frozen=True)
class AsShifting(IdentityMarker, factory=ShiftingFactory):
    pass


class TestShifting:
    @AsShifting()
    def test_one(self):
        pass
"""


@pytest.fixture
def accounts(pytester: pytest.Pytester) -> pytest.Pytester:
    pytester.makeconftest(CONFTEST)
    pytester.makepyfile(test_accounts=EXPANDED)
    return pytester


class TestExpansion:
    def test_one_case_per_identity(self, accounts: pytest.Pytester) -> None:
        result = accounts.runpytest("-v")

        result.assert_outcomes(passed=3)
        result.stdout.fnmatch_lines(
            [
                "*test_list?WithMockUser(username='alice'*PASSED*",
                "*test_list?WithMockUser(username='bob'*PASSED*",
                "*test_close?WithMockUser(username='alice'*PASSED*",
            ]
        )

    def test_undecorated_tests_run_once(self, pytester: pytest.Pytester) -> None:
        pytester.makeconftest(CONFTEST)
        pytester.makepyfile(
            """
            from runas import holder

            class TestPlain:
                def test_one(self):
                    assert holder.peek_context() is None

            def test_two():
                assert holder.peek_context() is None
            """
        )

        pytester.runpytest().assert_outcomes(passed=2)

    def test_module_level_functions_are_verified(self, pytester: pytest.Pytester) -> None:
        pytester.makeconftest(CONFTEST)
        pytester.makepyfile(
            """
            from runas import holder, with_mock_user

            @with_mock_user("alice")
            @with_mock_user("bob")
            def test_one():
                assert holder.current_principal() is not None
            """
        )

        pytester.runpytest().assert_outcomes(passed=2)


class TestVerification:
    def test_wrong_principal_is_reported(self, pytester: pytest.Pytester) -> None:
        pytester.makeconftest(CONFTEST)
        pytester.makepyfile(test_shifting=SHIFTING_FACTORY)

        result = pytester.runpytest()

        result.assert_outcomes(errors=1)
        result.stdout.fnmatch_lines(["*Invalid principal*user1*user2*"])

    def test_verification_can_be_disabled(
        self, pytester: pytest.Pytester, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("RUNAS_VERIFY", "false")
        pytester.makeconftest(CONFTEST)
        pytester.makepyfile(test_shifting=SHIFTING_FACTORY)

        pytester.runpytest().assert_outcomes(passed=1)

    def test_case_that_never_ran_fails_the_class(self, accounts: pytest.Pytester) -> None:
        accounts.makeconftest(
            CONFTEST
            + """
def pytest_collection_modifyitems(items):
    del items[1]
"""
        )

        result = accounts.runpytest()

        result.assert_outcomes(passed=2, errors=1)
        result.stdout.fnmatch_lines(["*Unused principals remaining on 1 methods*"])

    def test_deselected_cases_skip_the_unused_check(self, accounts: pytest.Pytester) -> None:
        result = accounts.runpytest("-k", "bob")

        result.assert_outcomes(passed=1, deselected=2)

    def test_skipped_cases_skip_the_unused_check(self, pytester: pytest.Pytester) -> None:
        pytester.makeconftest(CONFTEST)
        pytester.makepyfile(
            """
            import pytest
            from runas import with_mock_user

            class TestAccounts:
                @with_mock_user("alice")
                def test_list(self):
                    pass

                @pytest.mark.skip(reason="not today")
                @with_mock_user("bob")
                def test_close(self):
                    pass
            """
        )

        pytester.runpytest().assert_outcomes(passed=1, skipped=1)

    def test_factory_error_is_isolated(self, pytester: pytest.Pytester) -> None:
        pytester.makeconftest(CONFTEST)
        pytester.makepyfile(
            """
            from runas import with_mock_user, with_user_details

            class TestAccounts:
                @with_user_details("alice")
                def test_stored(self):
                    pass

                @with_mock_user("bob")
                def test_mock(self):
                    pass
            """
        )

        result = pytester.runpytest()

        result.assert_outcomes(passed=1, errors=1)
        result.stdout.fnmatch_lines(["*Unable to construct an instance of UserDetailsFactory*"])

    def test_factory_error_leaves_sibling_identities_passing(self, pytester: pytest.Pytester) -> None:
        pytester.makeconftest(CONFTEST)
        pytester.makepyfile(
            """
            from runas import holder, with_mock_user, with_user_details

            class TestAccounts:
                @with_mock_user("alice")
                @with_user_details("alice")
                def test_list(self):
                    assert holder.current_principal().username == "alice"
            """
        )

        result = pytester.runpytest("-v")

        result.assert_outcomes(passed=1, errors=1)
        result.stdout.fnmatch_lines(["*test_list?WithMockUser(username='alice'*PASSED*"])

    def test_own_parameters_are_verified_separately(self, pytester: pytest.Pytester) -> None:
        pytester.makeconftest(CONFTEST)
        pytester.makepyfile(
            """
            import pytest
            from runas import holder, with_mock_user

            class TestAccounts:
                @with_mock_user("alice")
                @with_mock_user("bob")
                @pytest.mark.parametrize("x", [1, 2])
                def test_list(self, x):
                    assert holder.current_principal() is not None
            """
        )

        pytester.runpytest().assert_outcomes(passed=4)


class TestFixtures:
    def test_security_context_fixture(self, pytester: pytest.Pytester) -> None:
        pytester.makeconftest(CONFTEST)
        pytester.makepyfile(
            """
            from runas import SecurityContext, with_mock_user

            class TestAccounts:
                @with_mock_user("alice", roles=["ADMIN"])
                def test_marked(self, security_context):
                    assert security_context.principal.has_role("ADMIN")

                def test_unmarked(self, security_context):
                    assert security_context == SecurityContext.empty()
            """
        )

        pytester.runpytest().assert_outcomes(passed=2)

    def test_principal_is_logged(self, accounts: pytest.Pytester) -> None:
        result = accounts.runpytest("--log-cli-level=INFO")

        result.stdout.fnmatch_lines(["*Principal=Principal(username='bob'*"])
