from dataclasses import dataclass

from runas.authoring import with_mock_user
from runas.domain.shared.model.declaration import Declaration, Repeated, declare
from runas.domain.execution.service.walker import (
    find_class_identity_nodes,
    find_identity_nodes,
    find_identity_nodes_in,
    find_method_identity_nodes,
    unwrap_container,
)

ALICE = with_mock_user("alice")
BOB = with_mock_user("bob")
CAROL = with_mock_user("carol")


@dataclass(frozen=True)
class Plain(Declaration):
    pass


@with_mock_user("admin", roles=["ADMIN"])
@dataclass(frozen=True)
class AsAdmin(Declaration):
    pass


@AsAdmin()
@dataclass(frozen=True)
class AsNestedAdmin(Declaration):
    pass


@dataclass(frozen=True)
class Loop(Declaration):
    pass


declare(Loop, Loop())
declare(Loop, BOB)


@dataclass(frozen=True)
class Ping(Declaration):
    pass


@dataclass(frozen=True)
class Pong(Declaration):
    pass


declare(Ping, Pong())
declare(Ping, ALICE)
declare(Pong, Ping())


@dataclass(frozen=True)
class Bag(Declaration):
    value: tuple[Declaration, ...] = ()


@dataclass(frozen=True)
class Scalar(Declaration):
    value: int = 3


@dataclass(frozen=True)
class Strings(Declaration):
    value: tuple[str, ...] = ("alice", "bob")


@dataclass(frozen=True)
class Exploding(Declaration):
    @property
    def value(self) -> tuple[Declaration, ...]:
        raise RuntimeError("unreadable")


declare(Scalar, CAROL)
declare(Exploding, CAROL)
declare(Strings, CAROL)


class TestUnwrapContainer:
    def test_repeated_is_a_container(self) -> None:
        assert unwrap_container(Repeated(value=(ALICE, BOB))) == (ALICE, BOB)

    def test_any_value_sequence_of_declarations_is_a_container(self) -> None:
        assert unwrap_container(Bag(value=(ALICE, Plain()))) == (ALICE, Plain())

    def test_missing_value_is_not_a_container(self) -> None:
        assert unwrap_container(Plain()) == ()

    def test_scalar_value_is_not_a_container(self) -> None:
        assert unwrap_container(Scalar()) == ()

    def test_sequence_of_non_declarations_is_not_a_container(self) -> None:
        assert unwrap_container(Strings()) == ()

    def test_unreadable_value_is_not_a_container(self) -> None:
        assert unwrap_container(Exploding()) == ()

    def test_empty_value_is_not_a_container(self) -> None:
        assert unwrap_container(Bag()) == ()


class TestFindIdentityNodes:
    def test_marker_is_returned_as_is(self) -> None:
        assert find_identity_nodes_in(ALICE) == [ALICE]

    def test_plain_declaration_has_none(self) -> None:
        assert find_identity_nodes_in(Plain()) == []

    def test_container_yields_nested_markers_in_order(self) -> None:
        assert find_identity_nodes_in(Repeated(value=(ALICE, BOB, CAROL))) == [ALICE, BOB, CAROL]

    def test_container_recurses_into_composed_declarations(self) -> None:
        nodes = find_identity_nodes_in(Bag(value=(ALICE, AsAdmin(), Plain())))

        assert nodes == [ALICE, with_mock_user("admin", roles=["ADMIN"])]

    def test_composed_declaration_is_walked_through(self) -> None:
        assert find_identity_nodes_in(AsNestedAdmin()) == [with_mock_user("admin", roles=["ADMIN"])]

    def test_self_reference_terminates(self) -> None:
        assert find_identity_nodes_in(Loop()) == [BOB]

    def test_mutual_reference_terminates(self) -> None:
        assert find_identity_nodes_in(Ping()) == [ALICE]

    def test_visited_set_is_per_root(self) -> None:
        assert find_identity_nodes([Loop(), Loop()]) == [BOB, BOB]

    def test_non_container_value_falls_back_to_meta_declarations(self) -> None:
        assert find_identity_nodes_in(Scalar()) == [CAROL]
        assert find_identity_nodes_in(Strings()) == [CAROL]
        assert find_identity_nodes_in(Exploding()) == [CAROL]

    def test_repeated_calls_agree(self) -> None:
        roots = [Repeated(value=(ALICE, BOB)), AsNestedAdmin(), Loop()]

        assert find_identity_nodes(roots) == find_identity_nodes(roots)


class TestMethodIdentityNodes:
    def test_class_identities_precede_method_identities(self) -> None:
        @with_mock_user("alice")
        class TestAccounts:
            @with_mock_user("bob")
            def test_list(self) -> None: ...

        assert find_class_identity_nodes(TestAccounts) == [ALICE]
        assert find_method_identity_nodes(TestAccounts, TestAccounts.test_list) == [ALICE, BOB]

    def test_undeclared_method_in_undeclared_class(self) -> None:
        class TestAccounts:
            def test_list(self) -> None: ...

        assert find_method_identity_nodes(TestAccounts, TestAccounts.test_list) == []
