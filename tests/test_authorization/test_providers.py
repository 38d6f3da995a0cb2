"""Tests for the in-memory collaborator implementations."""
from __future__ import annotations

import pathlib

import pytest

from aumos_authz.authorization.protocols import (
    BulkPermissionLoader,
    IdentityResolver,
    MatrixProvider,
    OverrideProvider,
    RequesterClassResolver,
)
from aumos_authz.authorization.providers import (
    FileMatrixProvider,
    InMemoryOverrideStore,
    MatrixPermissionLoader,
    NoOverrideProvider,
    StaticMatrixProvider,
    StaticRequesterContext,
)
from aumos_authz.permissions.levels import PermissionLevel
from aumos_authz.permissions.matrix import PermissionMatrix, UserType
from aumos_authz.permissions.matrix_loader import MatrixConfigError


class TestProtocolConformance:
    def test_providers_satisfy_protocols(self) -> None:
        matrix_provider = StaticMatrixProvider({})
        context = StaticRequesterContext(UserType.GUEST)
        assert isinstance(matrix_provider, MatrixProvider)
        assert isinstance(FileMatrixProvider("x.yaml"), MatrixProvider)
        assert isinstance(context, RequesterClassResolver)
        assert isinstance(context, IdentityResolver)
        assert isinstance(NoOverrideProvider(), OverrideProvider)
        assert isinstance(InMemoryOverrideStore(), OverrideProvider)
        assert isinstance(
            MatrixPermissionLoader(matrix_provider, lambda _: UserType.GUEST),
            BulkPermissionLoader,
        )


class TestStaticMatrixProvider:
    def test_wraps_mapping(self) -> None:
        provider = StaticMatrixProvider({"reports": {"guest": "view"}})
        matrix = provider.get_permission_matrix()
        assert isinstance(matrix, PermissionMatrix)
        assert matrix.lookup("reports", UserType.GUEST) is PermissionLevel.VIEW

    def test_returns_given_matrix(self) -> None:
        matrix = PermissionMatrix()
        assert StaticMatrixProvider(matrix).get_permission_matrix() is matrix


class TestFileMatrixProvider:
    def test_reads_file_on_each_call(self, tmp_path: pathlib.Path) -> None:
        path = tmp_path / "permissions.yaml"
        path.write_text("matrix:\n  reports:\n    guest: view\n", encoding="utf-8")
        provider = FileMatrixProvider(path)
        assert provider.get_permission_matrix().lookup("reports", "guest") is PermissionLevel.VIEW

        path.write_text("matrix:\n  reports:\n    guest: none\n", encoding="utf-8")
        assert provider.get_permission_matrix().lookup("reports", "guest") is PermissionLevel.NONE

    def test_missing_file_raises(self, tmp_path: pathlib.Path) -> None:
        with pytest.raises(FileNotFoundError):
            FileMatrixProvider(tmp_path / "nope.yaml").get_permission_matrix()

    def test_bad_file_raises(self, tmp_path: pathlib.Path) -> None:
        path = tmp_path / "permissions.yaml"
        path.write_text("matrix:\n  reports:\n    guest: superuser\n", encoding="utf-8")
        with pytest.raises(MatrixConfigError):
            FileMatrixProvider(path).get_permission_matrix()


class TestOverrideProviders:
    def test_no_override_returns_none(self) -> None:
        assert NoOverrideProvider().get_custom_permission("u1", "reports") is None

    def test_set_and_get(self) -> None:
        store = InMemoryOverrideStore()
        store.set_override("u1", "reports", "edit")
        assert store.get_custom_permission("u1", "reports") is PermissionLevel.EDIT
        assert store.get_custom_permission("u1", "billing") is None
        assert store.get_custom_permission("u2", "reports") is None

    def test_explicit_none_is_distinct_from_absent(self) -> None:
        store = InMemoryOverrideStore()
        store.set_override("u1", "reports", PermissionLevel.NONE)
        assert store.get_custom_permission("u1", "reports") is PermissionLevel.NONE
        assert store.get_custom_permission("u1", "billing") is None

    def test_invalid_level_rejected(self) -> None:
        with pytest.raises(ValueError):
            InMemoryOverrideStore().set_override("u1", "reports", "owner")

    def test_remove_and_clear(self) -> None:
        store = InMemoryOverrideStore()
        store.set_override("u1", "reports", PermissionLevel.VIEW)
        store.set_override("u1", "billing", PermissionLevel.VIEW)
        store.set_override("u2", "reports", PermissionLevel.VIEW)

        store.remove_override("u1", "reports")
        assert store.overrides_for("u1") == {"billing": PermissionLevel.VIEW}

        store.clear("u1")
        assert store.overrides_for("u1") == {}
        assert store.get_custom_permission("u2", "reports") is PermissionLevel.VIEW

        store.clear()
        assert store.overrides_for("u2") == {}

    def test_remove_missing_is_noop(self) -> None:
        InMemoryOverrideStore().remove_override("ghost", "reports")


class TestStaticRequesterContext:
    def test_anonymous_by_default(self) -> None:
        context = StaticRequesterContext(UserType.GUEST)
        assert context.get_requester_class() is UserType.GUEST
        assert context.get_user_id() is None

    def test_reassignable(self) -> None:
        context = StaticRequesterContext(UserType.GUEST)
        context.requester_class = UserType.ADMIN
        context.user_id = "u1"
        assert context.get_requester_class() is UserType.ADMIN
        assert context.get_user_id() == "u1"
