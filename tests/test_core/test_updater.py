from __future__ import annotations

import pytest

from update_pypi_deps.core.updater import SpecifierChange, apply_resolutions
from update_pypi_deps.exceptions import UnresolvedDependencyError
from update_pypi_deps.models import Constraint, Manifest, Specifier


@pytest.fixture
def manifest() -> Manifest:
    return Manifest(
        dependencies=[
            Specifier(name="cryptography", constraint=Constraint("~=", "41.0")),
            Specifier(name="black"),
            Specifier(
                name="tomli",
                constraint=Constraint(">=", "1.1"),
                marker="python_version < '3.11'",
            ),
        ],
        optional_dependencies={
            "test": [Specifier(name="pytest", constraint=Constraint("==", "7.4.0"))],
        },
    )


VERSIONS = {
    "cryptography": "42.0.1",
    "black": "24.1.0",
    "tomli": "2.0.1",
    "pytest": "8.0.0",
}


@pytest.mark.unit
class TestApplyResolutions:
    """Tests for merging resolved versions into a manifest."""

    def test_preserves_existing_operator(self, manifest: Manifest) -> None:
        apply_resolutions(manifest, VERSIONS)

        assert manifest.dependencies[0].constraint == Constraint("~=", "42.0.1")

    def test_bare_specifier_gets_exact_pin(self, manifest: Manifest) -> None:
        apply_resolutions(manifest, VERSIONS)

        assert manifest.dependencies[1].constraint == Constraint("==", "24.1.0")

    def test_marker_is_untouched(self, manifest: Manifest) -> None:
        apply_resolutions(manifest, VERSIONS)

        tomli = manifest.dependencies[2]
        assert tomli.to_string() == "tomli >= 2.0.1; python_version < '3.11'"

    def test_optional_groups_are_updated(self, manifest: Manifest) -> None:
        apply_resolutions(manifest, VERSIONS)

        assert manifest.optional_dependencies["test"][0].version == "8.0.0"

    def test_order_is_preserved(self, manifest: Manifest) -> None:
        apply_resolutions(manifest, VERSIONS)

        assert [s.name for s in manifest.dependencies] == [
            "cryptography",
            "black",
            "tomli",
        ]

    def test_returns_changes_in_manifest_order(self, manifest: Manifest) -> None:
        changes = apply_resolutions(manifest, VERSIONS)

        assert changes[0] == SpecifierChange(
            group="dependencies",
            name="cryptography",
            operator="~=",
            old_version="41.0",
            new_version="42.0.1",
        )
        assert changes[1].old_version is None
        assert changes[1].operator == "=="
        assert [c.group for c in changes] == [
            "dependencies",
            "dependencies",
            "dependencies",
            "test",
        ]

    def test_change_update_type(self, manifest: Manifest) -> None:
        changes = apply_resolutions(manifest, VERSIONS)

        assert changes[0].update_type == "major"
        assert changes[1].update_type == "new"

    def test_missing_name_raises(self, manifest: Manifest) -> None:
        versions = {k: v for k, v in VERSIONS.items() if k != "pytest"}

        with pytest.raises(UnresolvedDependencyError) as exc_info:
            apply_resolutions(manifest, versions)

        assert exc_info.value.name == "pytest"
        assert exc_info.value.group == "test"

    def test_first_missing_name_in_manifest_order(self, manifest: Manifest) -> None:
        versions = {"cryptography": "42.0.1", "tomli": "2.0.1"}

        with pytest.raises(UnresolvedDependencyError) as exc_info:
            apply_resolutions(manifest, versions)

        assert exc_info.value.name == "black"

    def test_failure_leaves_manifest_untouched(self, manifest: Manifest) -> None:
        versions = {k: v for k, v in VERSIONS.items() if k != "pytest"}

        with pytest.raises(UnresolvedDependencyError):
            apply_resolutions(manifest, versions)

        assert manifest.dependencies[0].constraint == Constraint("~=", "41.0")
        assert manifest.dependencies[1].constraint is None

    def test_lookup_is_case_sensitive(self) -> None:
        manifest = Manifest(dependencies=[Specifier(name="PyYAML")])

        with pytest.raises(UnresolvedDependencyError):
            apply_resolutions(manifest, {"pyyaml": "6.0.1"})

    def test_constraint_is_replaced_not_appended(self) -> None:
        manifest = Manifest(
            dependencies=[Specifier(name="django", constraint=Constraint(">=", "4.2,<5"))]
        )

        apply_resolutions(manifest, {"django": "5.0.2"})

        assert manifest.dependencies[0].to_string() == "django >= 5.0.2"
