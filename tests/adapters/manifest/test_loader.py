from __future__ import annotations

from pathlib import Path  # noqa: TC003

import pytest

from archivist.adapters.manifest import (
    CloneDeclaration,
    ManifestError,
    build_registry,
    import_type,
    load_registry,
    parse_manifest,
)
from archivist.config import ConfigurationError
from archivist.domain.cloning import SELF, CloneRegistry
from tests.helpers.fakes import Item, Shop
from tests.helpers.models import Company, Employee

MANIFEST = """
[clone."tests.helpers.models:Company"]
to = "tests.helpers.models:ArchiveCompany"
map = { name = "company_name" }
with = ["employees", "ceo"]
unless = "is_dormant"

[clone."tests.helpers.models:Employee"]
to = "self"
exclude = "id"
include = "full_name"
"""


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "clones.toml"
    path.write_text(text, encoding="utf-8")
    return path


def test_load_registry_declares_every_entry(tmp_path: Path) -> None:
    registry = load_registry(_write(tmp_path, MANIFEST))

    assert len(registry) == 2
    company = registry.configuration_for(Company)
    assert company.target == "tests.helpers.models:ArchiveCompany"
    assert dict(company.attribute_map) == {"name": "company_name"}
    assert company.associations == ("employees", "ceo")
    assert company.is_blocked(Company(name="Gone", dormant=True))
    assert not company.is_blocked(Company(name="Live"))

    employee = registry.configuration_for(Employee)
    assert employee.target is SELF
    assert employee.exclude == frozenset({"id"})
    assert employee.include == ("full_name",)


def test_build_registry_extends_an_existing_registry() -> None:
    registry = CloneRegistry()
    registry.declare(Shop)
    manifest = parse_manifest({"clone": {"tests.helpers.fakes:Item": {"with": "parts"}}})

    result = build_registry(manifest, registry)

    assert result is registry
    assert Shop in registry
    assert registry.configuration_for(Item).associations == ("parts",)


def test_single_names_become_lists() -> None:
    declaration = CloneDeclaration.model_validate({"include": "label", "with": "items"})

    assert declaration.include == ["label"]
    assert declaration.associations == ["items"]
    assert declaration.clones_to_self


@pytest.mark.parametrize(
    "document",
    [
        {"clone": {"tests.helpers.fakes:Shop": {"colour": "red"}}},
        {"clone": {"tests.helpers.fakes:Shop": {"map": {"name": 3}}}},
        {"clones": {}},
    ],
)
def test_invalid_documents_are_rejected(document: dict[str, object]) -> None:
    with pytest.raises(ManifestError, match="Invalid clone manifest"):
        parse_manifest(document)


def test_unreadable_manifest_is_a_configuration_error(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError, match="Cannot read"):
        load_registry(tmp_path / "missing.toml")

    with pytest.raises(ManifestError, match="Cannot read"):
        load_registry(_write(tmp_path, "[clone\n"))


@pytest.mark.parametrize(
    ("reference", "message"),
    [
        ("tests.helpers.fakes:Nothing", "Cannot import"),
        ("no_such_module_here:Thing", "Cannot import"),
        ("tests.helpers.fakes", "Cannot import"),
        ("tests.helpers.fakes:shop_reflection", "does not name a class"),
    ],
)
def test_import_type_errors(reference: str, message: str) -> None:
    with pytest.raises(ManifestError, match=message):
        import_type(reference)


def test_unknown_source_type_fails_when_building(tmp_path: Path) -> None:
    path = _write(tmp_path, '[clone."tests.helpers.fakes:Nothing"]\n')

    with pytest.raises(ManifestError, match="Cannot import"):
        load_registry(path)


def test_manifest_matches_programmatic_declaration() -> None:
    manifest = parse_manifest(
        {
            "clone": {
                "tests.helpers.fakes:Shop": {
                    "to": "tests.helpers.fakes:ShopArchive",
                    "map": {"name": "shop_name"},
                    "include": "label",
                    "exclude": ["secret"],
                    "with": "items",
                }
            }
        }
    )
    from_manifest = build_registry(manifest).configuration_for(Shop)
    declared = CloneRegistry()
    declared.declare(
        Shop,
        to="tests.helpers.fakes:ShopArchive",
        attribute_map={"name": "shop_name"},
        include="label",
        exclude=["secret"],
        associations="items",
    )

    assert from_manifest == declared.configuration_for(Shop)
