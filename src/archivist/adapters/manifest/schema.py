"""Pydantic models for TOML clone manifests.

A manifest declares one table per source type::

    [clone."shop.models:Company"]
    to = "shop.archive:ArchiveCompany"
    map = { name = "company_name" }
    exclude = ["bank_details"]
    with = "employees"
    unless = "is_dormant"
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

SELF_TARGET = "self"


class ManifestBaseModel(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True, frozen=True)


class CloneDeclaration(ManifestBaseModel):
    to: str = SELF_TARGET
    attribute_map: dict[str, str] = Field(default_factory=dict, alias="map")
    include: list[str] = Field(default_factory=list)
    exclude: list[str] = Field(default_factory=list)
    associations: list[str] = Field(default_factory=list, alias="with")
    unless: str | None = None

    @field_validator("include", "exclude", "associations", mode="before")
    @classmethod
    def _single_name_as_list(cls, value: object) -> object:
        if isinstance(value, str):
            return [value]
        return value

    @property
    def clones_to_self(self) -> bool:
        return self.to.strip().lower() == SELF_TARGET


class CloneManifest(ManifestBaseModel):
    clone: dict[str, CloneDeclaration] = Field(default_factory=dict)
