"""Pydantic models describing an index: its facets and its policies."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class _StrictModel(BaseModel):
    """Shared strict model settings for index configuration."""

    model_config = ConfigDict(extra="forbid", validate_assignment=True)


class FacetSpec(_StrictModel):
    """One facet: a named, dotted path read from every stored value.

    ``source`` picks how each step of the path is resolved: ``item`` reads
    mapping keys, ``attribute`` reads attributes, and ``field`` reads
    mapping keys on mappings and attributes on everything else.
    """

    name: str = ""
    path: str
    source: Literal["field", "attribute", "item"] = "field"

    @model_validator(mode="before")
    @classmethod
    def default_name(cls, data: Any) -> Any:
        if isinstance(data, dict) and not str(data.get("name") or "").strip():
            data = {**data, "name": str(data.get("path") or "")}
        return data

    @field_validator("name", "path")
    @classmethod
    def normalize_text(cls, value: str) -> str:
        return value.strip()

    @field_validator("path")
    @classmethod
    def path_not_empty(cls, value: str) -> str:
        if not value or any(not step for step in value.split(".")):
            raise ValueError(f"Invalid facet path: {value!r}")
        return value


class IndexConfig(_StrictModel):
    """Declarative description of a MultiKeyIndex."""

    name: str = "default"
    facets: list[FacetSpec] = Field(min_length=1)
    strict_ownership: bool = True
    on_duplicate: Literal["warn", "raise"] = "warn"

    @field_validator("name")
    @classmethod
    def normalize_name(cls, value: str) -> str:
        return value.strip() or "default"

    @field_validator("facets")
    @classmethod
    def unique_facet_names(cls, facets: list[FacetSpec]) -> list[FacetSpec]:
        seen: set[str] = set()
        for facet in facets:
            if facet.name in seen:
                raise ValueError(f"Duplicate facet name: {facet.name!r}")
            seen.add(facet.name)
        return facets

    def facet_names(self) -> list[str]:
        return [facet.name for facet in self.facets]
