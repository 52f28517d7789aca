"""Shared pydantic configuration for boundary models."""

from pydantic import BaseModel, ConfigDict


def to_camel(string: str) -> str:
    """Convert snake_case to camelCase."""
    components = string.split("_")
    return components[0] + "".join(x.title() for x in components[1:])


class CamelModel(BaseModel):
    """Base model accepting both snake_case names and camelCase aliases.

    Stored records and JSON snapshots use camelCase keys (``sorenessMap``,
    ``muscleTargets``); Python callers construct models with keyword names.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class FrozenCamelModel(CamelModel):
    """Immutable reference data (muscles, exercises)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )
