"""Dietary profile domain model."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class DietaryProfile(BaseModel):
    """A named set of dietary needs, allergies and preferences."""

    model_config = ConfigDict(
        frozen=True, alias_generator=to_camel, populate_by_name=True
    )

    id: str
    name: str
    dietary_needs: str
    allergies: str
    preferences: str | None = None
