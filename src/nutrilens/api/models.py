"""Pydantic models for API request payloads."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class _Payload(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ProfilePayload(_Payload):
    """Profile editor form payload."""

    id: str | None = None
    name: str = ""
    dietary_needs: str | None = None
    allergies: str | None = None
    preferences: str | None = None


class MealItemPayload(_Payload):
    """Add-to-meal form payload; quantity is read as typed."""

    food_id: str = ""
    quantity: int | float | str | None = None


class SelectProfilePayload(_Payload):
    profile_id: str


class ImageAnalysisPayload(_Payload):
    photo_data_uri: str | None = None
