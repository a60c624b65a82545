"""Models for image analysis results."""

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictStr
from pydantic.alias_generators import to_camel

MAX_NUTRIENTS = 20


class _ContractModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )


class Nutrient(_ContractModel):
    """Single nutrient estimate for a 10 g serving."""

    name: StrictStr
    amount: StrictStr
    importance: StrictStr


class Suitability(_ContractModel):
    """Dietary suitability notes per health concern."""

    diabetes: StrictStr
    allergies: StrictStr
    cholesterol: StrictStr
    heart_health: StrictStr
    weight_management: StrictStr
    gut_health: StrictStr
    general: StrictStr


class Availability(_ContractModel):
    """Where the food is commonly found."""

    description: StrictStr
    google_maps_query: StrictStr


class FoodAnalysis(_ContractModel):
    """Structured output for food image analysis."""

    food_name: StrictStr
    is_spoiled: StrictBool
    spoilage_reason: StrictStr | None = None
    is_healthy: StrictBool
    health_summary: StrictStr
    nutrients: list[Nutrient] = Field(max_length=MAX_NUTRIENTS)
    suitability: Suitability
    availability: Availability
