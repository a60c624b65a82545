"""Models for dietary recommendation requests and results."""

from pydantic import BaseModel, ConfigDict, StrictBool, StrictStr
from pydantic.alias_generators import to_camel

from nutrilens.domain.profiles import DietaryProfile


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FoodItemInput(_CamelModel):
    """Food item as sent for recommendation analysis."""

    name: str
    ingredients: str


class DietaryProfileInput(_CamelModel):
    """Profile fields relevant to recommendation analysis."""

    dietary_needs: str
    allergies: str
    preferences: str | None = None

    @classmethod
    def from_profile(cls, profile: DietaryProfile) -> "DietaryProfileInput":
        """Build the analysis input from a stored profile."""
        return cls(
            dietary_needs=profile.dietary_needs,
            allergies=profile.allergies,
            preferences=profile.preferences or "",
        )


class Recommendation(BaseModel):
    """Suitability recommendation for a single food item."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="forbid"
    )

    food_item_name: StrictStr
    recommendation: StrictStr
    is_suitable: StrictBool
    reason: StrictStr | None = None


class RecommendationBatch(BaseModel):
    """Structured output wrapper for a recommendation batch."""

    model_config = ConfigDict(extra="forbid")

    recommendations: list[Recommendation]
