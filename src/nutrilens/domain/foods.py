"""Food catalog and meal domain models."""

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class NutritionalInfo(BaseModel):
    """Nutrition values per 100 g."""

    model_config = ConfigDict(frozen=True)

    calories: float
    protein: float
    carbs: float
    fat: float


class FoodItem(BaseModel):
    """Catalog entry with per-100 g nutrition."""

    model_config = ConfigDict(
        frozen=True, alias_generator=to_camel, populate_by_name=True
    )

    id: str
    name: str
    ingredients: str
    nutrition: NutritionalInfo


@dataclass(frozen=True)
class MealItem:
    """A catalog food with a quantity in grams."""

    food: FoodItem
    quantity: int


@dataclass(frozen=True)
class NutritionalTotals:
    """Aggregated nutrition for a meal."""

    calories: float = 0.0
    protein: float = 0.0
    carbs: float = 0.0
    fat: float = 0.0
