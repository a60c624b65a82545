"""Meal nutrition aggregation."""

from collections.abc import Iterable

from nutrilens.domain.foods import MealItem, NutritionalTotals


def aggregate_nutrition(items: Iterable[MealItem]) -> NutritionalTotals:
    """Sum per-100 g nutrition scaled by each item's quantity in grams."""
    values: dict[str, float] = {
        "calories": 0.0,
        "protein": 0.0,
        "carbs": 0.0,
        "fat": 0.0,
    }
    for item in items:
        nutrition = item.food.nutrition
        factor = item.quantity / 100
        values["calories"] += nutrition.calories * factor
        values["protein"] += nutrition.protein * factor
        values["carbs"] += nutrition.carbs * factor
        values["fat"] += nutrition.fat * factor

    return NutritionalTotals(
        calories=values["calories"],
        protein=values["protein"],
        carbs=values["carbs"],
        fat=values["fat"],
    )
