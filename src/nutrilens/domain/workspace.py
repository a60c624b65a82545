"""Workspace state for the meal builder and image analysis screens.

The state is an immutable value. Every function here takes the current state
and returns a new one, so callers keep a single reference that they replace
after each update.
"""

import math
import re
from dataclasses import dataclass, replace

from nutrilens.catalog import GUEST_PROFILE_ID
from nutrilens.domain.analysis import FoodAnalysis
from nutrilens.domain.errors import InputValidationError, RequestInProgressError
from nutrilens.domain.foods import FoodItem, MealItem
from nutrilens.domain.recommendations import Recommendation

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


@dataclass(frozen=True)
class Workspace:
    """UI-visible state owned by the presentation layer."""

    meal: tuple[MealItem, ...] = ()
    selected_profile_id: str = GUEST_PROFILE_ID
    recommendations: tuple[Recommendation, ...] | None = None
    is_recommending: bool = False
    image_data_uri: str | None = None
    analysis: FoodAnalysis | None = None
    is_analyzing: bool = False


def parse_quantity(raw: object) -> int:
    """Parse a gram quantity the way a form number field is read."""
    if isinstance(raw, bool):
        raise InputValidationError("Please enter a valid quantity.")
    try:
        if isinstance(raw, int):
            quantity = raw
        elif isinstance(raw, float):
            if not math.isfinite(raw):
                raise InputValidationError("Please enter a valid quantity.")
            quantity = int(raw)
        else:
            match = _LEADING_INT.match(str(raw or ""))
            if match is None:
                raise InputValidationError("Please enter a valid quantity.")
            quantity = int(match.group(1))
    except (ValueError, OverflowError) as exc:
        raise InputValidationError("Please enter a valid quantity.") from exc
    if quantity <= 0:
        raise InputValidationError("Please enter a valid quantity.")
    return quantity


def add_meal_item(state: Workspace, food: FoodItem, quantity: int) -> Workspace:
    """Add a food to the meal, merging quantities for foods already present."""
    if quantity <= 0:
        raise InputValidationError("Please select a food and enter a valid quantity.")
    meal = list(state.meal)
    for index, item in enumerate(meal):
        if item.food.id == food.id:
            meal[index] = MealItem(food=item.food, quantity=item.quantity + quantity)
            break
    else:
        meal.append(MealItem(food=food, quantity=quantity))
    return replace(state, meal=tuple(meal), recommendations=None)


def remove_meal_item(state: Workspace, food_id: str) -> Workspace:
    meal = tuple(item for item in state.meal if item.food.id != food_id)
    return replace(state, meal=meal, recommendations=None)


def clear_meal(state: Workspace) -> Workspace:
    return replace(state, meal=(), recommendations=None)


def select_profile(state: Workspace, profile_id: str) -> Workspace:
    if profile_id == state.selected_profile_id:
        return state
    return replace(state, selected_profile_id=profile_id, recommendations=None)


def begin_recommendations(state: Workspace) -> Workspace:
    """Mark a recommendation request in flight, rejecting re-submission."""
    if state.is_recommending:
        raise RequestInProgressError("Recommendations are already being prepared.")
    return replace(state, is_recommending=True, recommendations=None)


def finish_recommendations(
    state: Workspace, recommendations: list[Recommendation], requested: Workspace
) -> Workspace:
    """Store results for the meal and profile they were requested for.

    Results are dropped when the meal or the selected profile changed while
    the request was in flight.
    """
    if (state.meal, state.selected_profile_id) != (
        requested.meal,
        requested.selected_profile_id,
    ):
        return replace(state, is_recommending=False, recommendations=None)
    return replace(
        state, is_recommending=False, recommendations=tuple(recommendations)
    )


def fail_recommendations(state: Workspace) -> Workspace:
    return replace(state, is_recommending=False, recommendations=None)


def set_image(state: Workspace, image_data_uri: str) -> Workspace:
    """Replace the selected image, dropping any analysis of the previous one."""
    return replace(state, image_data_uri=image_data_uri, analysis=None)


def begin_analysis(state: Workspace) -> Workspace:
    """Mark an image analysis in flight, rejecting re-submission."""
    if state.is_analyzing:
        raise RequestInProgressError("An image is already being analyzed.")
    if not state.image_data_uri:
        raise InputValidationError("Please upload or take an image to analyze.")
    return replace(state, is_analyzing=True, analysis=None)


def finish_analysis(state: Workspace, analysis: FoodAnalysis) -> Workspace:
    return replace(state, is_analyzing=False, analysis=analysis)


def fail_analysis(state: Workspace) -> Workspace:
    return replace(state, is_analyzing=False, analysis=None)
