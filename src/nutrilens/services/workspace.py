"""Workspace service orchestrating the meal builder and image analysis.

NutriLens is a single-user app: one workspace (meal, selected profile and
in-flight flags) is held per process and shared by every HTTP client.
"""

import logging
from dataclasses import dataclass, field

from nutrilens.domain import workspace as reducers
from nutrilens.domain.analysis import FoodAnalysis
from nutrilens.domain.errors import InputValidationError
from nutrilens.domain.foods import NutritionalTotals
from nutrilens.domain.profiles import DietaryProfile
from nutrilens.domain.recommendations import FoodItemInput, Recommendation
from nutrilens.domain.workspace import Workspace
from nutrilens.services.analysis import FoodAnalysisService, validate_data_uri
from nutrilens.services.nutrition import aggregate_nutrition
from nutrilens.services.profiles import ProfileService
from nutrilens.services.recommendations import RecommendationService

_logger = logging.getLogger(__name__)


@dataclass
class WorkspaceService:
    """Owns the current workspace state and applies user actions to it."""

    profile_service: ProfileService
    analysis_service: FoodAnalysisService
    recommendation_service: RecommendationService
    state: Workspace = field(default_factory=Workspace)

    def current(self) -> Workspace:
        """Return the current state, with a valid profile selected."""
        if self.profile_service.get_profile(self.state.selected_profile_id) is None:
            profiles = self.profile_service.list_profiles()
            if profiles:
                self.state = reducers.select_profile(self.state, profiles[0].id)
        return self.state

    def totals(self) -> NutritionalTotals:
        """Return nutrition totals for the current meal."""
        return aggregate_nutrition(self.state.meal)

    def selected_profile(self) -> DietaryProfile | None:
        return self.profile_service.get_profile(self.current().selected_profile_id)

    def add_food(self, food_id: str, quantity: object) -> Workspace:
        """Add a catalog food to the meal by id."""
        food = self.profile_service.get_food(food_id)
        if food is None:
            raise InputValidationError(
                "Please select a food and enter a valid quantity."
            )
        grams = reducers.parse_quantity(quantity)
        self.state = reducers.add_meal_item(self.state, food, grams)
        _logger.info("Food added to meal: food_id=%s grams=%s", food_id, grams)
        return self.state

    def remove_food(self, food_id: str) -> Workspace:
        self.state = reducers.remove_meal_item(self.state, food_id)
        return self.state

    def clear_meal(self) -> Workspace:
        self.state = reducers.clear_meal(self.state)
        return self.state

    def select_profile(self, profile_id: str) -> Workspace:
        """Select a dietary profile by id."""
        if self.profile_service.get_profile(profile_id) is None:
            raise InputValidationError("Please select a dietary profile.")
        self.state = reducers.select_profile(self.state, profile_id)
        return self.state

    def upsert_profile(self, payload: dict[str, object]) -> DietaryProfile:
        """Save a profile, selecting it when newly created."""
        is_new = self.profile_service.get_profile(str(payload.get("id") or "")) is None
        profile = self.profile_service.upsert_profile(payload)
        if is_new:
            self.state = reducers.select_profile(self.state, profile.id)
        return profile

    def delete_profile(self, profile_id: str) -> Workspace:
        """Delete a profile and fall back to another selection if needed."""
        selected = self.profile_service.delete_profile(
            profile_id, self.current().selected_profile_id
        )
        self.state = reducers.select_profile(self.state, selected)
        return self.state

    async def request_recommendations(self) -> list[Recommendation]:
        """Request recommendations for the current meal and selected profile.

        Returns the recommendations stored in the workspace, which is empty
        when the meal or profile changed before the request completed.
        """
        profile = self.selected_profile()
        if profile is None or not self.state.meal:
            raise InputValidationError(
                "Please add food to your meal and select a dietary profile."
            )
        items = [
            FoodItemInput(name=item.food.name, ingredients=item.food.ingredients)
            for item in self.state.meal
        ]
        self.state = reducers.begin_recommendations(self.state)
        requested = self.state
        try:
            result = await self.recommendation_service.get_recommendations(
                profile, items
            )
        except Exception:
            self.state = reducers.fail_recommendations(self.state)
            raise
        self.state = reducers.finish_recommendations(self.state, result, requested)
        if self.state.recommendations is None:
            _logger.info("Discarded recommendations for a meal that has changed")
            return []
        return list(self.state.recommendations)

    async def analyze_image(self, photo_data_uri: str) -> FoodAnalysis:
        """Select the given image and analyze it."""
        validate_data_uri(photo_data_uri)
        self.state = reducers.begin_analysis(
            reducers.set_image(self.state, photo_data_uri)
        )
        try:
            analysis = await self.analysis_service.analyze(photo_data_uri)
        except Exception:
            self.state = reducers.fail_analysis(self.state)
            raise
        self.state = reducers.finish_analysis(self.state, analysis)
        return analysis
