"""Personalized dietary recommendations for meal items."""

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Literal

from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel

from nutrilens.domain.errors import (
    AnalysisError,
    InputValidationError,
    SchemaValidationError,
)
from nutrilens.domain.profiles import DietaryProfile
from nutrilens.domain.recommendations import (
    DietaryProfileInput,
    FoodItemInput,
    Recommendation,
    RecommendationBatch,
)
from nutrilens.services.completion import CompletionClient, ToolSpec

RecommendationMode = Literal["local", "llm"]

_logger = logging.getLogger(__name__)


def _split_tokens(value: str) -> list[str]:
    return [token.strip() for token in value.split(",")]


def analyze_food_item(
    food_item: FoodItemInput, profile: DietaryProfileInput
) -> Recommendation:
    """Check a food item against a profile's allergies, needs and preferences."""
    recommendation = (
        f"This food item ({food_item.name}) contains the following ingredients: "
        f"{food_item.ingredients}.\n"
    )
    is_suitable = True
    reason = ""

    if profile.allergies:
        ingredients = _split_tokens(food_item.ingredients)
        allergens = [
            allergen
            for allergen in _split_tokens(profile.allergies)
            if allergen in ingredients
        ]
        if allergens:
            listed = ", ".join(allergens)
            is_suitable = False
            reason = f"This food contains {listed}, which you are allergic to."
            recommendation += (
                "\nWARNING: This food contains allergens you have indicated you "
                f"are allergic to: {listed}."
            )
        else:
            recommendation += (
                "\nThis food does not appear to contain any of your listed allergens."
            )

    if profile.dietary_needs:
        recommendation += f"\nConsidering your dietary needs: {profile.dietary_needs}."

    if profile.preferences:
        recommendation += (
            f"\nConsidering your dietary preferences: {profile.preferences}."
        )

    return Recommendation(
        food_item_name=food_item.name,
        recommendation=recommendation,
        is_suitable=is_suitable,
        reason=reason,
    )


class AnalyzeFoodItemArgs(BaseModel):
    """Arguments for the analyzeFoodItem tool."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    food_item: FoodItemInput
    dietary_profile: DietaryProfileInput


@dataclass(frozen=True)
class Tool:
    """A pure function exposed to the completion service."""

    spec: ToolSpec
    arguments: type[BaseModel]
    run: Callable[[BaseModel], BaseModel]


_FOOD_ITEM_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "name": {"type": "string"},
        "ingredients": {"type": "string"},
    },
    "required": ["name", "ingredients"],
    "additionalProperties": False,
}

_PROFILE_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "dietaryNeeds": {"type": "string"},
        "allergies": {"type": "string"},
        "preferences": {"anyOf": [{"type": "string"}, {"type": "null"}]},
    },
    "required": ["dietaryNeeds", "allergies", "preferences"],
    "additionalProperties": False,
}

_RECOMMENDATION_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "foodItemName": {"type": "string"},
        "recommendation": {"type": "string"},
        "isSuitable": {"type": "boolean"},
        "reason": {"anyOf": [{"type": "string"}, {"type": "null"}]},
    },
    "required": ["foodItemName", "recommendation", "isSuitable", "reason"],
    "additionalProperties": False,
}

RECOMMENDATIONS_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "recommendations": {"type": "array", "items": _RECOMMENDATION_SCHEMA},
    },
    "required": ["recommendations"],
    "additionalProperties": False,
}

TOOLS: dict[str, Tool] = {
    "analyzeFoodItem": Tool(
        spec=ToolSpec(
            name="analyzeFoodItem",
            description=(
                "Analyzes a food item against a dietary profile to provide "
                "personalized recommendations, highlighting potential allergens "
                "or unsuitable ingredients."
            ),
            parameters={
                "type": "object",
                "properties": {
                    "foodItem": _FOOD_ITEM_SCHEMA,
                    "dietaryProfile": _PROFILE_SCHEMA,
                },
                "required": ["foodItem", "dietaryProfile"],
                "additionalProperties": False,
            },
        ),
        arguments=AnalyzeFoodItemArgs,
        run=lambda args: analyze_food_item(args.food_item, args.dietary_profile),
    ),
}


def dispatch_tool(name: str, arguments: dict[str, object]) -> dict[str, object]:
    """Run a registered tool with JSON arguments and return its JSON result."""
    tool = TOOLS.get(name)
    if tool is None:
        raise KeyError(f"Unknown tool: {name}")
    result = tool.run(tool.arguments.model_validate(arguments))
    return result.model_dump(by_alias=True)


def build_recommendations_prompt(
    profile: DietaryProfileInput, items: Sequence[FoodItemInput]
) -> str:
    """Render the dietary expert instruction for a batch of food items."""
    lines = [
        "You are a dietary expert. Analyze the provided food items against the "
        "user's dietary profile and provide personalized recommendations.",
        "",
        "Dietary Profile:",
        f"Dietary Needs: {profile.dietary_needs}",
        f"Allergies: {profile.allergies}",
        f"Preferences: {profile.preferences or ''}",
        "",
        "Food Items:",
    ]
    for item in items:
        lines.append(f"  - Name: {item.name}")
        lines.append(f"    Ingredients: {item.ingredients}")
    lines.extend(
        [
            "",
            "Instructions:",
            "Use the 'analyzeFoodItem' tool to analyze each food item against the "
            "dietary profile, calling it exactly once per food item.",
            "Return an array of recommendations, one for each food item, in the "
            "same order as the food items above.",
        ]
    )
    return "\n".join(lines)


@dataclass
class RecommendationService:
    """Service that produces one recommendation per food item, in input order."""

    client: CompletionClient
    model: str
    reasoning_effort: str | None
    store: bool
    mode: RecommendationMode = "local"
    max_tool_rounds: int = 8

    async def get_recommendations(
        self, profile: DietaryProfile, items: Sequence[FoodItemInput]
    ) -> list[Recommendation]:
        """Return recommendations matching the length and order of items."""
        if not items:
            raise InputValidationError("Please add food to your meal.")
        profile_input = DietaryProfileInput.from_profile(profile)
        if self.mode == "llm":
            return await self._recommend_with_llm(profile_input, items)
        try:
            return [analyze_food_item(item, profile_input) for item in items]
        except Exception as exc:
            _logger.exception("Recommendation batch failed")
            raise AnalysisError("Failed to get recommendations.") from exc

    async def _recommend_with_llm(
        self, profile: DietaryProfileInput, items: Sequence[FoodItemInput]
    ) -> list[Recommendation]:
        try:
            raw = await self.client.complete(
                model=self.model,
                reasoning_effort=self.reasoning_effort,
                store=self.store,
                prompt=build_recommendations_prompt(profile, items),
                schema_name="dietary_recommendations",
                schema=RECOMMENDATIONS_SCHEMA,
                tools=[tool.spec for tool in TOOLS.values()],
                tool_handler=dispatch_tool,
                max_tool_rounds=self.max_tool_rounds,
            )
        except Exception as exc:
            _logger.exception("Recommendation request failed")
            raise AnalysisError("Failed to get recommendations.") from exc
        try:
            batch = RecommendationBatch.model_validate(raw)
        except ValidationError as exc:
            _logger.warning("Recommendation output failed validation: %s", exc)
            raise SchemaValidationError(
                "The recommendation service returned an unexpected response."
            ) from exc
        return _restore_input_order(batch.recommendations, items)


def _restore_input_order(
    recommendations: list[Recommendation], items: Sequence[FoodItemInput]
) -> list[Recommendation]:
    """Match recommendations to input items by name, preserving input order."""
    if len(recommendations) != len(items):
        raise SchemaValidationError(
            f"Expected {len(items)} recommendations, got {len(recommendations)}."
        )
    pending = list(recommendations)
    ordered: list[Recommendation] = []
    for item in items:
        match = next(
            (rec for rec in pending if rec.food_item_name == item.name), None
        )
        if match is None:
            raise SchemaValidationError(f"Missing recommendation for {item.name}.")
        pending.remove(match)
        ordered.append(match)
    return ordered
