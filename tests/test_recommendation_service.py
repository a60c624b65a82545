"""Tests for the dietary recommendation contract."""

import asyncio

import pytest

from nutrilens.catalog import DEFAULT_PROFILES
from nutrilens.domain.errors import (
    AnalysisError,
    InputValidationError,
    SchemaValidationError,
)
from nutrilens.domain.profiles import DietaryProfile
from nutrilens.domain.recommendations import DietaryProfileInput, FoodItemInput
from nutrilens.services.recommendations import (
    TOOLS,
    RecommendationService,
    analyze_food_item,
    build_recommendations_prompt,
    dispatch_tool,
)
from tests.conftest import FailingCompletionClient, FakeCompletionClient

_PROFILE = DietaryProfile(
    id="custom",
    name="Custom",
    dietary_needs="Low-carb",
    allergies="peanuts, gluten",
    preferences="Avoid processed foods",
)

_ITEMS = [
    FoodItemInput(name="A", ingredients="apple"),
    FoodItemInput(name="B", ingredients="peanuts, sugar, salt"),
    FoodItemInput(name="C", ingredients="milk"),
]


def _service(client, mode: str = "local") -> RecommendationService:  # type: ignore[no-untyped-def]
    return RecommendationService(
        client=client,
        model="gpt-5.2",
        reasoning_effort="medium",
        store=False,
        mode=mode,  # type: ignore[arg-type]
    )


def test_allergen_overlap_marks_item_unsuitable() -> None:
    result = analyze_food_item(
        FoodItemInput(name="Bread", ingredients="wheat flour, gluten, water"),
        DietaryProfileInput(dietary_needs="None", allergies="peanuts, gluten"),
    )

    assert result.is_suitable is False
    assert "gluten" in (result.reason or "")
    assert "peanuts" not in (result.reason or "")
    assert "WARNING" in result.recommendation


def test_no_allergen_overlap_is_suitable() -> None:
    result = analyze_food_item(
        FoodItemInput(name="Rice bowl", ingredients="rice, water"),
        DietaryProfileInput(dietary_needs="None", allergies="dairy"),
    )

    assert result.is_suitable is True
    assert result.reason == ""
    assert "does not appear to contain any of your listed allergens" in (
        result.recommendation
    )


def test_allergen_match_is_case_sensitive_exact_token() -> None:
    result = analyze_food_item(
        FoodItemInput(name="Bread", ingredients="Gluten, whole wheat flour"),
        DietaryProfileInput(dietary_needs="None", allergies="gluten, wheat"),
    )

    assert result.is_suitable is True


def test_recommendation_text_includes_needs_and_preferences() -> None:
    result = analyze_food_item(
        FoodItemInput(name="Milk", ingredients="milk"),
        DietaryProfileInput.from_profile(_PROFILE),
    )

    assert result.recommendation == (
        "This food item (Milk) contains the following ingredients: milk.\n"
        "\nThis food does not appear to contain any of your listed allergens."
        "\nConsidering your dietary needs: Low-carb."
        "\nConsidering your dietary preferences: Avoid processed foods."
    )


def test_blank_allergies_skip_allergen_lines() -> None:
    result = analyze_food_item(
        FoodItemInput(name="Milk", ingredients="milk"),
        DietaryProfileInput(dietary_needs="", allergies=""),
    )

    assert result.recommendation == (
        "This food item (Milk) contains the following ingredients: milk.\n"
    )
    assert result.is_suitable is True


def test_dispatch_tool_runs_registered_function() -> None:
    output = dispatch_tool(
        "analyzeFoodItem",
        {
            "foodItem": {"name": "PB", "ingredients": "peanuts, sugar"},
            "dietaryProfile": {
                "dietaryNeeds": "None",
                "allergies": "peanuts",
                "preferences": None,
            },
        },
    )

    assert output["foodItemName"] == "PB"
    assert output["isSuitable"] is False


def test_dispatch_unknown_tool_raises() -> None:
    with pytest.raises(KeyError):
        dispatch_tool("deleteEverything", {})


def test_local_mode_preserves_input_order() -> None:
    client = FakeCompletionClient()

    results = asyncio.run(_service(client).get_recommendations(_PROFILE, _ITEMS))

    assert [r.food_item_name for r in results] == ["A", "B", "C"]
    assert [r.is_suitable for r in results] == [True, False, True]
    assert client.requests == []


def test_empty_batch_is_rejected() -> None:
    with pytest.raises(InputValidationError):
        asyncio.run(
            _service(FakeCompletionClient()).get_recommendations(_PROFILE, [])
        )


def _llm_payload(names: list[str]) -> dict[str, object]:
    return {
        "recommendations": [
            {
                "foodItemName": name,
                "recommendation": f"About {name}",
                "isSuitable": True,
                "reason": None,
            }
            for name in names
        ]
    }


def test_llm_mode_restores_input_order_and_dispatches_tools() -> None:
    client = FakeCompletionClient(
        payload=_llm_payload(["C", "A", "B"]),
        tool_calls=[
            (
                "analyzeFoodItem",
                {
                    "foodItem": {"name": "A", "ingredients": "apple"},
                    "dietaryProfile": {
                        "dietaryNeeds": "Low-carb",
                        "allergies": "peanuts, gluten",
                        "preferences": None,
                    },
                },
            )
        ],
    )

    results = asyncio.run(
        _service(client, mode="llm").get_recommendations(_PROFILE, _ITEMS)
    )

    assert [r.food_item_name for r in results] == ["A", "B", "C"]
    request = client.requests[0]
    assert request["schema_name"] == "dietary_recommendations"
    assert [tool.name for tool in request["tools"]] == list(TOOLS)  # type: ignore[union-attr]
    assert "Allergies: peanuts, gluten" in str(request["prompt"])


def test_llm_mode_count_mismatch_raises_schema_error() -> None:
    client = FakeCompletionClient(payload=_llm_payload(["A", "B"]))

    with pytest.raises(SchemaValidationError):
        asyncio.run(_service(client, mode="llm").get_recommendations(_PROFILE, _ITEMS))


def test_llm_mode_unknown_name_raises_schema_error() -> None:
    client = FakeCompletionClient(payload=_llm_payload(["A", "B", "Z"]))

    with pytest.raises(SchemaValidationError):
        asyncio.run(_service(client, mode="llm").get_recommendations(_PROFILE, _ITEMS))


def test_llm_mode_invalid_shape_raises_schema_error() -> None:
    client = FakeCompletionClient(payload={"items": []})

    with pytest.raises(SchemaValidationError):
        asyncio.run(_service(client, mode="llm").get_recommendations(_PROFILE, _ITEMS))


def test_llm_mode_failure_aborts_batch() -> None:
    client = FailingCompletionClient(error=RuntimeError("boom"))

    with pytest.raises(AnalysisError):
        asyncio.run(_service(client, mode="llm").get_recommendations(_PROFILE, _ITEMS))


def test_prompt_lists_items_in_order() -> None:
    prompt = build_recommendations_prompt(
        DietaryProfileInput.from_profile(DEFAULT_PROFILES[2]), _ITEMS
    )

    assert prompt.index("Name: A") < prompt.index("Name: B") < prompt.index("Name: C")
    assert "analyzeFoodItem" in prompt
