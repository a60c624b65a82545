"""Tests for the workspace service."""

import asyncio
from dataclasses import dataclass

import pytest

from nutrilens.domain.errors import (
    AnalysisError,
    InputValidationError,
    ProtectedEntityError,
    RequestInProgressError,
)
from nutrilens.domain.workspace import begin_recommendations
from nutrilens.services.workspace import WorkspaceService
from tests.conftest import (
    PNG_DATA_URI,
    FailingCompletionClient,
    FakeCompletionClient,
    build_workspace_service,
)


def test_banana_meal_totals(workspace_service: WorkspaceService) -> None:
    workspace_service.add_food("banana", "200")

    totals = workspace_service.totals()

    assert totals.calories == pytest.approx(178)
    assert totals.protein == pytest.approx(2.2)
    assert totals.carbs == pytest.approx(46)
    assert totals.fat == pytest.approx(0.6)


def test_add_unknown_food_is_rejected(workspace_service: WorkspaceService) -> None:
    with pytest.raises(InputValidationError):
        workspace_service.add_food("pizza", 100)


def test_add_invalid_quantity_leaves_meal_unchanged(
    workspace_service: WorkspaceService,
) -> None:
    workspace_service.add_food("apple", 100)

    with pytest.raises(InputValidationError):
        workspace_service.add_food("apple", "abc")

    assert workspace_service.state.meal[0].quantity == 100


def test_recommendations_require_meal(workspace_service: WorkspaceService) -> None:
    with pytest.raises(InputValidationError):
        asyncio.run(workspace_service.request_recommendations())


def test_recommendations_follow_meal_order(
    workspace_service: WorkspaceService,
) -> None:
    workspace_service.select_profile("gluten_free")
    workspace_service.add_food("milk", 100)
    workspace_service.add_food("whole_wheat_bread", 50)
    workspace_service.add_food("apple", 80)

    results = asyncio.run(workspace_service.request_recommendations())

    assert [r.food_item_name for r in results] == [
        "Milk (1 cup)",
        "Whole Wheat Bread (1 slice)",
        "Apple",
    ]
    assert workspace_service.state.is_recommending is False
    assert workspace_service.state.recommendations == tuple(results)


def test_recommendations_rejected_while_in_flight(
    workspace_service: WorkspaceService,
) -> None:
    workspace_service.add_food("apple", 100)
    workspace_service.state = begin_recommendations(workspace_service.state)

    with pytest.raises(RequestInProgressError):
        asyncio.run(workspace_service.request_recommendations())


def test_new_profile_is_selected_and_delete_falls_back(
    workspace_service: WorkspaceService,
) -> None:
    profile = workspace_service.upsert_profile({"name": "Keto"})
    assert workspace_service.current().selected_profile_id == profile.id

    workspace_service.delete_profile(profile.id)

    assert workspace_service.current().selected_profile_id == "guest"


def test_delete_default_profile_keeps_state(
    workspace_service: WorkspaceService,
) -> None:
    workspace_service.select_profile("vegan")

    with pytest.raises(ProtectedEntityError):
        workspace_service.delete_profile("vegan")

    assert workspace_service.current().selected_profile_id == "vegan"


def test_select_unknown_profile_is_rejected(
    workspace_service: WorkspaceService,
) -> None:
    with pytest.raises(InputValidationError):
        workspace_service.select_profile("missing")


def test_analyze_image_stores_result(workspace_service: WorkspaceService) -> None:
    analysis = asyncio.run(workspace_service.analyze_image(PNG_DATA_URI))

    assert analysis.food_name == "Banana"
    assert workspace_service.state.analysis == analysis
    assert workspace_service.state.is_analyzing is False


def test_failed_analysis_clears_stale_result(
    settings, profile_service
) -> None:  # type: ignore[no-untyped-def]
    service = build_workspace_service(
        settings, profile_service, FailingCompletionClient()
    )

    with pytest.raises(AnalysisError):
        asyncio.run(service.analyze_image(PNG_DATA_URI))

    assert service.state.is_analyzing is False
    assert service.state.analysis is None
    assert service.state.image_data_uri == PNG_DATA_URI


def test_analyze_without_image_is_rejected(
    workspace_service: WorkspaceService,
) -> None:
    with pytest.raises(InputValidationError):
        asyncio.run(workspace_service.analyze_image(""))

    assert workspace_service.state.image_data_uri is None
    assert workspace_service.state.is_analyzing is False


@dataclass
class _GatedCompletionClient(FakeCompletionClient):
    """Completion client that holds its answer until released."""

    release: asyncio.Event | None = None

    async def complete(self, **kwargs: object) -> dict[str, object]:  # type: ignore[override]
        assert self.release is not None
        await self.release.wait()
        return await super().complete(**kwargs)  # type: ignore[arg-type]


def test_meal_change_during_request_discards_stale_recommendations(
    settings, profile_service
) -> None:  # type: ignore[no-untyped-def]
    client = _GatedCompletionClient(
        payload={
            "recommendations": [
                {
                    "foodItemName": "Banana",
                    "recommendation": "Fine.",
                    "isSuitable": True,
                    "reason": None,
                }
            ]
        }
    )
    service = build_workspace_service(settings, profile_service, client)
    service.recommendation_service.mode = "llm"
    service.add_food("banana", 100)

    async def add_apple_while_waiting() -> list[object]:
        client.release = asyncio.Event()
        request = asyncio.create_task(service.request_recommendations())
        await asyncio.sleep(0)
        assert service.state.is_recommending is True
        service.add_food("apple", 50)
        client.release.set()
        return await request

    results = asyncio.run(add_apple_while_waiting())

    assert results == []
    assert [item.food.name for item in service.state.meal] == ["Banana", "Apple"]
    assert service.state.recommendations is None
    assert service.state.is_recommending is False
    assert len(client.requests) == 1


def test_unchanged_meal_keeps_recommendations_from_llm(
    settings, profile_service
) -> None:  # type: ignore[no-untyped-def]
    client = FakeCompletionClient(
        payload={
            "recommendations": [
                {
                    "foodItemName": "Banana",
                    "recommendation": "Fine.",
                    "isSuitable": True,
                    "reason": None,
                }
            ]
        }
    )
    service = build_workspace_service(settings, profile_service, client)
    service.recommendation_service.mode = "llm"
    service.add_food("banana", 100)

    results = asyncio.run(service.request_recommendations())

    assert [r.food_item_name for r in results] == ["Banana"]
    assert service.state.recommendations == tuple(results)
