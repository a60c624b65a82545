"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import HTMLResponse, JSONResponse

from nutrilens.api.models import (
    ImageAnalysisPayload,
    MealItemPayload,
    ProfilePayload,
    SelectProfilePayload,
)
from nutrilens.api.ui import INDEX_HTML
from nutrilens.app_logging import configure_logging
from nutrilens.containers import AppContainer
from nutrilens.domain.errors import (
    AnalysisError,
    InputValidationError,
    NutriLensError,
    ProtectedEntityError,
    RequestInProgressError,
)
from nutrilens.domain.foods import NutritionalTotals
from nutrilens.domain.workspace import Workspace
from nutrilens.services.analysis import maps_url

_STATUS_BY_ERROR: tuple[tuple[type[NutriLensError], int], ...] = (
    (RequestInProgressError, status.HTTP_409_CONFLICT),
    (InputValidationError, status.HTTP_400_BAD_REQUEST),
    (ProtectedEntityError, status.HTTP_409_CONFLICT),
    (AnalysisError, status.HTTP_502_BAD_GATEWAY),
)


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(NutriLensError)
    async def handle_nutrilens_error(
        request: Request, exc: NutriLensError
    ) -> JSONResponse:
        status_code = _status_for(exc)
        if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
            logger.error("Request failed: path=%s error=%s", request.url.path, exc)
        else:
            logger.info("Request rejected: path=%s error=%s", request.url.path, exc)
        return JSONResponse(
            status_code=status_code,
            content={"error": _format_error(request.app.state.container, exc)},
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/", response_class=HTMLResponse)
    async def index() -> HTMLResponse:
        """Single-page UI that consumes the API."""
        return HTMLResponse(INDEX_HTML)

    @app.get("/api/foods")
    async def list_foods(request: Request) -> dict[str, object]:
        state_container: AppContainer = request.app.state.container
        foods = state_container.profile_service.list_foods()
        return {"foods": [food.model_dump(by_alias=True) for food in foods]}

    @app.get("/api/profiles")
    async def list_profiles(request: Request) -> dict[str, object]:
        state_container: AppContainer = request.app.state.container
        profiles = state_container.profile_service.list_profiles()
        return {
            "profiles": [profile.model_dump(by_alias=True) for profile in profiles]
        }

    @app.post("/api/profiles")
    async def save_profile(
        payload: ProfilePayload, request: Request
    ) -> dict[str, object]:
        """Create a profile, or update the one with a matching id."""
        state_container: AppContainer = request.app.state.container
        profile = state_container.workspace_service.upsert_profile(
            payload.model_dump()
        )
        return {"profile": profile.model_dump(by_alias=True)}

    @app.delete("/api/profiles/{profile_id}")
    async def delete_profile(profile_id: str, request: Request) -> dict[str, object]:
        state_container: AppContainer = request.app.state.container
        state = state_container.workspace_service.delete_profile(profile_id)
        return {"selectedProfileId": state.selected_profile_id}

    @app.get("/api/workspace")
    async def get_workspace(request: Request) -> dict[str, object]:
        """Return the workspace state with current meal totals."""
        state_container: AppContainer = request.app.state.container
        return _workspace_payload(state_container)

    @app.put("/api/workspace/profile")
    async def select_profile(
        payload: SelectProfilePayload, request: Request
    ) -> dict[str, object]:
        state_container: AppContainer = request.app.state.container
        state_container.workspace_service.select_profile(payload.profile_id)
        return _workspace_payload(state_container)

    @app.post("/api/meal/items")
    async def add_meal_item(
        payload: MealItemPayload, request: Request
    ) -> dict[str, object]:
        """Add a catalog food to the meal."""
        state_container: AppContainer = request.app.state.container
        state_container.workspace_service.add_food(payload.food_id, payload.quantity)
        return _workspace_payload(state_container)

    @app.delete("/api/meal/items/{food_id}")
    async def remove_meal_item(food_id: str, request: Request) -> dict[str, object]:
        state_container: AppContainer = request.app.state.container
        state_container.workspace_service.remove_food(food_id)
        return _workspace_payload(state_container)

    @app.delete("/api/meal")
    async def clear_meal(request: Request) -> dict[str, object]:
        state_container: AppContainer = request.app.state.container
        state_container.workspace_service.clear_meal()
        return _workspace_payload(state_container)

    @app.post("/api/recommendations")
    async def get_recommendations(request: Request) -> dict[str, object]:
        """Request per-item recommendations for the current meal."""
        state_container: AppContainer = request.app.state.container
        recommendations = (
            await state_container.workspace_service.request_recommendations()
        )
        return {
            "recommendations": [
                recommendation.model_dump(by_alias=True)
                for recommendation in recommendations
            ]
        }

    @app.post("/api/analysis")
    async def analyze_image(
        payload: ImageAnalysisPayload, request: Request
    ) -> dict[str, object]:
        """Analyze a food photo given as a data URI."""
        state_container: AppContainer = request.app.state.container
        analysis = await state_container.workspace_service.analyze_image(
            payload.photo_data_uri or ""
        )
        return {
            "analysis": analysis.model_dump(by_alias=True),
            "mapsUrl": maps_url(analysis.availability.google_maps_query),
        }

    return app


def _status_for(exc: NutriLensError) -> int:
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def _format_error(
    state_container: AppContainer, exc: NutriLensError
) -> dict[str, str]:
    """Return a user-facing error payload with local debug info."""
    payload = exc.to_dict()
    cause = exc.__cause__
    if state_container.settings.environment == "local" and cause is not None:
        payload["debug"] = f"{type(cause).__name__}: {cause}".strip()
    return payload


def _workspace_payload(state_container: AppContainer) -> dict[str, object]:
    state = state_container.workspace_service.current()
    totals = state_container.workspace_service.totals()
    return {
        **_format_workspace(state),
        "totals": _format_totals(totals),
    }


def _format_workspace(state: Workspace) -> dict[str, object]:
    return {
        "meal": [
            {"food": item.food.model_dump(by_alias=True), "quantity": item.quantity}
            for item in state.meal
        ],
        "selectedProfileId": state.selected_profile_id,
        "recommendations": (
            [rec.model_dump(by_alias=True) for rec in state.recommendations]
            if state.recommendations is not None
            else None
        ),
        "isRecommending": state.is_recommending,
        "hasImage": state.image_data_uri is not None,
        "analysis": (
            state.analysis.model_dump(by_alias=True) if state.analysis else None
        ),
        "isAnalyzing": state.is_analyzing,
    }


def _format_totals(totals: NutritionalTotals) -> dict[str, float]:
    return {
        "calories": totals.calories,
        "protein": totals.protein,
        "carbs": totals.carbs,
        "fat": totals.fat,
    }
