"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from nutrilens.adapters.openai_completion_client import OpenAICompletionClient
from nutrilens.adapters.supabase_kv_store import SupabaseKeyValueStore
from nutrilens.config import Settings
from nutrilens.services.analysis import FoodAnalysisService
from nutrilens.services.profiles import ProfileService
from nutrilens.services.recommendations import RecommendationService
from nutrilens.services.workspace import WorkspaceService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    profile_service: ProfileService
    analysis_service: FoodAnalysisService
    recommendation_service: RecommendationService
    workspace_service: WorkspaceService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    profile_service = ProfileService(
        SupabaseKeyValueStore(supabase_client, table=resolved_settings.kv_table)
    )
    completion_client = OpenAICompletionClient.create(
        resolved_settings.openai_api_key,
        timeout_seconds=resolved_settings.openai_timeout_seconds,
    )
    analysis_service = FoodAnalysisService(
        client=completion_client,
        model=resolved_settings.openai_model,
        reasoning_effort=resolved_settings.openai_reasoning_effort,
        store=resolved_settings.openai_store,
    )
    recommendation_service = RecommendationService(
        client=completion_client,
        model=resolved_settings.openai_model,
        reasoning_effort=resolved_settings.openai_reasoning_effort,
        store=resolved_settings.openai_store,
        mode=resolved_settings.recommendation_mode,
        max_tool_rounds=resolved_settings.max_tool_rounds,
    )
    # Single-user app: one workspace per process.
    workspace_service = WorkspaceService(
        profile_service=profile_service,
        analysis_service=analysis_service,
        recommendation_service=recommendation_service,
    )

    async def close_resources() -> None:
        await completion_client.close()

    return AppContainer(
        settings=resolved_settings,
        profile_service=profile_service,
        analysis_service=analysis_service,
        recommendation_service=recommendation_service,
        workspace_service=workspace_service,
        close_resources=close_resources,
    )
