"""Tests for container wiring."""

import asyncio

from nutrilens.containers import build_container


def test_build_container_creates_services(settings) -> None:
    container = build_container(settings)

    assert container.workspace_service.profile_service is container.profile_service
    assert container.recommendation_service.mode == "local"
    asyncio.run(container.close_resources())
