"""Interface for the structured-output completion service."""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

ToolHandler = Callable[[str, dict[str, object]], dict[str, object]]


@dataclass(frozen=True)
class ToolSpec:
    """A function the completion service may call during generation."""

    name: str
    description: str
    parameters: dict[str, object]


class CompletionClient(Protocol):
    """Interface for schema-constrained LLM completions."""

    async def complete(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        prompt: str,
        schema_name: str,
        schema: dict[str, object],
        image_data_url: str | None = None,
        tools: list[ToolSpec] | None = None,
        tool_handler: ToolHandler | None = None,
        max_tool_rounds: int = 8,
    ) -> dict[str, object]:
        """Return structured output conforming to the given JSON schema."""
