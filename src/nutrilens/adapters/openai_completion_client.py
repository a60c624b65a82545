"""OpenAI Responses API client for structured completions."""

import json
import logging
from dataclasses import dataclass

from openai import AsyncOpenAI

from nutrilens.services.completion import CompletionClient, ToolHandler, ToolSpec

_logger = logging.getLogger(__name__)


@dataclass
class OpenAICompletionClient(CompletionClient):
    """Completion client backed by OpenAI Responses API."""

    client: AsyncOpenAI

    @classmethod
    def create(
        cls, api_key: str, timeout_seconds: float | None = None
    ) -> "OpenAICompletionClient":
        """Create an OpenAI completion client."""
        return cls(client=AsyncOpenAI(api_key=api_key, timeout=timeout_seconds))

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self.client.close()

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
        """Call OpenAI Responses API with structured outputs and tool calls."""
        content: list[dict[str, object]] = [{"type": "input_text", "text": prompt}]
        if image_data_url:
            content.append({"type": "input_image", "image_url": image_data_url})
        conversation: list[dict[str, object]] = [{"role": "user", "content": content}]
        request_payload: dict[str, object] = {
            "model": model,
            "text": {
                "format": {
                    "type": "json_schema",
                    "name": schema_name,
                    "strict": True,
                    "schema": schema,
                }
            },
            "store": store,
        }
        if reasoning_effort:
            request_payload["reasoning"] = {"effort": reasoning_effort}
        if tools:
            request_payload["tools"] = [
                {
                    "type": "function",
                    "name": tool.name,
                    "description": tool.description,
                    "parameters": tool.parameters,
                    "strict": True,
                }
                for tool in tools
            ]

        for _ in range(max_tool_rounds + 1):
            response = await self.client.responses.create(
                input=conversation, **request_payload
            )
            calls = [
                item
                for item in response.output or []
                if getattr(item, "type", None) == "function_call"
            ]
            if not calls:
                output_text = response.output_text
                if not output_text:
                    raise RuntimeError("OpenAI returned an empty response")
                return json.loads(output_text)
            if tool_handler is None:
                raise RuntimeError("OpenAI requested a tool call but no handler is set")
            for call in calls:
                _logger.info("Tool call requested: name=%s", call.name)
                result = tool_handler(call.name, json.loads(call.arguments))
                conversation.append(
                    {
                        "type": "function_call",
                        "call_id": call.call_id,
                        "name": call.name,
                        "arguments": call.arguments,
                    }
                )
                conversation.append(
                    {
                        "type": "function_call_output",
                        "call_id": call.call_id,
                        "output": json.dumps(result),
                    }
                )
        raise RuntimeError("OpenAI exceeded the tool call round limit")
