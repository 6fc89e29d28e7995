"""
Text-generation agent backed by the Anthropic Messages API.

The model can call one tool, `search_places`, which runs the lazy place search
and hands back the formatted list. `AgentReply.used_tool` reports whether it did.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, List, Optional, Sequence

import anthropic

from domain.errors import AgentError, InvalidInput
from domain.models import AgentReply, ChatRole, ChatTurn
from services.lazy_search import LazySearchService
from services.response_formatter import format_places
from settings import settings

logger = logging.getLogger(__name__)

DEFAULT_INSTRUCTIONS = """You are a travel assistant for camper van and motorhome drivers.

Never invent places. Place data must come exclusively from the search_places tool.

When the user asks for places to park or camp somewhere:
1. Call search_places with the location they mentioned.
2. Show what the tool returns, including the links.
3. If the tool finds nothing, say so honestly.

When the user asks about places you already listed, answer from the conversation
without searching again."""

SEARCH_PLACES_TOOL = {
    "name": "search_places",
    "description": (
        "Search campsites and overnight parking spots around a location. "
        "Returns a numbered list with names, short descriptions and links."
    ),
    "input_schema": {
        "type": "object",
        "properties": {
            "location": {
                "type": "string",
                "description": "Town, area or place name the user wants to stay near.",
            }
        },
        "required": ["location"],
    },
}


def load_instructions() -> str:
    """System prompt from AGENT_INSTRUCTIONS, else AGENT_INSTRUCTIONS_PATH, else the default."""
    if settings.AGENT_INSTRUCTIONS:
        return settings.AGENT_INSTRUCTIONS
    if settings.AGENT_INSTRUCTIONS_PATH:
        path = Path(settings.AGENT_INSTRUCTIONS_PATH)
        try:
            return path.read_text(encoding="utf-8").strip() or DEFAULT_INSTRUCTIONS
        except OSError as exc:
            logger.warning("Could not read agent instructions from %s: %s", path, exc)
    return DEFAULT_INSTRUCTIONS


def render_prompt(message: str, history: Optional[Sequence[ChatTurn]] = None) -> str:
    """Prefix the current message with a plain transcript of earlier turns."""
    if not history:
        return message
    lines = ["Conversation so far:"]
    for turn in history:
        speaker = "User" if turn.role == ChatRole.USER else "Assistant"
        lines.append(f"{speaker}: {turn.content}")
    lines.append("")
    lines.append(f"Current message: {message}")
    return "\n".join(lines)


def _collect_text(response: Any) -> str:
    parts = [getattr(block, "text", "") for block in response.content if block.type == "text"]
    return "\n".join(p for p in parts if p).strip()


class PlacesAgent:
    def __init__(
        self,
        search_service: LazySearchService,
        client: Optional[anthropic.Anthropic] = None,
        model: Optional[str] = None,
        max_tokens: Optional[int] = None,
        max_tool_rounds: Optional[int] = None,
        instructions: Optional[str] = None,
    ):
        self.search_service = search_service
        self._client = client
        self.model = model or settings.AGENT_MODEL
        self.max_tokens = max_tokens or settings.AGENT_MAX_TOKENS
        self.max_tool_rounds = max_tool_rounds if max_tool_rounds is not None else settings.AGENT_MAX_TOOL_ROUNDS
        self.instructions = instructions or load_instructions()

    @property
    def client(self) -> anthropic.Anthropic:
        if self._client is None:
            if not settings.ANTHROPIC_API_KEY:
                raise AgentError("ANTHROPIC_API_KEY is not configured")
            self._client = anthropic.Anthropic(api_key=settings.ANTHROPIC_API_KEY)
        return self._client

    def _create(self, messages: List[dict]) -> Any:
        try:
            return self.client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                system=self.instructions,
                tools=[SEARCH_PLACES_TOOL],
                messages=messages,
            )
        except anthropic.AnthropicError as exc:
            raise AgentError(f"Agent request failed: {exc}") from exc

    def _run_tool(self, block: Any) -> dict:
        result: dict = {"type": "tool_result", "tool_use_id": block.id}
        if block.name != SEARCH_PLACES_TOOL["name"]:
            result.update(content=f"Unknown tool: {block.name}", is_error=True)
            return result
        args = block.input if isinstance(block.input, dict) else {}
        location = args.get("location")
        if not isinstance(location, str) or not location.strip():
            logger.warning("search_places called with unusable location %r", location)
            result.update(content="location must be a non-empty string", is_error=True)
            return result
        try:
            search = self.search_service.search(location)
        except InvalidInput as exc:
            result.update(content=str(exc), is_error=True)
            return result
        logger.info("search_places(%r) -> %s, %d places", location, search.status.value, len(search.records))
        result["content"] = format_places(search.records, search.term)
        return result

    def generate(self, message: str, history: Optional[Sequence[ChatTurn]] = None) -> AgentReply:
        """Run the model, executing search_places calls until it answers in text."""
        messages: List[dict] = [{"role": "user", "content": render_prompt(message, history)}]
        used_tool = False
        response = None
        for _ in range(self.max_tool_rounds + 1):
            response = self._create(messages)
            tool_calls = [b for b in response.content if b.type == "tool_use"]
            if response.stop_reason != "tool_use" or not tool_calls:
                return AgentReply(text=_collect_text(response), used_tool=used_tool)
            used_tool = True
            messages.append({"role": "assistant", "content": response.content})
            messages.append({"role": "user", "content": [self._run_tool(b) for b in tool_calls]})

        logger.warning("Agent still requesting tools after %d rounds; returning partial text", self.max_tool_rounds)
        return AgentReply(text=_collect_text(response), used_tool=used_tool)
