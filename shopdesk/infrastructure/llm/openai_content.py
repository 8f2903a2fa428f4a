from __future__ import annotations

import base64
import json
from typing import Any

from openai import OpenAI

from shopdesk.application.exceptions import LLMContractError, LLMUpstreamError
from shopdesk.application.ports.llm import ContentGeneratorPort
from shopdesk.core.config import settings
from shopdesk.domain.entities.expanded_content import ExpandedContent, GraphLink, GraphNode, KeyInsight
from shopdesk.infrastructure.llm.prompts import (
    EXPAND_SYSTEM_INSTRUCTION,
    build_expand_prompt,
    build_image_prompt,
    build_speech_text,
)


class OpenAIContentGenerator(ContentGeneratorPort):
    """
    OpenAI-backed adapter implementing ContentGeneratorPort.

    Contract guarantees:
    - expand_idea returns ExpandedContent with title/summary/narrative set
    - generate_image returns a PNG data URL
    - generate_speech returns base64 audio
    - Raises:
        LLMUpstreamError: networking/provider failures
        LLMContractError: invalid JSON or wrong schema/shape
    """

    def __init__(self, client: OpenAI | None = None) -> None:
        self.client = client or OpenAI(api_key=settings.OPENAI_API_KEY)

    def expand_idea(self, seed: str) -> ExpandedContent:
        try:
            resp = self.client.chat.completions.create(
                model=settings.OPENAI_MODEL_EXPAND,
                messages=[
                    {"role": "system", "content": EXPAND_SYSTEM_INSTRUCTION},
                    {"role": "user", "content": build_expand_prompt(seed)},
                ],
                temperature=settings.OPENAI_TEMPERATURE_EXPAND,
                response_format={"type": "json_object"},
                max_tokens=2000,
            )
        except Exception as e:
            raise LLMUpstreamError(f"OpenAI API error: {e}") from e

        content = (resp.choices[0].message.content or "").strip() if resp.choices else ""
        if not content:
            raise LLMContractError("LLM returned empty response text.")

        return parse_expanded_content(_parse_json(content))

    def generate_image(self, prompt: str) -> str:
        try:
            resp = self.client.images.generate(
                model=settings.OPENAI_MODEL_IMAGE,
                prompt=build_image_prompt(prompt),
                size="1536x1024",
                n=1,
            )
        except Exception as e:
            raise LLMUpstreamError(f"OpenAI API error: {e}") from e

        data = resp.data[0].b64_json if resp.data else None
        if not data:
            raise LLMContractError("No image generated")
        return f"data:image/png;base64,{data}"

    def generate_speech(self, text: str) -> str:
        try:
            resp = self.client.audio.speech.create(
                model=settings.OPENAI_MODEL_SPEECH,
                voice=settings.OPENAI_VOICE,
                input=build_speech_text(text),
            )
            audio = resp.content
        except Exception as e:
            raise LLMUpstreamError(f"OpenAI API error: {e}") from e

        if not audio:
            raise LLMContractError("No audio generated")
        return base64.b64encode(audio).decode("ascii")


def parse_expanded_content(data: Any) -> ExpandedContent:
    if not isinstance(data, dict):
        raise LLMContractError("Expand: expected a JSON object.")

    for key in ("title", "summary", "narrative"):
        if not isinstance(data.get(key), str) or not data[key].strip():
            raise LLMContractError(f"Expand: '{key}' must be a non-empty string.")

    try:
        insights = tuple(
            KeyInsight(label=str(i["label"]), value=float(i["value"])) for i in data.get("keyInsights") or []
        )
        nodes = tuple(GraphNode(id=str(n["id"]), group=int(n["group"])) for n in data.get("nodes") or [])
        links = tuple(GraphLink(source=str(l["source"]), target=str(l["target"])) for l in data.get("links") or [])
    except (KeyError, TypeError, ValueError) as e:
        raise LLMContractError(f"Expand: invalid item shape: {e}")

    for insight in insights:
        if not 1 <= insight.value <= 100:
            raise LLMContractError("Expand: keyInsights values must be 1-100.")

    return ExpandedContent(
        title=data["title"].strip(),
        summary=data["summary"].strip(),
        narrative=data["narrative"].strip(),
        key_insights=insights,
        nodes=nodes,
        links=links,
        image_prompt=str(data.get("imagePrompt") or ""),
    )


def _parse_json(text: str) -> Any:
    try:
        return json.loads(text)
    except Exception:
        snippet = text[:200].replace("\n", " ")
        raise LLMContractError(f"Expand: invalid JSON. Snippet: {snippet!r}")
