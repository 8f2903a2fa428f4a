from __future__ import annotations

import base64
import json
from types import SimpleNamespace

import pytest

from shopdesk.application.exceptions import LLMContractError, LLMUpstreamError
from shopdesk.application.ports.llm import ContentGeneratorPort
from shopdesk.application.use_cases.expand_idea import MAX_SEED_LENGTH, ExpandIdeaUseCase
from shopdesk.domain.entities.expanded_content import ExpandedContent, GraphLink, GraphNode
from shopdesk.infrastructure.llm.mock_content import MockContentGenerator
from shopdesk.infrastructure.llm.openai_content import OpenAIContentGenerator, parse_expanded_content


class StaticGenerator(ContentGeneratorPort):
    def __init__(self, content: ExpandedContent) -> None:
        self.content = content

    def expand_idea(self, seed):
        return self.content

    def generate_image(self, prompt):
        return "data:image/png;base64,AAAA"

    def generate_speech(self, text):
        return "AAAA"


def _fake_openai(chat_reply=None, error: Exception | None = None):
    def create(**kwargs):
        if error:
            raise error
        message = SimpleNamespace(content=chat_reply)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])

    def generate(**kwargs):
        if error:
            raise error
        return SimpleNamespace(data=[SimpleNamespace(b64_json="iVBOR")])

    def speech(**kwargs):
        if error:
            raise error
        return SimpleNamespace(content=b"mp3-bytes")

    return SimpleNamespace(
        chat=SimpleNamespace(completions=SimpleNamespace(create=create)),
        images=SimpleNamespace(generate=generate),
        audio=SimpleNamespace(speech=SimpleNamespace(create=speech)),
    )


VALID_REPLY = {
    "title": "Hair care",
    "summary": "How hair care unfolds.",
    "narrative": "Long story.",
    "keyInsights": [{"label": "Moisture", "value": 80}],
    "nodes": [{"id": "hair", "group": 1}, {"id": "scalp", "group": 2}],
    "links": [{"source": "hair", "target": "scalp"}],
    "imagePrompt": "A glossy braid",
}


def test_dangling_links_are_dropped():
    content = ExpandedContent(
        title="t",
        summary="s",
        narrative="n",
        nodes=(GraphNode("a", 1), GraphNode("b", 1)),
        links=(GraphLink("a", "b"), GraphLink("a", "ghost")),
    )
    result = ExpandIdeaUseCase(StaticGenerator(content)).execute("  idea ")
    assert result.links == (GraphLink("a", "b"),)


def test_seed_is_validated():
    uc = ExpandIdeaUseCase(MockContentGenerator())
    with pytest.raises(ValueError):
        uc.execute("   ")
    with pytest.raises(ValueError):
        uc.execute("x" * (MAX_SEED_LENGTH + 1))


def test_incomplete_content_breaks_contract():
    uc = ExpandIdeaUseCase(StaticGenerator(ExpandedContent(title="t", summary="", narrative="n")))
    with pytest.raises(LLMContractError):
        uc.execute("idea")


def test_mock_generator_output_is_consistent():
    uc = ExpandIdeaUseCase(MockContentGenerator())
    content = uc.execute("scalp care routine")
    node_ids = {n.id for n in content.nodes}
    assert content.title
    assert all(l.source in node_ids and l.target in node_ids for l in content.links)
    assert uc.illustrate("braid").startswith("data:image/png;base64,")
    assert base64.b64decode(uc.narrate("hello")) == b"hello"


def test_illustrate_and_narrate_reject_empty_input():
    uc = ExpandIdeaUseCase(MockContentGenerator())
    with pytest.raises(ValueError):
        uc.illustrate("")
    with pytest.raises(ValueError):
        uc.narrate(" ")


def test_parse_expanded_content():
    content = parse_expanded_content(VALID_REPLY)
    assert content.title == "Hair care"
    assert content.key_insights[0].value == 80
    assert content.image_prompt == "A glossy braid"

    with pytest.raises(LLMContractError):
        parse_expanded_content({**VALID_REPLY, "title": ""})
    with pytest.raises(LLMContractError):
        parse_expanded_content({**VALID_REPLY, "keyInsights": [{"label": "x", "value": 0}]})
    with pytest.raises(LLMContractError):
        parse_expanded_content({**VALID_REPLY, "nodes": [{"id": "x"}]})
    with pytest.raises(LLMContractError):
        parse_expanded_content(["not", "an", "object"])


def test_openai_adapter_maps_replies():
    generator = OpenAIContentGenerator(client=_fake_openai(json.dumps(VALID_REPLY)))

    assert generator.expand_idea("hair").title == "Hair care"
    assert generator.generate_image("braid") == "data:image/png;base64,iVBOR"
    assert base64.b64decode(generator.generate_speech("hi")) == b"mp3-bytes"


def test_openai_adapter_wraps_provider_errors():
    generator = OpenAIContentGenerator(client=_fake_openai(error=RuntimeError("rate limited")))
    with pytest.raises(LLMUpstreamError):
        generator.expand_idea("hair")
    with pytest.raises(LLMUpstreamError):
        generator.generate_image("braid")
    with pytest.raises(LLMUpstreamError):
        generator.generate_speech("hi")


def test_openai_adapter_rejects_non_json_reply():
    generator = OpenAIContentGenerator(client=_fake_openai("here is your map: ..."))
    with pytest.raises(LLMContractError):
        generator.expand_idea("hair")
