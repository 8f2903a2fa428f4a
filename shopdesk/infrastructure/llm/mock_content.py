import base64

from shopdesk.application.ports.llm import ContentGeneratorPort
from shopdesk.domain.entities.expanded_content import ExpandedContent, GraphLink, GraphNode, KeyInsight

# 1x1 transparent PNG
_PLACEHOLDER_PNG = (
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAQAAAC1HAwCAAAAC0lEQVR42mNkYAAAAAYAAjCB0C8AAAAASUVORK5CYII="
)


class MockContentGenerator(ContentGeneratorPort):
    def expand_idea(self, seed: str) -> ExpandedContent:
        words = [w for w in seed.split() if w][:4] or [seed]
        nodes = (GraphNode(id=seed, group=1),) + tuple(GraphNode(id=w, group=2) for w in words if w != seed)
        links = tuple(GraphLink(source=seed, target=n.id) for n in nodes[1:])
        return ExpandedContent(
            title=f"Exploring {seed}",
            summary=f"A mock overview of {seed}.",
            narrative=f"Mock narrative unfolding the idea of {seed} into its parts.",
            key_insights=tuple(KeyInsight(label=w, value=min(100, 20 * (i + 1))) for i, w in enumerate(words)),
            nodes=nodes,
            links=links,
            image_prompt=f"Symbolic illustration of {seed}",
        )

    def generate_image(self, prompt: str) -> str:
        return f"data:image/png;base64,{_PLACEHOLDER_PNG}"

    def generate_speech(self, text: str) -> str:
        return base64.b64encode(text.encode("utf-8")).decode("ascii")
