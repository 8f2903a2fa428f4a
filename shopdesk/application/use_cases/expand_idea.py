from dataclasses import dataclass, replace

from shopdesk.application.exceptions import LLMContractError
from shopdesk.application.ports.llm import ContentGeneratorPort
from shopdesk.domain.entities.expanded_content import ExpandedContent

MAX_SEED_LENGTH = 500


@dataclass
class ExpandIdeaUseCase:
    generator: ContentGeneratorPort

    def execute(self, seed: str) -> ExpandedContent:
        seed_clean = (seed or "").strip()
        if not seed_clean:
            raise ValueError("Idea must not be empty.")
        if len(seed_clean) > MAX_SEED_LENGTH:
            raise ValueError(f"Idea must be at most {MAX_SEED_LENGTH} characters.")

        content = self.generator.expand_idea(seed_clean)

        if not content.title or not content.summary or not content.narrative:
            raise LLMContractError("Generator returned content without title, summary or narrative.")

        node_ids = {n.id for n in content.nodes}
        links = tuple(l for l in content.links if l.source in node_ids and l.target in node_ids)
        return replace(content, links=links)

    def illustrate(self, prompt: str) -> str:
        prompt_clean = (prompt or "").strip()
        if not prompt_clean:
            raise ValueError("Image prompt must not be empty.")
        return self.generator.generate_image(prompt_clean)

    def narrate(self, text: str) -> str:
        text_clean = (text or "").strip()
        if not text_clean:
            raise ValueError("Text to narrate must not be empty.")
        return self.generator.generate_speech(text_clean)
