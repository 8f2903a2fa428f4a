from abc import ABC, abstractmethod

from shopdesk.domain.entities.expanded_content import ExpandedContent


class ContentGeneratorPort(ABC):
    @abstractmethod
    def expand_idea(self, seed: str) -> ExpandedContent:
        """
        Expand a short idea into structured content.

        Requirements:
        - title, summary and narrative must be non-empty strings
        - key_insights values are in 1..100
        - every link endpoint should name a node id (adapter may drop dangling links)

        Raises:
            LLMUpstreamError: provider or network failure
            LLMContractError: response is not the expected JSON shape
        """
        raise NotImplementedError

    @abstractmethod
    def generate_image(self, prompt: str) -> str:
        """Return a `data:image/png;base64,...` URL for the prompt."""
        raise NotImplementedError

    @abstractmethod
    def generate_speech(self, text: str) -> str:
        """Return base64-encoded audio narrating `text`."""
        raise NotImplementedError
