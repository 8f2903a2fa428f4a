from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class KeyInsight:
    label: str
    value: float  # 1-100


@dataclass(frozen=True)
class GraphNode:
    id: str
    group: int


@dataclass(frozen=True)
class GraphLink:
    source: str
    target: str


@dataclass(frozen=True)
class ExpandedContent:
    title: str
    summary: str
    narrative: str
    key_insights: Tuple[KeyInsight, ...] = ()
    nodes: Tuple[GraphNode, ...] = ()
    links: Tuple[GraphLink, ...] = ()
    image_prompt: str = ""
