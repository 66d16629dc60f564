"""
Test Fixtures

Explicit topic datasets for deterministic testing.
All fixtures are explicit - no random generation.
"""

from typing import List, Tuple

from adapter.providers import InMemoryTopicProvider
from topicgraph.contracts import LearningStatus, PrerequisiteEdge, TopicKind, TopicNode


def topic(topic_id: str, name: str = None, **kwargs) -> TopicNode:
    return TopicNode(topic_id=topic_id, name=name or topic_id, **kwargs)


def edge(prerequisite_id: str, dependent_id: str) -> PrerequisiteEdge:
    return PrerequisiteEdge(prerequisite_id, dependent_id)


# =============================================================================
# DIAMOND: A -> B, A -> C, B -> D, C -> D
# =============================================================================

DIAMOND_NODES = (
    topic("A", prerequisite_count=0, effect_count=2),
    topic("B", prerequisite_count=1, effect_count=1),
    topic("C", prerequisite_count=1, effect_count=1),
    topic("D", prerequisite_count=2, effect_count=0),
)

DIAMOND_EDGES = (
    edge("A", "B"),
    edge("A", "C"),
    edge("B", "D"),
    edge("C", "D"),
)


# =============================================================================
# CHAIN: P -> X -> Y -> Z -> W (cascade collapse)
# =============================================================================

CHAIN_NODES = tuple(topic(t, effect_count=1) for t in ("P", "X", "Y", "Z")) + (topic("W"),)

CHAIN_EDGES = (
    edge("P", "X"),
    edge("X", "Y"),
    edge("Y", "Z"),
    edge("Z", "W"),
)


# =============================================================================
# WIDE: M with two prerequisite and two effect branches
# =============================================================================

WIDE_NODES = (
    topic("M", "Calculus"),
    topic("P1", "Limits"),
    topic("P2", "Functions"),
    topic("E1", "Differential Equations"),
    topic("E2", "Series"),
    topic("Q1", "Sets"),
    topic("Q2", "Logic"),
    topic("Q3", "Proofs"),
    topic("R1", "Graphs"),
    topic("F1", "Dynamical Systems"),
    topic("F2", "Fourier Analysis"),
)

WIDE_EDGES = (
    edge("P1", "M"),
    edge("P2", "M"),
    edge("M", "E1"),
    edge("M", "E2"),
    edge("Q1", "P1"),
    edge("Q2", "P1"),
    edge("Q3", "P1"),
    edge("R1", "P2"),
    edge("E1", "F1"),
    edge("E2", "F2"),
)


# =============================================================================
# MIXED NAMES: >= 3 nodes per level, long and short labels
# =============================================================================

MIXED_NODES = (
    topic("root1", "Arithmetic", kind=TopicKind.THEORY, status=LearningStatus.LEARNED),
    topic("root2", "Supercalifragilisticexpialidocious Foundations", kind=TopicKind.PRACTICE),
    topic("root3", "Sets", kind=TopicKind.PROJECT, status=LearningStatus.LEARNING),
    topic("mid1", "Algebra"),
    topic("mid2", "Introduction to Mathematical Reasoning and Proof Techniques"),
    topic("mid3", "Geometry"),
    topic("mid4", "Electromagnetism and Thermodynamics"),
    topic("top1", "Calculus"),
    topic("top2", "Linear Algebra Fundamentals"),
    topic("top3", "Topology"),
)

MIXED_EDGES = (
    edge("root1", "mid1"),
    edge("root2", "mid2"),
    edge("root3", "mid3"),
    edge("root1", "mid4"),
    edge("root3", "mid4"),
    edge("mid1", "top1"),
    edge("mid2", "top2"),
    edge("mid3", "top3"),
    edge("mid4", "top1"),
)


def diamond_provider(**kwargs) -> InMemoryTopicProvider:
    return InMemoryTopicProvider(DIAMOND_NODES, DIAMOND_EDGES, **kwargs)


def chain_provider(**kwargs) -> InMemoryTopicProvider:
    return InMemoryTopicProvider(CHAIN_NODES, CHAIN_EDGES, **kwargs)


def wide_provider(**kwargs) -> InMemoryTopicProvider:
    return InMemoryTopicProvider(WIDE_NODES, WIDE_EDGES, **kwargs)


def mixed_provider(**kwargs) -> InMemoryTopicProvider:
    return InMemoryTopicProvider(MIXED_NODES, MIXED_EDGES, **kwargs)


def overlapping_pairs(nodes) -> List[Tuple[str, str]]:
    """Every pair of positioned nodes whose boxes intersect."""
    nodes = list(nodes)
    return [
        (a.node_id, b.node_id)
        for i, a in enumerate(nodes)
        for b in nodes[i + 1:]
        if a.overlaps(b)
    ]
