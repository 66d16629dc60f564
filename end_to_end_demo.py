"""
End-to-End Integration Demo

Walks the complete pipeline:
Provider (in-memory topics) → Engine (sessions + layout) → Frontend (render views)
"""

import sys
import os
import asyncio
import logging

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from adapter.contracts import FullGraphPayload
from adapter.providers import InMemoryTopicProvider, ProviderErrorCode
from frontend.interaction import InteractionEvent, InteractionRouter
from frontend.mapper import GraphViewMapper
from topicgraph import TopicGraphEngine
from topicgraph.config import EngineConfig
from topicgraph.contracts import Direction


CATALOGUE = {
    "nodes": [
        {"id": "sets", "name": "Sets", "type": "THEORY", "status": "LEARNED", "effectCount": 2},
        {"id": "logic", "name": "Logic", "type": "THEORY", "status": "LEARNED", "effectCount": 1},
        {"id": "functions", "name": "Functions", "type": "THEORY", "prerequisiteCount": 1, "effectCount": 1},
        {"id": "proofs", "name": "Introduction to Proofs", "type": "PRACTICE", "prerequisiteCount": 2, "effectCount": 1},
        {"id": "limits", "name": "Limits", "type": "THEORY", "status": "LEARNING", "prerequisiteCount": 2, "effectCount": 1},
        {"id": "calculus", "name": "Calculus", "type": "THEORY", "status": "WANT_TO_LEARN", "prerequisiteCount": 1, "effectCount": 2},
        {"id": "odes", "name": "Differential Equations", "type": "PRACTICE", "prerequisiteCount": 1},
        {"id": "physics", "name": "Pendulum Simulation", "type": "PROJECT", "prerequisiteCount": 1},
    ],
    "edges": [
        {"source": "sets", "target": "functions"},
        {"source": "sets", "target": "proofs"},
        {"source": "logic", "target": "proofs"},
        {"source": "functions", "target": "limits"},
        {"source": "proofs", "target": "limits"},
        {"source": "limits", "target": "calculus"},
        {"source": "calculus", "target": "odes"},
        {"source": "calculus", "target": "physics"},
        {"source": "calculus", "target": "quantum"},
    ],
}


def print_view(title, view):
    print(f"\n{title} [{view.availability.value}] {view.view_id}")
    for node in view.nodes:
        badges = " ".join(b.label for b in node.badges)
        print(f"  {node.icon} {node.node_id:<10} ({node.x:7.1f}, {node.y:7.1f})  "
              f"border={node.border_color} {badges}")
    for edge in view.edges:
        print(f"  {edge.edge_id:<22} {edge.path}")


def build_provider():
    """Layer 1: Topic data from collaborator JSON."""
    print("\n" + "="*60)
    print("LAYER 1: TOPIC DATA PROVIDER")
    print("="*60)

    payload = FullGraphPayload.from_json(CATALOGUE)
    print(f"Loaded {len(payload.nodes)} topics, {len(payload.edges)} edges")
    return InMemoryTopicProvider(payload.nodes, payload.edges, latency_ms=5.0)


async def run_global_view(engine, mapper):
    """Layer 2: Global grid layout."""
    print("\n" + "="*60)
    print("LAYER 2: GLOBAL VIEW")
    print("="*60)

    session = engine.global_session()
    result = await session.load()
    print(f"Load: {result.value}")
    for entry in session.diagnostics.get_entries():
        print(f"  ⚠ {entry.diagnostic_type.value}: {entry.message}")

    session.highlight(["limits", "calculus"])
    print_view("Global", mapper.map_global(session))

    router = InteractionRouter(global_session=session)
    await router.dispatch(InteractionEvent.activated("calculus"))
    return session.activated_id


async def run_local_view(engine, mapper, center_id):
    """Layer 3: Local zone layout with expand/collapse."""
    print("\n" + "="*60)
    print(f"LAYER 3: LOCAL VIEW AROUND {center_id!r}")
    print("="*60)

    session = engine.local_session(center_id)
    router = InteractionRouter(local_session=session)

    await session.initialize()
    print_view("Initial", mapper.map_local(session))

    await router.toggle("limits", Direction.PREREQUISITES)
    print_view("Expanded limits ↑", mapper.map_local(session, hovered_id="proofs"))

    before = session.positions
    await router.toggle("calculus", Direction.EFFECTS)
    moved = [n for n, p in before.items() if session.positions.get(n) != p]
    print(f"\nCollapsed calculus ↓; nodes moved: {moved or 'none'}")

    await router.dispatch(InteractionEvent.activated("proofs"))
    print_view("Recentred", mapper.map_local(session))


async def run_failure_handling(engine, provider):
    """Layer 4: Explicit failures."""
    print("\n" + "="*60)
    print("LAYER 4: FAILURE HANDLING")
    print("="*60)

    session = engine.local_session("calculus")
    await session.initialize()

    provider.set_failure_mode(ProviderErrorCode.NETWORK_ERROR)
    result = await session.expand("limits", Direction.PREREQUISITES)
    print(f"Expand while offline: {result.error.code.value} ({result.error.message})")
    print(f"Nodes unchanged: {list(session.node_ids)}")
    provider.set_failure_mode(None)

    result = await session.expand("nowhere", Direction.EFFECTS)
    print(f"Expand unknown node: {result.error.code.value}")


async def main():
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")

    provider = build_provider()
    engine = TopicGraphEngine(provider, EngineConfig.from_env())
    mapper = GraphViewMapper()

    activated = await run_global_view(engine, mapper)
    if activated:
        await run_local_view(engine, mapper, activated)
    else:
        print("\n⚠ Nothing activated, skipping local view.")

    await run_failure_handling(engine, provider)


if __name__ == "__main__":
    asyncio.run(main())
