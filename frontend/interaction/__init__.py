"""
Interaction Contracts and Routing

User intents as immutable events, routed into sessions and re-emitted
to registered listeners.
"""

from .events import InteractionType, InteractionEvent
from .router import InteractionListener, InteractionRouter

__all__ = [
    'InteractionType',
    'InteractionEvent',
    'InteractionListener',
    'InteractionRouter',
]
