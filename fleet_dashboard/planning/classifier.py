"""
Instruction Classifier.

Picks a decomposition strategy from keyword pairs in the instruction text.
Pairs are checked in a fixed order and the first full match wins, so an
instruction mentioning "load", "transport", "clear" and "zone" is always a
load-and-transport job.
"""

from enum import Enum


class Strategy(str, Enum):
    """Decomposition strategies, in classification order."""
    LOAD_AND_TRANSPORT = "load_and_transport"
    CLEAR_ZONE = "clear_zone"
    FILL_CRUSHER = "fill_crusher"
    GENERIC = "generic"


STRATEGY_KEYWORDS = (
    (Strategy.LOAD_AND_TRANSPORT, ("load", "transport")),
    (Strategy.CLEAR_ZONE, ("clear", "zone")),
    (Strategy.FILL_CRUSHER, ("fill", "crusher")),
)


def classify_instruction(instruction: str) -> Strategy:
    """Return the strategy for an instruction. GENERIC when nothing matches."""
    text = (instruction or "").lower()
    for strategy, keywords in STRATEGY_KEYWORDS:
        if all(keyword in text for keyword in keywords):
            return strategy
    return Strategy.GENERIC
