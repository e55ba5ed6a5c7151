"""PLC card configuration advisor."""

import logging
from typing import Dict, List, Optional, Sequence, Tuple

from ..config import EngineSettings, get_settings
from ..models import IOPoint, IOType, SignalType, CardSuggestion

logger = logging.getLogger(__name__)


def group_points_by_requirement(
    points: Sequence[IOPoint]
) -> Dict[Tuple[IOType, Optional[SignalType]], List[IOPoint]]:
    """Group points by (I/O type, signal type); points without an I/O type are skipped."""
    groups: Dict[Tuple[IOType, Optional[SignalType]], List[IOPoint]] = {}
    for point in points:
        if point.io_type is None:
            continue
        groups.setdefault((point.io_type, point.signal_type), []).append(point)
    return groups


def suggest_card_configuration(
    unplaced_points: Sequence[IOPoint],
    settings: Optional[EngineSettings] = None
) -> List[CardSuggestion]:
    """
    Propose additional cards for points that could not be placed.

    Each (I/O type, signal type) group is covered greedily with standard
    card sizes taken largest first. Whatever is left after the largest
    sizes is covered by one card of the smallest size.

    Args:
        unplaced_points: Points lacking a successful placement
        settings: Standard card sizes (defaults from get_settings)

    Returns:
        Suggestions sorted by I/O type, then by channel count (largest first)
    """
    settings = settings or get_settings()
    sizes = settings.standard_card_sizes
    suggestions: List[CardSuggestion] = []

    for (io_type, signal_type), group in group_points_by_requirement(unplaced_points).items():
        remaining = len(group)

        for size in sizes:
            cards_needed = remaining // size
            if cards_needed > 0:
                suggestions.append(CardSuggestion(
                    io_type=io_type,
                    signal_type=signal_type,
                    channel_count=size,
                    cards_needed=cards_needed,
                    io_points_served=cards_needed * size,
                    reason=f"Efficient {size}-channel cards for {io_type.value} signals",
                ))
                remaining -= cards_needed * size

        if remaining > 0:
            suggestions.append(CardSuggestion(
                io_type=io_type,
                signal_type=signal_type,
                channel_count=settings.smallest_card_size,
                cards_needed=1,
                io_points_served=remaining,
                reason=f"Handle remaining {remaining} {io_type.value} channels",
            ))

    suggestions.sort(key=lambda s: (s.io_type.value, -s.channel_count))
    logger.debug("Suggested %d card entries for %d points", len(suggestions), len(unplaced_points))
    return suggestions


def total_cards(suggestions: Sequence[CardSuggestion]) -> int:
    """Total number of cards across suggestions."""
    return sum(s.cards_needed for s in suggestions)
