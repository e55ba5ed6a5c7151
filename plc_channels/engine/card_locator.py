"""Card lookup and channel occupancy."""

from typing import Dict, Iterable, List, Optional, Sequence

from ..models import IOPoint, PLCCard, CardLocation


def find_card(
    cards: Iterable[PLCCard],
    plc_name: str,
    rack: int,
    slot: int
) -> Optional[PLCCard]:
    """
    Find the card at a controller/rack/slot position.

    Identity triples are expected to be unique. If the snapshot holds
    duplicates the first match wins; loaders report duplicates as
    validation errors so they are caught before reaching the engine.
    """
    for card in cards:
        if card.plc_name == plc_name and card.rack == rack and card.slot == slot:
            return card
    return None


def used_channels(card: PLCCard, points: Iterable[IOPoint]) -> List[int]:
    """
    Channel indices occupied on a card.

    Args:
        card: Card to inspect
        points: Points to scan (typically the whole snapshot)

    Returns:
        Sorted list of distinct channel indices. A channel held by several
        points counts once; the collision itself is the auditor's concern.
    """
    location = card.location
    return sorted({
        point.channel
        for point in points
        if point.channel is not None and point.location == location
    })


def next_free_channel(card: PLCCard, used: Sequence[int]) -> Optional[int]:
    """
    Lowest channel index not in use.

    Scans 0..total_channels-1 in ascending order, so assignments always
    compact toward low channel numbers.

    Returns:
        Channel index, or None if every channel is occupied
    """
    occupied = set(used)
    for channel in range(card.total_channels):
        if channel not in occupied:
            return channel
    return None


def find_duplicate_cards(cards: Iterable[PLCCard]) -> Dict[CardLocation, List[PLCCard]]:
    """Identity triples claimed by more than one card."""
    by_location: Dict[CardLocation, List[PLCCard]] = {}
    for card in cards:
        by_location.setdefault(card.location, []).append(card)
    return {loc: group for loc, group in by_location.items() if len(group) > 1}
