"""Conflict detection over a point/card snapshot."""

import logging
from typing import Dict, List, Sequence

from ..models import (
    IOPoint,
    PLCCard,
    CardLocation,
    ConflictType,
    ChannelConflict,
    ConflictReport,
)
from .compatibility import is_signal_compatible, describe_accepted
from .card_locator import find_card

logger = logging.getLogger(__name__)


MISSING_CARD_SUGGESTIONS = [
    "Create the missing PLC card",
    "Verify PLC configuration",
    "Reassign I/O point to existing card",
]

CHANNEL_OCCUPIED_SUGGESTIONS = [
    "Use auto-assignment to resolve conflicts",
    "Manually reassign to available channels",
    "Add more I/O cards if needed",
]

CARD_FULL_SUGGESTIONS = [
    "Add more I/O cards",
    "Move some I/O points to other cards",
    "Use auto-assignment to redistribute",
]


def group_points_by_card(points: Sequence[IOPoint]) -> Dict[CardLocation, List[IOPoint]]:
    """
    Group assigned points by card identity.

    Unassigned points are ignored. Groups and the points within them keep
    first-seen order.
    """
    groups: Dict[CardLocation, List[IOPoint]] = {}
    for point in points:
        if point.is_assigned:
            groups.setdefault(point.location, []).append(point)
    return groups


def detect_conflicts(
    all_points: Sequence[IOPoint],
    cards: Sequence[PLCCard]
) -> ConflictReport:
    """
    Audit a snapshot for placement invariant violations.

    For each card referenced by an assigned point, reports:
    - NO_COMPATIBLE_CARD for every point when the card does not exist
    - CHANNEL_OCCUPIED for every point sharing a channel with another
    - INCOMPATIBLE_SIGNAL for I/O type or signal type mismatches
    - CARD_FULL for the points beyond the card's channel count, in
      encounter order

    The audit never raises and returns the same report for the same
    snapshot.

    Args:
        all_points: All points in the snapshot
        cards: All PLC cards in the snapshot

    Returns:
        ConflictReport (empty for a clean snapshot)
    """
    conflicts: List[ChannelConflict] = []

    for location, group in group_points_by_card(all_points).items():
        card = find_card(cards, location.plc_name, location.rack, location.slot)

        if card is None:
            conflicts.extend(_missing_card_conflicts(location, group))
            continue

        conflicts.extend(_channel_collisions(location, group))
        conflicts.extend(_compatibility_conflicts(card, group))
        conflicts.extend(_capacity_conflicts(card, group))

    report = ConflictReport(conflicts=conflicts)
    logger.debug(
        "Audited %d points against %d cards: %d conflicts",
        len(all_points), len(cards), len(conflicts)
    )
    return report


def _missing_card_conflicts(
    location: CardLocation,
    group: List[IOPoint]
) -> List[ChannelConflict]:
    return [
        ChannelConflict(
            conflict_type=ConflictType.NO_COMPATIBLE_CARD,
            message=f"PLC card not found: {location.plc_name} "
                    f"Rack {location.rack} Slot {location.slot}",
            point_tag=point.tag,
            location=location,
            channel=point.channel,
            suggestions=list(MISSING_CARD_SUGGESTIONS),
        )
        for point in group
    ]


def _channel_collisions(
    location: CardLocation,
    group: List[IOPoint]
) -> List[ChannelConflict]:
    by_channel: Dict[int, List[IOPoint]] = {}
    for point in group:
        by_channel.setdefault(point.channel, []).append(point)

    conflicts = []
    for channel, sharing in by_channel.items():
        if len(sharing) < 2:
            continue
        for index, point in enumerate(sharing):
            # Other occupants by position, so duplicate tags still name each other
            other_tags = [other.tag for i, other in enumerate(sharing) if i != index]
            conflicts.append(ChannelConflict(
                conflict_type=ConflictType.CHANNEL_OCCUPIED,
                message=f"Channel {channel} is assigned to multiple I/O points: "
                        f"{', '.join(other_tags)}",
                point_tag=point.tag,
                location=location,
                channel=channel,
                other_tags=other_tags,
                suggestions=list(CHANNEL_OCCUPIED_SUGGESTIONS),
            ))
    return conflicts


def _compatibility_conflicts(card: PLCCard, group: List[IOPoint]) -> List[ChannelConflict]:
    conflicts = []
    for point in group:
        if point.io_type is not None and point.io_type != card.io_type:
            conflicts.append(ChannelConflict(
                conflict_type=ConflictType.INCOMPATIBLE_SIGNAL,
                message=f"I/O type mismatch: card supports {card.io_type.value}, "
                        f"I/O point is {point.io_type.value}",
                point_tag=point.tag,
                location=card.location,
                channel=point.channel,
                suggestions=[
                    f"Change I/O type to {card.io_type.value}",
                    "Move to compatible card",
                    "Use auto-assignment",
                ],
            ))

        if not is_signal_compatible(card.signal_type, point.signal_type):
            conflicts.append(ChannelConflict(
                conflict_type=ConflictType.INCOMPATIBLE_SIGNAL,
                message=f"Signal type incompatible: card supports {card.signal_type.value}, "
                        f"I/O point is {point.signal_type.value}",
                point_tag=point.tag,
                location=card.location,
                channel=point.channel,
                suggestions=[
                    f"Change signal type to one of: {describe_accepted(card.signal_type)}",
                    "Move to compatible card",
                    "Use auto-assignment",
                ],
            ))
    return conflicts


def _capacity_conflicts(card: PLCCard, group: List[IOPoint]) -> List[ChannelConflict]:
    if len(group) <= card.total_channels:
        return []

    # TODO: confirm whether the overflow should be chosen by channel index
    # instead of encounter order when channels are sparse.
    overflow = group[card.total_channels:]
    return [
        ChannelConflict(
            conflict_type=ConflictType.CARD_FULL,
            message=f"Card is over capacity: {len(group)} I/O points assigned "
                    f"to {card.total_channels} channel card",
            point_tag=point.tag,
            location=card.location,
            channel=point.channel,
            suggestions=list(CARD_FULL_SUGGESTIONS),
        )
        for point in overflow
    ]
