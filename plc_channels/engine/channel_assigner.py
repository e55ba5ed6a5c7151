"""Channel assignment engine for placing I/O points on PLC cards."""

import logging
from typing import List, Sequence, Tuple

from ..models import (
    IOPoint,
    PLCCard,
    AssignmentFailure,
    AssignmentResult,
    BatchAssignmentResult,
)
from .compatibility import is_signal_compatible, describe_accepted
from .card_locator import find_card, used_channels, next_free_channel

logger = logging.getLogger(__name__)


def auto_assign_channel(
    point: IOPoint,
    cards: Sequence[PLCCard],
    all_points: Sequence[IOPoint]
) -> AssignmentResult:
    """
    Find a channel for an I/O point.

    When the point carries a controller/rack/slot hint the point is placed
    on that card only. Otherwise the best available compatible card is
    chosen.

    The result is provisional: nothing is written back to the point, and
    the caller is expected to apply it (see AssignmentResult.apply_to) and
    re-run the conflict auditor after a batch of placements.

    Args:
        point: Point to place
        cards: All PLC cards in the snapshot
        all_points: All points in the snapshot (defines channel occupancy)

    Returns:
        AssignmentResult describing the chosen channel or the failure
    """
    if point.io_type is None:
        return AssignmentResult.fail(
            AssignmentFailure.MISSING_IO_TYPE,
            f"I/O point {point.tag} must have an I/O type defined",
            ["Set the I/O type (AI, AO, DI, DO) for this I/O point"],
        )

    if point.location is not None:
        return assign_to_specific_card(point, cards, all_points)

    return assign_to_best_available_card(point, cards, all_points)


def assign_to_specific_card(
    point: IOPoint,
    cards: Sequence[PLCCard],
    all_points: Sequence[IOPoint]
) -> AssignmentResult:
    """
    Assign a point to the card named by its controller/rack/slot hint.

    Checks, in order: the card exists, I/O types match, signal types are
    compatible, a channel is free.
    """
    location = point.location
    card = find_card(cards, location.plc_name, location.rack, location.slot)

    if card is None:
        return AssignmentResult.fail(
            AssignmentFailure.CARD_NOT_FOUND,
            f"No card found at PLC: {location.plc_name}, "
            f"Rack: {location.rack}, Slot: {location.slot}",
            [
                "Check that the PLC card exists",
                "Create the required PLC card",
                "Use auto-assignment instead",
            ],
        )

    if card.io_type != point.io_type:
        return AssignmentResult.fail(
            AssignmentFailure.IO_TYPE_MISMATCH,
            f"I/O type mismatch. Card {card.name} supports {card.io_type.value}, "
            f"but I/O point is {point.io_type.value}",
            [
                f"Change I/O point type to {card.io_type.value}",
                "Find a compatible card",
                "Use auto-assignment to find compatible card",
            ],
        )

    if not is_signal_compatible(card.signal_type, point.signal_type):
        return AssignmentResult.fail(
            AssignmentFailure.SIGNAL_INCOMPATIBLE,
            f"Signal type incompatible. Card {card.name} supports {card.signal_type.value}, "
            f"but I/O point is {point.signal_type.value}",
            [
                f"Change signal type to one of: {describe_accepted(card.signal_type)}",
                "Find a compatible card",
                "Use auto-assignment to find compatible card",
            ],
        )

    used = used_channels(card, all_points)
    channel = next_free_channel(card, used)

    if channel is None:
        return AssignmentResult.fail(
            AssignmentFailure.CARD_FULL,
            f"No available channels on card {card.name}. "
            f"All {card.total_channels} channels are in use.",
            [
                "Add more I/O cards of this type",
                "Free up unused channels",
                "Use auto-assignment to find available cards",
            ],
        )

    logger.debug("Assigned %s to %s channel %d", point.tag, card.name, channel)
    return AssignmentResult.ok(card, channel)


def assign_to_best_available_card(
    point: IOPoint,
    cards: Sequence[PLCCard],
    all_points: Sequence[IOPoint]
) -> AssignmentResult:
    """
    Assign a point to the least utilized compatible card.

    Cards on the point's own controller (plc_name) are preferred when the
    point names one. Ties on utilization keep card input order.
    """
    compatible = [
        card for card in cards
        if card.io_type == point.io_type
        and is_signal_compatible(card.signal_type, point.signal_type)
    ]

    if not compatible:
        signal_text = f" / {point.signal_type.value}" if point.signal_type else ""
        return AssignmentResult.fail(
            AssignmentFailure.NO_COMPATIBLE_CARD,
            f"No compatible PLC cards found for I/O type: {point.io_type.value}{signal_text}",
            [
                f"Add a PLC card that supports {point.io_type.value}",
                "Check signal type compatibility",
                "Review I/O point configuration",
            ],
        )

    candidates: List[Tuple[PLCCard, List[int]]] = []
    for card in compatible:
        used = used_channels(card, all_points)
        if next_free_channel(card, used) is not None:
            candidates.append((card, used))

    if not candidates:
        return AssignmentResult.fail(
            AssignmentFailure.ALL_CARDS_FULL,
            f"All {len(compatible)} compatible PLC cards for {point.io_type.value} are full",
            [
                "Add more I/O cards",
                "Free up unused channels",
                "Review channel assignments",
            ],
        )

    def sort_key(candidate: Tuple[PLCCard, List[int]]):
        card, used = candidate
        other_plc = 0
        if point.plc_name:
            other_plc = 0 if card.plc_name == point.plc_name else 1
        return (other_plc, len(used) / card.total_channels)

    best_card, best_used = sorted(candidates, key=sort_key)[0]
    channel = next_free_channel(best_card, best_used)

    logger.debug(
        "Assigned %s to %s channel %d (%d candidate cards)",
        point.tag, best_card.name, channel, len(candidates)
    )
    return AssignmentResult.ok(best_card, channel)


def auto_assign_all(
    points: Sequence[IOPoint],
    cards: Sequence[PLCCard]
) -> BatchAssignmentResult:
    """
    Assign every unassigned point in a snapshot.

    Points are processed in input order. Each successful placement is
    applied to a working copy of the snapshot before the next point is
    placed, so later points see earlier placements as occupied. The input
    sequence and its points are left untouched.

    Args:
        points: All points in the snapshot
        cards: All PLC cards in the snapshot

    Returns:
        BatchAssignmentResult with the updated point list, per-point results
        and the points that could not be placed
    """
    working = list(points)
    results = []
    unplaced = []

    for index, point in enumerate(points):
        if point.is_assigned:
            continue

        result = auto_assign_channel(point, cards, working)
        results.append((point, result))

        if result.success:
            working[index] = result.apply_to(point)
        else:
            unplaced.append(point)

    logger.info(
        "Batch assignment: %d assigned, %d unplaced",
        len(results) - len(unplaced), len(unplaced)
    )
    return BatchAssignmentResult(
        assigned_points=working,
        results=results,
        unplaced=unplaced,
    )
