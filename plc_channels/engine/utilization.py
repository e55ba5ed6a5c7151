"""Card and controller utilization reporting."""

import math
from collections import Counter
from typing import Dict, List, Optional, Sequence

from ..config import EngineSettings, get_settings
from ..models import (
    IOPoint,
    PLCCard,
    UtilizationStatus,
    CardUtilization,
    ControllerUtilization,
    IOSystemSummary,
)
from .card_locator import used_channels


def round_percent(used: int, total: int) -> int:
    """Percentage rounded half-up; 0 for a card without channels."""
    if total <= 0:
        return 0
    return math.floor(used / total * 100 + 0.5)


def classify_utilization(
    percentage: int,
    settings: Optional[EngineSettings] = None
) -> UtilizationStatus:
    """Map a utilization percentage onto its status band."""
    settings = settings or get_settings()
    if percentage >= 100:
        return UtilizationStatus.FULL
    if percentage >= settings.high_utilization_percent:
        return UtilizationStatus.HIGH
    if percentage >= settings.medium_utilization_percent:
        return UtilizationStatus.MEDIUM
    return UtilizationStatus.LOW


def get_card_utilization(
    cards: Sequence[PLCCard],
    all_points: Sequence[IOPoint],
    settings: Optional[EngineSettings] = None
) -> List[CardUtilization]:
    """
    Channel usage for every card.

    Uses the same occupancy primitive as the channel assigner, so a card
    reported as full here is never offered a channel there.

    Args:
        cards: PLC cards to report on
        all_points: All points in the snapshot
        settings: Utilization bands (defaults from get_settings)

    Returns:
        One CardUtilization per card, in card order
    """
    rows = []
    for card in cards:
        used = len(used_channels(card, all_points))
        percentage = round_percent(used, card.total_channels)
        rows.append(CardUtilization(
            card=card,
            used_channels=used,
            available_channels=card.total_channels - used,
            utilization_percentage=percentage,
            status=classify_utilization(percentage, settings),
        ))
    return rows


def get_controller_utilization(
    cards: Sequence[PLCCard],
    all_points: Sequence[IOPoint]
) -> List[ControllerUtilization]:
    """Roll card usage up per controller, in first-seen controller order."""
    totals: Dict[str, List[int]] = {}   # plc_name -> [cards, used, total]
    for row in get_card_utilization(cards, all_points):
        entry = totals.setdefault(row.card.plc_name, [0, 0, 0])
        entry[0] += 1
        entry[1] += row.used_channels
        entry[2] += row.card.total_channels

    return [
        ControllerUtilization(
            plc_name=plc_name,
            card_count=card_count,
            used_channels=used,
            total_channels=total,
            utilization_percentage=round_percent(used, total),
        )
        for plc_name, (card_count, used, total) in totals.items()
    ]


def summarize_io_system(
    all_points: Sequence[IOPoint],
    cards: Sequence[PLCCard],
    settings: Optional[EngineSettings] = None
) -> IOSystemSummary:
    """
    Snapshot-wide I/O metrics.

    Points without an I/O type or signal type are counted under "Unknown".
    """
    by_io_type = Counter(
        p.io_type.value if p.io_type else "Unknown" for p in all_points
    )
    by_signal_type = Counter(
        p.signal_type.value if p.signal_type else "Unknown" for p in all_points
    )
    unassigned = sum(1 for p in all_points if not p.is_assigned)

    return IOSystemSummary(
        total_points=len(all_points),
        points_by_io_type=dict(by_io_type),
        points_by_signal_type=dict(by_signal_type),
        unassigned_points=unassigned,
        card_utilization=get_card_utilization(cards, all_points, settings),
    )
