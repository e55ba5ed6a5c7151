"""Result records returned by the channel assignment engine."""

from dataclasses import dataclass, field
from typing import List, Dict, Optional, Tuple
from collections import Counter
from enum import Enum

from .io_point import IOType, SignalType, IOPoint
from .plc_card import PLCCard, CardLocation


class AssignmentFailure(Enum):
    """Why a channel assignment attempt failed."""
    MISSING_IO_TYPE = "MISSING_IO_TYPE"
    CARD_NOT_FOUND = "CARD_NOT_FOUND"
    IO_TYPE_MISMATCH = "IO_TYPE_MISMATCH"
    SIGNAL_INCOMPATIBLE = "SIGNAL_INCOMPATIBLE"
    CARD_FULL = "CARD_FULL"
    NO_COMPATIBLE_CARD = "NO_COMPATIBLE_CARD"
    ALL_CARDS_FULL = "ALL_CARDS_FULL"


@dataclass(frozen=True)
class AssignmentResult:
    """Outcome of placing one I/O point."""
    success: bool
    assigned_channel: Optional[int] = None
    card: Optional[PLCCard] = None
    failure: Optional[AssignmentFailure] = None
    message: str = ""
    suggestions: List[str] = field(default_factory=list)

    @classmethod
    def ok(cls, card: PLCCard, channel: int) -> "AssignmentResult":
        return cls(
            success=True,
            assigned_channel=channel,
            card=card,
            message=f"Assigned to {card.name} channel {channel}",
        )

    @classmethod
    def fail(
        cls,
        failure: AssignmentFailure,
        message: str,
        suggestions: List[str]
    ) -> "AssignmentResult":
        return cls(
            success=False,
            failure=failure,
            message=message,
            suggestions=list(suggestions),
        )

    def apply_to(self, point: IOPoint) -> IOPoint:
        """
        Return a copy of the point carrying this assignment.

        Raises:
            ValueError: If the result is a failure
        """
        if not self.success:
            raise ValueError(f"Cannot apply failed assignment: {self.message}")
        return point.with_placement(self.card.location, self.assigned_channel)


@dataclass
class BatchAssignmentResult:
    """Outcome of assigning every unassigned point in a snapshot."""
    assigned_points: List[IOPoint]                          # Full updated point list
    # (point, result) per attempted point, in input order; tags may repeat
    results: List[Tuple[IOPoint, AssignmentResult]] = field(default_factory=list)
    unplaced: List[IOPoint] = field(default_factory=list)

    @property
    def assigned_count(self) -> int:
        return sum(1 for _, r in self.results if r.success)

    def results_for(self, tag: str) -> List[AssignmentResult]:
        """All results for points carrying the given tag."""
        return [r for point, r in self.results if point.tag == tag]

    @property
    def failed_count(self) -> int:
        return len(self.unplaced)


class ConflictType(Enum):
    """Kinds of placement invariant violation found by the auditor."""
    CHANNEL_OCCUPIED = "CHANNEL_OCCUPIED"
    INCOMPATIBLE_SIGNAL = "INCOMPATIBLE_SIGNAL"   # I/O type or signal type mismatch
    CARD_FULL = "CARD_FULL"
    NO_COMPATIBLE_CARD = "NO_COMPATIBLE_CARD"     # Referenced card does not exist


@dataclass(frozen=True)
class ChannelConflict:
    """A single detected violation attributed to one I/O point."""
    conflict_type: ConflictType
    message: str
    point_tag: str
    location: CardLocation
    channel: Optional[int] = None
    other_tags: List[str] = field(default_factory=list)
    suggestions: List[str] = field(default_factory=list)


@dataclass
class ConflictReport:
    """Result of auditing a point/card snapshot."""
    conflicts: List[ChannelConflict] = field(default_factory=list)

    @property
    def has_conflicts(self) -> bool:
        return len(self.conflicts) > 0

    def by_type(self, conflict_type: ConflictType) -> List[ChannelConflict]:
        """Conflicts of a single kind."""
        return [c for c in self.conflicts if c.conflict_type == conflict_type]

    def for_point(self, tag: str) -> List[ChannelConflict]:
        """Conflicts attributed to one point."""
        return [c for c in self.conflicts if c.point_tag == tag]

    def count_by_type(self) -> Dict[ConflictType, int]:
        return dict(Counter(c.conflict_type for c in self.conflicts))


class UtilizationStatus(Enum):
    """Utilization band of a card."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    FULL = "full"


@dataclass(frozen=True)
class CardUtilization:
    """Channel usage of one card."""
    card: PLCCard
    used_channels: int
    available_channels: int
    utilization_percentage: int
    status: UtilizationStatus


@dataclass(frozen=True)
class ControllerUtilization:
    """Channel usage rolled up per controller."""
    plc_name: str
    card_count: int
    used_channels: int
    total_channels: int
    utilization_percentage: int


@dataclass
class IOSystemSummary:
    """Snapshot-wide I/O metrics."""
    total_points: int
    points_by_io_type: Dict[str, int]
    points_by_signal_type: Dict[str, int]
    unassigned_points: int
    card_utilization: List[CardUtilization] = field(default_factory=list)

    @property
    def total_channels(self) -> int:
        return sum(row.card.total_channels for row in self.card_utilization)

    @property
    def used_channels(self) -> int:
        return sum(row.used_channels for row in self.card_utilization)


@dataclass(frozen=True)
class CardSuggestion:
    """Recommendation for additional cards of one size."""
    io_type: IOType
    signal_type: Optional[SignalType]
    channel_count: int
    cards_needed: int
    io_points_served: int
    reason: str
