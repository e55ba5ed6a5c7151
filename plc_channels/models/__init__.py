"""Data models for PLC channel assignment."""

from .plc_card import (
    CardLocation,
    PLCCard,
)

from .io_point import (
    IOType,
    SignalType,
    IOPoint,
)

from .results import (
    AssignmentFailure,
    AssignmentResult,
    BatchAssignmentResult,
    ConflictType,
    ChannelConflict,
    ConflictReport,
    UtilizationStatus,
    CardUtilization,
    ControllerUtilization,
    IOSystemSummary,
    CardSuggestion,
)

__all__ = [
    # Card
    "CardLocation",
    "PLCCard",
    # Point
    "IOType",
    "SignalType",
    "IOPoint",
    # Results
    "AssignmentFailure",
    "AssignmentResult",
    "BatchAssignmentResult",
    "ConflictType",
    "ChannelConflict",
    "ConflictReport",
    "UtilizationStatus",
    "CardUtilization",
    "ControllerUtilization",
    "IOSystemSummary",
    "CardSuggestion",
]
