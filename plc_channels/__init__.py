"""PLC I/O Channel Assignment & Conflict Engine.

Maps I/O points onto PLC card channels under I/O type and signal type
constraints, audits existing assignments for conflicts, reports card
utilization and suggests additional cards when capacity runs out.
"""

__version__ = "1.0.0"

from .models import (
    IOType,
    SignalType,
    IOPoint,
    CardLocation,
    PLCCard,
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

from .config import (
    ConfigError,
    EngineSettings,
    get_settings,
    load_settings,
)

from .engine import (
    is_signal_compatible,
    find_card,
    used_channels,
    next_free_channel,
    auto_assign_channel,
    auto_assign_all,
    detect_conflicts,
    get_card_utilization,
    get_controller_utilization,
    summarize_io_system,
    suggest_card_configuration,
)

from .parsers import (
    SnapshotLoadError,
    Snapshot,
    load_points,
    load_cards,
    load_snapshot,
    load_snapshot_yaml,
)

__all__ = [
    # Version
    "__version__",
    # Models
    "IOType",
    "SignalType",
    "IOPoint",
    "CardLocation",
    "PLCCard",
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
    # Config
    "ConfigError",
    "EngineSettings",
    "get_settings",
    "load_settings",
    # Engine
    "is_signal_compatible",
    "find_card",
    "used_channels",
    "next_free_channel",
    "auto_assign_channel",
    "auto_assign_all",
    "detect_conflicts",
    "get_card_utilization",
    "get_controller_utilization",
    "summarize_io_system",
    "suggest_card_configuration",
    # Parsers
    "SnapshotLoadError",
    "Snapshot",
    "load_points",
    "load_cards",
    "load_snapshot",
    "load_snapshot_yaml",
]
