"""Assignment, audit and reporting engine for PLC I/O channels."""

from .compatibility import (
    SIGNAL_COMPATIBILITY,
    is_signal_compatible,
    accepted_signal_types,
    describe_accepted,
)

from .card_locator import (
    find_card,
    used_channels,
    next_free_channel,
    find_duplicate_cards,
)

from .channel_assigner import (
    auto_assign_channel,
    assign_to_specific_card,
    assign_to_best_available_card,
    auto_assign_all,
)

from .conflict_auditor import (
    group_points_by_card,
    detect_conflicts,
)

from .utilization import (
    round_percent,
    classify_utilization,
    get_card_utilization,
    get_controller_utilization,
    summarize_io_system,
)

from .advisor import (
    group_points_by_requirement,
    suggest_card_configuration,
    total_cards,
)

__all__ = [
    # Compatibility
    "SIGNAL_COMPATIBILITY",
    "is_signal_compatible",
    "accepted_signal_types",
    "describe_accepted",
    # Card Locator
    "find_card",
    "used_channels",
    "next_free_channel",
    "find_duplicate_cards",
    # Channel Assigner
    "auto_assign_channel",
    "assign_to_specific_card",
    "assign_to_best_available_card",
    "auto_assign_all",
    # Conflict Auditor
    "group_points_by_card",
    "detect_conflicts",
    # Utilization
    "round_percent",
    "classify_utilization",
    "get_card_utilization",
    "get_controller_utilization",
    "summarize_io_system",
    # Advisor
    "group_points_by_requirement",
    "suggest_card_configuration",
    "total_cards",
]
