"""Snapshot loaders for PLC channel assignment."""

from .validators import (
    ValidationError,
    ValidationResult,
    validate_columns,
    validate_card_identities,
    validate_point_tags,
    validate_known_columns,
    REQUIRED_POINT_COLUMNS,
    REQUIRED_CARD_COLUMNS,
    OPTIONAL_POINT_COLUMNS,
    OPTIONAL_CARD_COLUMNS,
)

from .snapshot_loader import (
    SnapshotLoadError,
    PointLoadResult,
    CardLoadResult,
    Snapshot,
    POINT_COLUMN_ALIASES,
    CARD_COLUMN_ALIASES,
    points_from_dataframe,
    cards_from_dataframe,
    points_to_dataframe,
    load_points,
    load_cards,
    load_snapshot_yaml,
    load_snapshot,
)

__all__ = [
    # Validators
    "ValidationError",
    "ValidationResult",
    "validate_columns",
    "validate_card_identities",
    "validate_point_tags",
    "validate_known_columns",
    "REQUIRED_POINT_COLUMNS",
    "REQUIRED_CARD_COLUMNS",
    "OPTIONAL_POINT_COLUMNS",
    "OPTIONAL_CARD_COLUMNS",
    # Loaders
    "SnapshotLoadError",
    "PointLoadResult",
    "CardLoadResult",
    "Snapshot",
    "POINT_COLUMN_ALIASES",
    "CARD_COLUMN_ALIASES",
    "points_from_dataframe",
    "cards_from_dataframe",
    "points_to_dataframe",
    "load_points",
    "load_cards",
    "load_snapshot_yaml",
    "load_snapshot",
]
