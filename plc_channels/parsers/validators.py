"""Input validation for point and card snapshots."""

from typing import List, Optional, Sequence
from dataclasses import dataclass

from ..models import PLCCard
from ..engine.card_locator import find_duplicate_cards


@dataclass
class ValidationError:
    """Represents a validation error."""
    field: str
    message: str
    row: Optional[int] = None
    value: Optional[str] = None


@dataclass
class ValidationResult:
    """Result of a validation operation."""
    is_valid: bool
    errors: List[ValidationError]
    warnings: List[ValidationError]

    @classmethod
    def success(cls) -> "ValidationResult":
        return cls(is_valid=True, errors=[], warnings=[])

    def add_error(self, error: ValidationError):
        self.errors.append(error)
        self.is_valid = False

    def add_warning(self, warning: ValidationError):
        self.warnings.append(warning)

    def merge(self, other: "ValidationResult"):
        for error in other.errors:
            self.add_error(error)
        self.warnings.extend(other.warnings)


REQUIRED_POINT_COLUMNS = [
    "Tag",
]

REQUIRED_CARD_COLUMNS = [
    "PLC Name",
    "Rack",
    "Slot",
    "IO Type",
    "Total Channels",
]

OPTIONAL_POINT_COLUMNS = [
    "IO Type",
    "Signal Type",
    "PLC Name",
    "Rack",
    "Slot",
    "Channel",
    "Description",
    "Terminal Block",
    "Notes",
]

OPTIONAL_CARD_COLUMNS = [
    "Name",
    "Signal Type",
    "Card Type",
    "Manufacturer",
    "Part Number",
]


def validate_columns(columns: List[str], required: List[str]) -> ValidationResult:
    """
    Validate that a sheet has the required columns.

    Args:
        columns: Column names from the file (already normalized)
        required: Standard names that must be present

    Returns:
        ValidationResult with errors for missing columns
    """
    result = ValidationResult.success()

    normalized_columns = [str(c).strip().lower() for c in columns]

    for name in required:
        if name.strip().lower() not in normalized_columns:
            result.add_error(ValidationError(
                field=name,
                message=f"Required column missing: {name}"
            ))

    return result


def validate_card_identities(cards: Sequence[PLCCard]) -> ValidationResult:
    """
    Report cards that share a controller/rack/slot identity.

    The engine resolves a duplicate identity to the first card, which
    hides the others; duplicates are therefore rejected here as errors.
    """
    result = ValidationResult.success()

    for location, group in find_duplicate_cards(cards).items():
        names = ", ".join(card.name for card in group)
        result.add_error(ValidationError(
            field="PLC Name/Rack/Slot",
            message=f"Duplicate card position {location}: {names}",
            value=str(location),
        ))

    return result


def validate_point_tags(tags: Sequence[str]) -> ValidationResult:
    """Warn about repeated point tags; conflict messages rely on tags."""
    result = ValidationResult.success()
    seen = set()
    reported = set()

    for tag in tags:
        if tag in seen and tag not in reported:
            result.add_warning(ValidationError(
                field="Tag",
                message=f"Duplicate point tag: {tag}",
                value=tag,
            ))
            reported.add(tag)
        seen.add(tag)

    return result


def validate_known_columns(
    columns: List[str],
    required: List[str],
    optional: List[str]
) -> ValidationResult:
    """Warn about columns that are neither required nor optional; they are ignored."""
    result = ValidationResult.success()
    known = {name.lower() for name in required + optional}

    for column in columns:
        if str(column).strip().lower() not in known:
            result.add_warning(ValidationError(
                field=str(column),
                message=f"Unrecognised column ignored: {column}",
                value=str(column),
            ))

    return result
