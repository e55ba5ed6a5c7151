"""Load I/O point and PLC card snapshots from Excel, CSV and YAML files."""

import logging
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union
from dataclasses import dataclass, field

import pandas as pd
import yaml

from ..models import IOPoint, PLCCard
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

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

TABULAR_SUFFIXES = [".xlsx", ".xls", ".csv"]
YAML_SUFFIXES = [".yaml", ".yml"]


class SnapshotLoadError(Exception):
    """Exception raised when a snapshot file cannot be read."""
    pass


@dataclass
class PointLoadResult:
    """Result of loading an I/O point list."""
    points: List[IOPoint]
    validation_result: ValidationResult
    column_mapping: Dict[str, str] = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return self.validation_result.is_valid

    @property
    def point_count(self) -> int:
        return len(self.points)


@dataclass
class CardLoadResult:
    """Result of loading a PLC card list."""
    cards: List[PLCCard]
    validation_result: ValidationResult
    column_mapping: Dict[str, str] = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return self.validation_result.is_valid

    @property
    def card_count(self) -> int:
        return len(self.cards)


@dataclass
class Snapshot:
    """Points and cards loaded together."""
    points: List[IOPoint]
    cards: List[PLCCard]
    validation_result: ValidationResult

    @property
    def is_valid(self) -> bool:
        return self.validation_result.is_valid


# Common column name variations
POINT_COLUMN_ALIASES = {
    "Tag": ["tag", "tag number", "tag_number", "tag no", "tag no.", "point tag", "i/o tag"],
    "IO Type": ["io type", "i/o type", "io_type", "i/o", "type"],
    "Signal Type": ["signal type", "signal", "signal_type"],
    "PLC Name": ["plc name", "plc", "plc_name", "controller", "controller name"],
    "Rack": ["rack", "rack no", "rack_no"],
    "Slot": ["slot", "slot no", "slot_no"],
    "Channel": ["channel", "ch", "channel no", "channel_no"],
    "Description": ["description", "service", "service description", "desc"],
    "Terminal Block": ["terminal block", "terminal_block", "tb"],
    "Notes": ["notes", "remarks", "comment", "comments"],
}

CARD_COLUMN_ALIASES = {
    "Name": ["name", "card name", "card_name", "module name"],
    "PLC Name": ["plc name", "plc", "plc_name", "controller", "controller name"],
    "Rack": ["rack", "rack no", "rack_no"],
    "Slot": ["slot", "slot no", "slot_no"],
    "IO Type": ["io type", "i/o type", "io_type", "i/o", "type"],
    "Signal Type": ["signal type", "signal", "signal_type"],
    "Total Channels": ["total channels", "total_channels", "channels", "channel count"],
    "Card Type": ["card type", "card_type", "model", "module"],
    "Manufacturer": ["manufacturer", "vendor"],
    "Part Number": ["part number", "part_number", "part no", "part no."],
}


def _normalize_column_name(column: str, aliases: Dict[str, List[str]]) -> str:
    """Normalize a column name to standard format."""
    col_lower = str(column).strip().lower()

    for standard_name, names in aliases.items():
        if col_lower == standard_name.lower() or col_lower in names:
            return standard_name

    return column


def _create_column_mapping(columns: List[str], aliases: Dict[str, List[str]]) -> Dict[str, str]:
    """Create a mapping from original column names to standard names."""
    mapping = {}
    for col in columns:
        normalized = _normalize_column_name(col, aliases)
        if normalized != col:
            mapping[col] = normalized
    return mapping


def _read_table(file_path: PathLike, sheet_name: Optional[str] = None) -> pd.DataFrame:
    """
    Read an Excel or CSV file into a DataFrame.

    Raises:
        SnapshotLoadError: If the file is missing, of the wrong type or unreadable
    """
    path = Path(file_path)
    if not path.exists():
        raise SnapshotLoadError(f"File not found: {file_path}")

    suffix = path.suffix.lower()
    if suffix not in TABULAR_SUFFIXES:
        raise SnapshotLoadError(
            f"Invalid file type: {path.suffix}. Expected one of {', '.join(TABULAR_SUFFIXES)}"
        )

    try:
        if suffix == ".csv":
            return pd.read_csv(path)
        if sheet_name:
            return pd.read_excel(path, sheet_name=sheet_name)
        return pd.read_excel(path)
    except Exception as e:
        raise SnapshotLoadError(f"Failed to read {path.name}: {e}") from e


def _parse_rows(
    df: pd.DataFrame,
    factory: Callable[[Dict[str, Any]], Any],
    validation: ValidationResult,
    tag_column: Optional[str] = None,
) -> list:
    """Build records from DataFrame rows, collecting row errors instead of stopping."""
    records = []
    for idx, row in enumerate(df.to_dict(orient="records")):
        row_number = idx + 2  # +2 for header and 0-index

        # Skip empty rows
        if tag_column and (pd.isna(row.get(tag_column)) or not str(row.get(tag_column)).strip()):
            continue
        if all(pd.isna(v) for v in row.values()):
            continue

        try:
            records.append(factory(row))
        except ValueError as e:
            logger.warning("Skipping row %d: %s", row_number, e)
            validation.add_error(ValidationError(
                field="row",
                message=str(e),
                row=row_number,
            ))
    return records


def points_from_dataframe(df: pd.DataFrame) -> PointLoadResult:
    """Convert a DataFrame of I/O list rows into IOPoints."""
    column_mapping = _create_column_mapping(df.columns.tolist(), POINT_COLUMN_ALIASES)
    if column_mapping:
        df = df.rename(columns=column_mapping)

    validation = validate_columns(df.columns.tolist(), REQUIRED_POINT_COLUMNS)
    if not validation.is_valid:
        return PointLoadResult(points=[], validation_result=validation, column_mapping=column_mapping)

    validation.merge(validate_known_columns(
        df.columns.tolist(), REQUIRED_POINT_COLUMNS, OPTIONAL_POINT_COLUMNS
    ))

    points = _parse_rows(df, IOPoint.from_dict, validation, tag_column="Tag")
    validation.merge(validate_point_tags([p.tag for p in points]))

    return PointLoadResult(points=points, validation_result=validation, column_mapping=column_mapping)


def cards_from_dataframe(df: pd.DataFrame) -> CardLoadResult:
    """Convert a DataFrame of card rows into PLCCards."""
    column_mapping = _create_column_mapping(df.columns.tolist(), CARD_COLUMN_ALIASES)
    if column_mapping:
        df = df.rename(columns=column_mapping)

    validation = validate_columns(df.columns.tolist(), REQUIRED_CARD_COLUMNS)
    if not validation.is_valid:
        return CardLoadResult(cards=[], validation_result=validation, column_mapping=column_mapping)

    validation.merge(validate_known_columns(
        df.columns.tolist(), REQUIRED_CARD_COLUMNS, OPTIONAL_CARD_COLUMNS
    ))

    cards = _parse_rows(df, PLCCard.from_dict, validation)
    validation.merge(validate_card_identities(cards))

    return CardLoadResult(cards=cards, validation_result=validation, column_mapping=column_mapping)


def load_points(file_path: PathLike, sheet_name: Optional[str] = None) -> PointLoadResult:
    """
    Load an I/O point list from Excel or CSV.

    Args:
        file_path: Path to the .xlsx, .xls or .csv file
        sheet_name: Optional sheet name for Excel files

    Returns:
        PointLoadResult with points and validation results

    Raises:
        SnapshotLoadError: If the file cannot be read
    """
    result = points_from_dataframe(_read_table(file_path, sheet_name))
    logger.info("Loaded %d I/O points from %s", result.point_count, file_path)
    return result


def load_cards(file_path: PathLike, sheet_name: Optional[str] = None) -> CardLoadResult:
    """
    Load a PLC card list from Excel or CSV.

    Args:
        file_path: Path to the .xlsx, .xls or .csv file
        sheet_name: Optional sheet name for Excel files

    Returns:
        CardLoadResult with cards and validation results

    Raises:
        SnapshotLoadError: If the file cannot be read
    """
    result = cards_from_dataframe(_read_table(file_path, sheet_name))
    logger.info("Loaded %d PLC cards from %s", result.card_count, file_path)
    return result


def _records_from_yaml(
    entries: Any,
    factory: Callable[[Dict[str, Any]], Any],
    section: str,
    validation: ValidationResult,
) -> list:
    if entries is None:
        return []
    if not isinstance(entries, list):
        raise SnapshotLoadError(f"'{section}' must be a list")

    records = []
    for index, entry in enumerate(entries, start=1):
        if not isinstance(entry, dict):
            validation.add_error(ValidationError(
                field=section,
                message=f"Entry {index} in '{section}' is not a mapping",
                row=index,
            ))
            continue
        try:
            records.append(factory(entry))
        except ValueError as e:
            logger.warning("Skipping %s entry %d: %s", section, index, e)
            validation.add_error(ValidationError(field=section, message=str(e), row=index))
    return records


def load_snapshot_yaml(file_path: PathLike) -> Snapshot:
    """
    Load points and cards from a single YAML document.

    Expected structure::

        cards:
          - {name: PLC1-R0-S1, plc_name: PLC1, rack: 0, slot: 1,
             io_type: AI, signal_type: 4-20mA, total_channels: 8}
        points:
          - {tag: FT-101, io_type: AI, signal_type: HART}

    Raises:
        SnapshotLoadError: If the file is missing or not a valid snapshot
    """
    path = Path(file_path)
    if not path.exists():
        raise SnapshotLoadError(f"File not found: {file_path}")
    if path.suffix.lower() not in YAML_SUFFIXES:
        raise SnapshotLoadError(f"Invalid file type: {path.suffix}. Expected .yaml or .yml")

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise SnapshotLoadError(f"Invalid YAML in {path.name}: {e}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise SnapshotLoadError(f"Cannot read {path.name}: {e}") from e

    if not isinstance(data, dict):
        raise SnapshotLoadError(f"{path.name} must contain a mapping with 'cards' and 'points'")

    validation = ValidationResult.success()
    cards = _records_from_yaml(data.get("cards"), PLCCard.from_dict, "cards", validation)
    points = _records_from_yaml(data.get("points"), IOPoint.from_dict, "points", validation)

    validation.merge(validate_card_identities(cards))
    validation.merge(validate_point_tags([p.tag for p in points]))

    logger.info("Loaded %d points and %d cards from %s", len(points), len(cards), path)
    return Snapshot(points=points, cards=cards, validation_result=validation)


def load_snapshot(
    points_path: Optional[PathLike] = None,
    cards_path: Optional[PathLike] = None,
    snapshot_path: Optional[PathLike] = None,
) -> Snapshot:
    """
    Load a snapshot either from one YAML file or from separate point/card lists.

    Raises:
        SnapshotLoadError: If no source or both kinds of source are given,
            or a file cannot be read
    """
    if snapshot_path is not None:
        if points_path is not None or cards_path is not None:
            raise SnapshotLoadError(
                "A snapshot file cannot be combined with separate point or card lists"
            )
        return load_snapshot_yaml(snapshot_path)

    if points_path is None:
        raise SnapshotLoadError("Either a snapshot file or a point list is required")

    validation = ValidationResult.success()

    point_result = load_points(points_path)
    validation.merge(point_result.validation_result)

    cards: List[PLCCard] = []
    if cards_path is not None:
        card_result = load_cards(cards_path)
        validation.merge(card_result.validation_result)
        cards = card_result.cards

    return Snapshot(points=point_result.points, cards=cards, validation_result=validation)


def points_to_dataframe(points: List[IOPoint]) -> pd.DataFrame:
    """Tabulate points using the standard I/O list column names."""
    rows = [
        {
            "Tag": p.tag,
            "IO Type": p.io_type.value if p.io_type else None,
            "Signal Type": p.signal_type.value if p.signal_type else None,
            "PLC Name": p.plc_name,
            "Rack": p.rack,
            "Slot": p.slot,
            "Channel": p.channel,
            "Description": p.description,
            "Terminal Block": p.terminal_block,
            "Notes": p.notes,
        }
        for p in points
    ]
    columns = ["Tag", "IO Type", "Signal Type", "PLC Name", "Rack", "Slot", "Channel",
               "Description", "Terminal Block", "Notes"]
    df = pd.DataFrame(rows, columns=columns)
    for col in ["Rack", "Slot", "Channel"]:
        df[col] = df[col].astype("Int64")
    return df
