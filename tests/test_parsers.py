"""Tests for snapshot loaders."""

import pytest
from plc_channels.models import IOType, SignalType, CardLocation
from plc_channels.parsers import (
    SnapshotLoadError,
    load_points,
    load_cards,
    load_snapshot,
    load_snapshot_yaml,
    points_to_dataframe,
    validate_card_identities,
)
from plc_channels.models import PLCCard


POINTS_CSV = """Tag Number,I/O Type,Signal,PLC,Rack,Slot,Channel,Service
FT-101,AI,HART,PLC1,0,1,0,Feed flow
PT-102,AI,4-20 mA,,,,,Feed pressure
,,,,,,,
ZS-103,DI,Dry Contact,PLC1,0,2,,Valve open
"""

CARDS_CSV = """Card Name,Controller,Rack,Slot,Type,Signal Type,Channels,Model
AI-01,PLC1,0,1,AI,4-20mA,8,1756-IF8
DI-01,PLC1,0,2,DI,Digital,16,1756-IB16
"""


def write(tmp_path, name, text):
    path = tmp_path / name
    path.write_text(text)
    return path


class TestLoadPoints:
    """Tests for I/O point lists."""

    def test_load_csv_with_aliases(self, tmp_path):
        """Test column aliases and blank rows."""
        result = load_points(write(tmp_path, "points.csv", POINTS_CSV))

        assert result.is_valid
        assert result.point_count == 3
        assert result.column_mapping["Tag Number"] == "Tag"

        ft, pt, zs = result.points
        assert ft.is_assigned
        assert ft.signal_type == SignalType.HART
        assert ft.description == "Feed flow"
        assert pt.location is None
        assert pt.signal_type == SignalType.MA_4_20
        assert zs.location == CardLocation("PLC1", 0, 2)
        assert zs.channel is None

    def test_bad_row_is_reported_and_skipped(self, tmp_path):
        """Test a row with an unknown I/O type."""
        text = "Tag,IO Type\nFT-101,AI\nXX-1,PI\nXV-2,DO\n"
        result = load_points(write(tmp_path, "points.csv", text))
        assert not result.is_valid
        assert [p.tag for p in result.points] == ["FT-101", "XV-2"]
        assert result.validation_result.errors[0].row == 3
        assert "Unknown I/O type" in result.validation_result.errors[0].message

    def test_duplicate_tags_warn(self, tmp_path):
        """Test repeated tags are warnings, not errors."""
        text = "Tag,IO Type\nFT-101,AI\nFT-101,AI\n"
        result = load_points(write(tmp_path, "points.csv", text))
        assert result.is_valid
        assert len(result.validation_result.warnings) == 1

    def test_unrecognised_column_warns(self, tmp_path):
        """Test an unknown column is reported and ignored."""
        text = "Tag,IO Type,Loop Drawing\nFT-101,AI,LD-001\n"
        result = load_points(write(tmp_path, "points.csv", text))
        assert result.is_valid
        assert result.point_count == 1
        assert [w.field for w in result.validation_result.warnings] == ["Loop Drawing"]

    def test_known_columns_do_not_warn(self, tmp_path):
        """Test aliased columns raise no warnings."""
        result = load_points(write(tmp_path, "points.csv", POINTS_CSV))
        assert result.validation_result.warnings == []

    def test_missing_tag_column(self, tmp_path):
        """Test a sheet without a tag column."""
        result = load_points(write(tmp_path, "points.csv", "Name,IO Type\nA,AI\n"))
        assert not result.is_valid
        assert result.points == []

    def test_missing_file(self, tmp_path):
        """Test a missing file raises."""
        with pytest.raises(SnapshotLoadError, match="not found"):
            load_points(tmp_path / "missing.csv")

    def test_legacy_excel_is_read_not_rejected(self, tmp_path):
        """Test .xls files go to the Excel reader; a corrupt one fails to read."""
        path = tmp_path / "points.xls"
        path.write_bytes(b"not a workbook")
        with pytest.raises(SnapshotLoadError, match="Failed to read"):
            load_points(path)

    def test_unsupported_extension(self, tmp_path):
        """Test a non-tabular file raises."""
        with pytest.raises(SnapshotLoadError, match="Invalid file type"):
            load_points(write(tmp_path, "points.txt", "Tag\nA\n"))


class TestLoadCards:
    """Tests for PLC card lists."""

    def test_load_csv_with_aliases(self, tmp_path):
        """Test card columns and types."""
        result = load_cards(write(tmp_path, "cards.csv", CARDS_CSV))
        assert result.is_valid
        ai, di = result.cards
        assert ai.name == "AI-01"
        assert ai.io_type == IOType.AI
        assert ai.total_channels == 8
        assert ai.card_type == "1756-IF8"
        assert di.signal_type == SignalType.DIGITAL

    def test_duplicate_position_is_an_error(self, tmp_path):
        """Test two cards in one slot."""
        text = CARDS_CSV + "AI-02,PLC1,0,1,AI,HART,8,1756-IF8H\n"
        result = load_cards(write(tmp_path, "cards.csv", text))
        assert not result.is_valid
        assert result.card_count == 3
        assert "Duplicate card position" in result.validation_result.errors[0].message

    def test_missing_required_columns(self, tmp_path):
        """Test each missing required column is reported."""
        result = load_cards(write(tmp_path, "cards.csv", "Name,Rack\nA,0\n"))
        fields = {e.field for e in result.validation_result.errors}
        assert fields == {"PLC Name", "Slot", "IO Type", "Total Channels"}


class TestValidators:
    """Tests for snapshot validators."""

    def test_card_identities(self):
        """Test unique positions pass."""
        cards = [
            PLCCard("A", "PLC1", 0, 1, IOType.AI, 8),
            PLCCard("B", "PLC1", 0, 2, IOType.AI, 8),
        ]
        assert validate_card_identities(cards).is_valid


class TestLoadSnapshot:
    """Tests for combined snapshots."""

    def test_yaml_snapshot(self, tmp_path):
        """Test cards and points from one YAML file."""
        path = write(tmp_path, "snapshot.yaml", (
            "cards:\n"
            "  - {plc_name: PLC1, rack: 0, slot: 1, io_type: AI, signal_type: 4-20mA, total_channels: 8}\n"
            "points:\n"
            "  - {tag: FT-101, io_type: AI, signal_type: HART, plc_name: PLC1, rack: 0, slot: 1, channel: 0}\n"
            "  - {tag: TE-102, io_type: AI, signal_type: RTD}\n"
        ))
        snapshot = load_snapshot_yaml(path)
        assert snapshot.is_valid
        assert snapshot.cards[0].name == "PLC1-R0-S1"
        assert [p.tag for p in snapshot.points] == ["FT-101", "TE-102"]

    def test_yaml_bad_entry(self, tmp_path):
        """Test an invalid entry is reported with its position."""
        path = write(tmp_path, "snapshot.yaml", (
            "cards:\n"
            "  - {plc_name: PLC1, rack: 0, slot: 1, io_type: AX, total_channels: 8}\n"
            "points: []\n"
        ))
        snapshot = load_snapshot_yaml(path)
        assert not snapshot.is_valid
        assert snapshot.cards == []
        assert snapshot.validation_result.errors[0].row == 1

    def test_yaml_not_a_mapping(self, tmp_path):
        """Test a YAML list is rejected."""
        with pytest.raises(SnapshotLoadError):
            load_snapshot_yaml(write(tmp_path, "snapshot.yaml", "- a\n- b\n"))

    def test_yaml_not_utf8(self, tmp_path):
        """Test undecodable bytes raise SnapshotLoadError."""
        path = tmp_path / "snapshot.yaml"
        path.write_bytes(b"cards: []\npoints:\n  - {tag: \xff\xfe}\n")
        with pytest.raises(SnapshotLoadError):
            load_snapshot_yaml(path)

    def test_snapshot_with_separate_lists_rejected(self, tmp_path):
        """Test a YAML snapshot cannot be mixed with point or card lists."""
        snapshot = write(tmp_path, "snapshot.yaml", "cards: []\npoints: []\n")
        points = write(tmp_path, "points.csv", POINTS_CSV)
        cards = write(tmp_path, "cards.csv", CARDS_CSV)
        with pytest.raises(SnapshotLoadError, match="cannot be combined"):
            load_snapshot(points_path=points, snapshot_path=snapshot)
        with pytest.raises(SnapshotLoadError, match="cannot be combined"):
            load_snapshot(cards_path=cards, snapshot_path=snapshot)

    def test_separate_files(self, tmp_path):
        """Test loading points and cards from two files."""
        snapshot = load_snapshot(
            points_path=write(tmp_path, "points.csv", POINTS_CSV),
            cards_path=write(tmp_path, "cards.csv", CARDS_CSV),
        )
        assert len(snapshot.points) == 3
        assert len(snapshot.cards) == 2

    def test_no_source(self):
        """Test a snapshot needs some input."""
        with pytest.raises(SnapshotLoadError):
            load_snapshot()


class TestPointsToDataframe:
    """Tests for tabulating points."""

    def test_columns_and_values(self, tmp_path):
        """Test the written table loads back with the same placement."""
        points = load_points(write(tmp_path, "points.csv", POINTS_CSV)).points
        df = points_to_dataframe(points)
        assert list(df.columns)[:7] == ["Tag", "IO Type", "Signal Type", "PLC Name", "Rack", "Slot", "Channel"]

        out = tmp_path / "out.csv"
        df.to_csv(out, index=False)
        reloaded = load_points(out).points
        assert reloaded[0].location == points[0].location
        assert reloaded[0].channel == 0
        assert reloaded[1].channel is None
