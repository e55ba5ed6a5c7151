"""Tests for the command-line interface."""

from pathlib import Path

import pytest
from click.testing import CliRunner

from plc_channels.cli.main import cli
from plc_channels.models import CardLocation
from plc_channels.parsers import load_points


SAMPLE = str(Path(__file__).parent.parent / "examples" / "sample_snapshot.yaml")

CLEAN_SNAPSHOT = """cards:
  - {plc_name: PLC1, rack: 0, slot: 1, io_type: AI, signal_type: 4-20mA, total_channels: 8}
points:
  - {tag: FT-101, io_type: AI, signal_type: HART, plc_name: PLC1, rack: 0, slot: 1, channel: 0}
  - {tag: PT-102, io_type: AI, signal_type: 4-20mA, plc_name: PLC1, rack: 0, slot: 1, channel: 1}
"""


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def clean_snapshot(tmp_path):
    path = tmp_path / "clean.yaml"
    path.write_text(CLEAN_SNAPSHOT)
    return str(path)


class TestAudit:
    """Tests for the audit command."""

    def test_conflicts_exit_one(self, runner):
        """Test the sample snapshot has a channel collision."""
        result = runner.invoke(cli, ["audit", "--snapshot", SAMPLE])
        assert result.exit_code == 1

    def test_clean_snapshot(self, runner, clean_snapshot):
        """Test a clean snapshot exits 0."""
        result = runner.invoke(cli, ["audit", "-s", clean_snapshot])
        assert result.exit_code == 0
        assert "No conflicts" in result.output

    def test_no_input_exits_two(self, runner):
        """Test a missing snapshot source."""
        result = runner.invoke(cli, ["audit"])
        assert result.exit_code == 2

    def test_snapshot_and_points_exit_two(self, runner, tmp_path, clean_snapshot):
        """Test mixing a snapshot with a point list."""
        points = tmp_path / "points.csv"
        points.write_text("Tag,IO Type\nFT-101,AI\n")
        result = runner.invoke(cli, ["audit", "-s", clean_snapshot, "-p", str(points)])
        assert result.exit_code == 2

    def test_bad_config_exits_two(self, runner, tmp_path, clean_snapshot):
        """Test invalid engine settings."""
        config = tmp_path / "settings.yaml"
        config.write_text("engine:\n  standard_card_sizes: []\n")
        result = runner.invoke(cli, ["--config", str(config), "audit", "-s", clean_snapshot])
        assert result.exit_code == 2


class TestAssign:
    """Tests for the assign command."""

    def test_writes_updated_list(self, runner, tmp_path):
        """Test assigned channels are written to the output file."""
        output = tmp_path / "assigned.csv"
        result = runner.invoke(cli, ["assign", "-s", SAMPLE, "-o", str(output)])

        assert result.exit_code == 0
        assert "Assigned:" in result.output
        assert output.exists()

        points = {p.tag: p for p in load_points(output).points}
        assert len(points) == 8
        assert points["TE-104"].location == CardLocation("PLC1", 0, 3)
        assert points["TE-104"].channel == 0
        assert points["XV-107"].location == CardLocation("PLC2", 0, 1)
        assert points["TT-108"].channel is None

    def test_repeated_tags_are_counted(self, runner, tmp_path):
        """Test two points sharing a tag are both counted."""
        path = tmp_path / "repeated.yaml"
        path.write_text(
            "cards:\n"
            "  - {plc_name: PLC1, rack: 0, slot: 1, io_type: AI, total_channels: 1}\n"
            "points:\n"
            "  - {tag: FT-1, io_type: AI}\n"
            "  - {tag: FT-1, io_type: AI}\n"
        )
        result = runner.invoke(cli, ["assign", "-s", str(path)])
        assert result.exit_code == 0
        assert "Assigned: 1" in result.output
        assert "Unplaced: 1" in result.output

    def test_all_assigned(self, runner, clean_snapshot):
        """Test a snapshot with nothing to place."""
        result = runner.invoke(cli, ["assign", "-s", clean_snapshot])
        assert result.exit_code == 0
        assert "already assigned" in result.output


class TestPlanningCommands:
    """Tests for utilization, suggest and summary."""

    def test_utilization(self, runner):
        """Test utilization runs with the controller rollup."""
        result = runner.invoke(cli, ["utilization", "-s", SAMPLE, "--by-controller"])
        assert result.exit_code == 0

    def test_suggest_for_unplaced_points(self, runner):
        """Test suggestions for points with no compatible card."""
        result = runner.invoke(cli, ["suggest", "-s", SAMPLE])
        assert result.exit_code == 0
        assert "Total additional cards" in result.output

    def test_suggest_nothing_needed(self, runner, clean_snapshot):
        """Test no suggestions when every point is placed."""
        result = runner.invoke(cli, ["suggest", "-s", clean_snapshot])
        assert result.exit_code == 0
        assert "cover every I/O point" in result.output

    def test_summary(self, runner):
        """Test the summary panel."""
        result = runner.invoke(cli, ["summary", "-s", SAMPLE])
        assert result.exit_code == 0
        assert "I/O System" in result.output
