"""
Tests for CLI diagnostic output.
"""

import pytest
from rich.console import Console

from lakeparam.cli.output import RunSummary, print_summary
from lakeparam.core.profile import LakeProfile


@pytest.fixture
def sample_summary() -> RunSummary:
    return RunSummary(
        grid_id="1042",
        active_cells=398,
        water_fraction=0.1,
        wetland_fraction=0.4,
        upland_fraction=0.5,
        lake_depth=7.02,
        lake_bins=4,
        wetland_bins=5,
    )


class TestRunSummary:
    """Tests for RunSummary dataclass."""

    def test_from_profile(self) -> None:
        """Summaries copy the profile statistics."""
        profile = LakeProfile(
            grid_id="9",
            lake_depth=4.17,
            lake_bins=4,
            wetland_bins=6,
            water_fraction=0.2,
            wetland_fraction=0.3,
            upland_fraction=0.5,
            active_cells=100,
        )

        summary = RunSummary.from_profile(profile)

        assert summary.grid_id == "9"
        assert summary.wetland_bins == 6
        assert summary.upland_fraction == 0.5

    def test_invalid_fraction(self) -> None:
        """Fractions must lie in [0, 1]."""
        with pytest.raises(ValueError, match="water_fraction"):
            RunSummary(
                grid_id="1",
                active_cells=10,
                water_fraction=1.5,
                wetland_fraction=0.0,
                upland_fraction=0.0,
                lake_depth=0.0,
                lake_bins=0,
                wetland_bins=0,
            )

    def test_negative_cells(self) -> None:
        """Cell counts cannot be negative."""
        with pytest.raises(ValueError, match="active_cells"):
            RunSummary(
                grid_id="1",
                active_cells=-1,
                water_fraction=0.0,
                wetland_fraction=0.0,
                upland_fraction=1.0,
                lake_depth=0.0,
                lake_bins=0,
                wetland_bins=0,
            )


class TestPrintSummary:
    """Tests for print_summary."""

    def test_table_contents(self, sample_summary: RunSummary) -> None:
        """The table lists every statistic."""
        console = Console(record=True, width=100)

        print_summary(console, sample_summary)

        text = console.export_text()
        assert "Grid cell 1042" in text
        assert "0.40000" in text
        assert "7.020" in text
