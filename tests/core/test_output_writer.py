"""
Tests for output writer module.
"""

import io

import pytest

from lakeparam.core.output_writer import OutputSchema, format_profile, parse_schema, write_profile
from lakeparam.core.profile import LakeProfile, ProfilePoint


@pytest.fixture
def sample_profile() -> LakeProfile:
    """A two-point profile: one lake bin and one wetland bin."""
    return LakeProfile(
        grid_id="7",
        lake_depth=4.17,
        lake_bins=1,
        wetland_bins=1,
        water_fraction=0.05,
        wetland_fraction=0.1,
        points=[
            ProfilePoint(
                bathymetric_elevation=4.17,
                gradient_elevation=4.17,
                area_fraction=0.05,
                wetness_index=250000.0,
                slope=0.0123,
            ),
            ProfilePoint(
                bathymetric_elevation=5.5,
                gradient_elevation=6.0,
                area_fraction=0.15,
                wetness_index=20000.0,
                slope=0.004,
            ),
        ],
    )


@pytest.fixture
def empty_profile() -> LakeProfile:
    """A profile without lake or wetland."""
    return LakeProfile(
        grid_id="1042",
        lake_depth=0.0,
        lake_bins=0,
        wetland_bins=0,
        water_fraction=0.0,
        wetland_fraction=0.0,
    )


class TestParseSchema:
    """Tests for parse_schema."""

    @pytest.mark.parametrize("flag,expected", [("LAKE", OutputSchema.LAKE), ("SEA", OutputSchema.SEA)])
    def test_known_schemas(self, flag: str, expected: OutputSchema) -> None:
        """Both schema names are recognized."""
        assert parse_schema(flag) is expected

    @pytest.mark.parametrize("flag", ["lake", "Sea", "XYZ", ""])
    def test_unknown_schema(self, flag: str) -> None:
        """Matching is exact and case-sensitive."""
        assert parse_schema(flag) is None

    def test_schema_properties(self) -> None:
        """Schemas know their lake flag and bin width."""
        assert (OutputSchema.LAKE.lake_flag, OutputSchema.LAKE.values_per_bin) == (1, 2)
        assert (OutputSchema.SEA.lake_flag, OutputSchema.SEA.values_per_bin) == (0, 4)


class TestFormatProfile:
    """Tests for format_profile."""

    def test_lake_schema(self, sample_profile: LakeProfile) -> None:
        """LAKE writes elevation/area pairs from the top down."""
        header, body = format_profile(sample_profile, OutputSchema.LAKE)

        assert header == "7 1 2 4.180 0.01 4.180 1.0"
        assert body == "5.500 0.15000 4.170 0.05000"

    def test_sea_schema(self, sample_profile: LakeProfile) -> None:
        """SEA adds wetness index and slope to every bin."""
        header, body = format_profile(sample_profile, OutputSchema.SEA)

        assert header == "7 0 2 4.180 0.01 4.180 1.0"
        assert body == "6.000 0.15000 20000.0 0.0040 4.170 0.05000 250000.0 0.0123"

    def test_degenerate_lake(self, empty_profile: LakeProfile) -> None:
        """An empty profile is written as a single zero bin."""
        assert format_profile(empty_profile, OutputSchema.LAKE) == [
            "1042 1 1 0.000 0.01 0.000 1.0",
            "0.0 0.0",
        ]

    def test_degenerate_sea(self, empty_profile: LakeProfile) -> None:
        """The SEA zero bin carries four values."""
        assert format_profile(empty_profile, OutputSchema.SEA) == [
            "1042 0 1 0.000 0.01 0.000 1.0",
            "0.0 0.0 0.0 0.0",
        ]


class TestWriteProfile:
    """Tests for write_profile."""

    def test_writes_two_lines(self, sample_profile: LakeProfile) -> None:
        """Header and body are written newline-terminated."""
        stream = io.StringIO()

        write_profile(sample_profile, OutputSchema.LAKE, stream)

        assert stream.getvalue() == "7 1 2 4.180 0.01 4.180 1.0\n5.500 0.15000 4.170 0.05000\n"

    def test_defaults_to_stdout(self, sample_profile: LakeProfile, capsys: pytest.CaptureFixture[str]) -> None:
        """Without a stream the profile goes to standard output."""
        write_profile(sample_profile, OutputSchema.SEA)

        lines = capsys.readouterr().out.splitlines()
        assert lines[0].startswith("7 0 2 ")
        assert len(lines) == 2
