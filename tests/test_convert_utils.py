"""
Tests for IEC size formatting used in every "compressed: ... from: ... to: ..." line.
"""
import pytest
from pixelpress.utils.convert_utils import ConvertUtils
from pixelpress.services.report_service import ReportService


class TestBytesToIEC:
    """Test conversion from a byte count to a binary-unit string."""

    @pytest.mark.parametrize("size, expected", [
        (0, "0 B"),
        (1, "1 B"),
        (1023, "1023 B"),
        (1024, "1.0 KiB"),
        (1536, "1.5 KiB"),
        (1048576, "1.0 MiB"),
        (1024 ** 3, "1.0 GiB"),
        (5 * 1024 ** 4, "5.0 TiB"),
        (1024 ** 5, "1.0 PiB"),
        (2 * 1024 ** 6, "2.0 EiB"),
    ])
    def test_known_values(self, size, expected):
        assert ConvertUtils.bytes_to_iec(size) == expected

    def test_below_unit_has_no_decimal(self):
        """Sizes under 1024 are whole byte counts."""
        assert "." not in ConvertUtils.bytes_to_iec(512)

    def test_unit_boundaries(self):
        """The unit switches exactly at each power of 1024."""
        assert ConvertUtils.bytes_to_iec(1024 * 1024 - 1).endswith("KiB")
        assert ConvertUtils.bytes_to_iec(1024 * 1024).endswith("MiB")

    def test_example_scenario_sizes(self):
        assert ConvertUtils.bytes_to_iec(500000) == "488.3 KiB"
        assert ConvertUtils.bytes_to_iec(200000) == "195.3 KiB"


class TestSavingsRatio:
    def test_smaller_file(self):
        assert ConvertUtils.savings_ratio(1000, 750) == pytest.approx(0.25)

    def test_larger_file_is_negative(self):
        assert ConvertUtils.savings_ratio(1000, 1100) == pytest.approx(-0.1)

    def test_zero_prior_size(self):
        assert ConvertUtils.savings_ratio(0, 10) == 0.0


class TestFormatSizes:
    def test_returns_pair(self):
        assert ReportService.format_sizes(1023, 1024) == ("1023 B", "1.0 KiB")
