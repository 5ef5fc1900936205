"""Tests for shared package-code helpers."""

import pytest
from mpn_mcp.packages import (
    detect_mounting_type,
    packages_compatible,
    resolve_suffix,
)


class TestResolveSuffix:
    """Longest known code at the start of a suffix."""

    @pytest.mark.parametrize("suffix,expected", [
        ("DGKR", "MSOP"),
        ("DR", "SOIC"),
        ("PWR", "TSSOP"),
        ("DBVR", "SOT-23"),
        ("CT", "TO-220"),
        ("pw", "TSSOP"),
        ("DW", "SOIC-Wide"),
        ("KC", "TO-252"),
        ("K", "TO-3"),
    ])
    def test_suffixes(self, suffix, expected):
        assert resolve_suffix(suffix) == expected

    def test_nothing_known(self):
        assert resolve_suffix("99") == ""
        assert resolve_suffix("") == ""
        assert resolve_suffix(None) == ""


class TestDetectMountingType:
    """Test mounting type detection."""

    @pytest.mark.parametrize("package", [
        "SOIC", "SOIC-8", "TSSOP-20", "LQFP48", "LQFP-64", "QFN-24", "WSON-8",
        "SOT-23", "SOT-23-5", "DPAK", "D2PAK", "TO-252", "WLCSP", "SOP-8", "SMD",
    ])
    def test_smd_packages(self, package):
        assert detect_mounting_type(package) == "smd"

    @pytest.mark.parametrize("package", [
        "DIP", "DIP-8", "PDIP", "TO-220", "TO-220-3", "TO-92", "TO-247", "DO-41", "DO-35", "THT",
    ])
    def test_through_hole_packages(self, package):
        assert detect_mounting_type(package) == "through_hole"

    def test_case_insensitive(self):
        assert detect_mounting_type("qfn-24") == "smd"
        assert detect_mounting_type("dip-8") == "through_hole"

    def test_empty_package_defaults_to_not_sure(self):
        assert detect_mounting_type("") == "not_sure"
        assert detect_mounting_type(None) == "not_sure"

    def test_unknown_defaults_to_not_sure(self):
        assert detect_mounting_type("CUSTOM-PKG") == "not_sure"


class TestPackagesCompatible:
    """Which package differences are cosmetic."""

    @pytest.mark.parametrize("pkg1,pkg2", [
        ("DIP", "DIP"),
        ("DIP", "SOIC"),
        ("SOIC-8", "TSSOP-8"),
        ("TO-220", "DPAK"),
        ("TO-252", "SOT-223"),
        ("lqfp48", "LQFP48"),
        ("", "DIP"),
        (None, "SOIC"),
    ])
    def test_compatible(self, pkg1, pkg2):
        assert packages_compatible(pkg1, pkg2)

    @pytest.mark.parametrize("pkg1,pkg2", [
        ("SOT-23", "DIP"),
        ("LQFP48", "LQFP64"),
        ("DO-41", "DO-35"),
        ("TO-92", "TO-220"),
    ])
    def test_incompatible(self, pkg1, pkg2):
        assert not packages_compatible(pkg1, pkg2)

    def test_symmetric(self):
        assert packages_compatible("SOIC", "DIP") == packages_compatible("DIP", "SOIC")
