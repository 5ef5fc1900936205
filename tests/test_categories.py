"""Tests for the category vocabulary and MPN value types."""

import pytest
from mpn_mcp.categories import ComponentCategory, depth_of, family_of, parse_category
from mpn_mcp.types import NO_MATCH, ClassificationResult, PartIdentifier, normalize_mpn

C = ComponentCategory


class TestCategoryHierarchy:
    """Generic categories and their manufacturer-qualified refinements."""

    @pytest.mark.parametrize("category,base", [
        (C.MOSFET_ST, C.MOSFET),
        (C.MICROCONTROLLER_NXP, C.MICROCONTROLLER),
        (C.OPAMP_TI, C.OPAMP),
        (C.CONNECTOR_AMPHENOL, C.CONNECTOR),
        (C.MEMORY_FLASH_GIGADEVICE, C.MEMORY_FLASH),
        (C.MEMORY_FLASH, C.MEMORY),
    ])
    def test_base(self, category, base):
        assert category.base is base

    @pytest.mark.parametrize("category", [C.IC, C.MOSFET, C.CONNECTOR, C.MEMORY])
    def test_generic_is_its_own_base(self, category):
        assert category.base is category
        assert not category.is_qualified
        assert category.manufacturer == ""

    def test_qualified_carries_manufacturer(self):
        assert C.MOSFET_ST.is_qualified
        assert C.MOSFET_ST.manufacturer == "ST"
        assert C.DIODE_VISHAY.manufacturer == "VISHAY"

    def test_memory_flash_is_refinement_but_not_qualified(self):
        assert C.MEMORY_FLASH.base is C.MEMORY
        assert not C.MEMORY_FLASH.is_qualified

    def test_family_walks_whole_chain(self):
        assert family_of(C.MEMORY_FLASH_GIGADEVICE) is C.MEMORY
        assert family_of(C.MOSFET) is C.MOSFET

    def test_depth(self):
        assert depth_of(C.MEMORY) == 0
        assert depth_of(C.MEMORY_FLASH) == 1
        assert depth_of(C.MEMORY_FLASH_GIGADEVICE) == 2
        assert depth_of(C.OPAMP_TI) == 1

    def test_same_family(self):
        assert C.MEMORY_FLASH_GIGADEVICE.is_same_family(C.MEMORY_NXP)
        assert not C.MEMORY_FLASH_GIGADEVICE.is_same_family(C.MICROCONTROLLER_GIGADEVICE)
        assert not C.MEMORY.is_same_family(None)


class TestParseCategory:
    """Case-insensitive category lookup by name."""

    @pytest.mark.parametrize("name,expected", [
        ("OPAMP", C.OPAMP),
        ("opamp", C.OPAMP),
        ("  connector ", C.CONNECTOR),
        ("memory-flash", C.MEMORY_FLASH),
        ("mosfet st", C.MOSFET_ST),
    ])
    def test_known_names(self, name, expected):
        assert parse_category(name) is expected

    @pytest.mark.parametrize("name", ["", "   ", "RESISTOR", "OPAMPS", None])
    def test_unknown_names_return_none(self, name):
        assert parse_category(name) is None

    def test_enum_passes_through(self):
        assert parse_category(C.DIODE) is C.DIODE


class TestPartIdentifier:
    """MPN normalization."""

    def test_parse_normalizes(self):
        identifier = PartIdentifier.parse("  lm358n ")
        assert identifier.raw == "  lm358n "
        assert identifier.normalized == "LM358N"
        assert str(identifier) == "LM358N"

    @pytest.mark.parametrize("value", [None, "", "   ", 123, b"LM358"])
    def test_parse_rejects_blank_and_non_strings(self, value):
        assert PartIdentifier.parse(value) is None

    def test_normalize_mpn(self):
        assert normalize_mpn(" gd25q128csig") == "GD25Q128CSIG"
        assert normalize_mpn(PartIdentifier.parse("1n4007")) == "1N4007"
        assert normalize_mpn(None) == ""
        assert normalize_mpn(42) == ""


class TestClassificationResult:
    """Result value and its dict form."""

    def test_no_match(self):
        assert not NO_MATCH.matched
        assert NO_MATCH.to_dict() == {"mpn": "", "matched": False}

    def test_to_dict(self):
        result = ClassificationResult(
            mpn="LM358N",
            category=C.OPAMP_TI,
            provider_id="ti",
            series="LM358",
            package_code="DIP",
            specificity=(5, 1, 5, 0),
            attributes={"pin_count": 8},
        )
        assert result.matched
        data = result.to_dict()
        assert data["category"] == "OPAMP_TI"
        assert data["base_category"] == "OPAMP"
        assert data["provider"] == "ti"
        assert data["specificity"] == [5, 1, 5, 0]
        assert data["attributes"] == {"pin_count": 8}

    def test_attributes_do_not_affect_equality(self):
        a = ClassificationResult(mpn="X", category=C.IC, attributes={"a": 1})
        b = ClassificationResult(mpn="X", category=C.IC, attributes={"a": 2})
        assert a == b
        assert hash(a) == hash(b)
