"""STMicroelectronics: STM32 / STM8 microcontrollers, power MOSFETs, 78xx regulators.

ST also sells a long tail of "ST" + digits interface and power ICs (ST3232,
ST485, ST1480). That prefix overlaps Sitronix display drivers (ST7735), so the
generic IC rule here is short and loses to any narrower rule.
"""

import re
from typing import Any

from ..categories import ComponentCategory
from ..packages import packages_compatible, resolve_suffix
from .base import CompatibilityAttributes, Provider

C = ComponentCategory

_STM32 = re.compile(r"^(STM32[A-Z]{1,2}[0-9]{2,3})([A-Z])([0-9A-Z])([A-Z])([0-9])")
_STM8 = re.compile(r"^(STM8[SLA][0-9]{3})([A-Z])([0-9])([A-Z])([0-9])")
_MOSFET = re.compile(r"^ST([FPDBW])([0-9]+[A-Z]+[0-9]+[A-Z0-9]*)")
_REGULATOR = re.compile(r"^(?:L|MC)7([89])([LM]?)([0-9]{2})")
_REGULATOR_GRADE = re.compile(r"^(?:AB|AC|A|B|C)")
_IC = re.compile(r"^(ST[0-9]{3,4})")

MCU_PIN_COUNTS: dict[str, int] = {
    "F": 20, "G": 28, "K": 32, "T": 36, "S": 44, "C": 48, "R": 64, "M": 80,
    "O": 90, "V": 100, "Q": 132, "Z": 144, "A": 169, "I": 176, "B": 208, "N": 216,
}

STM32_FLASH_SIZES_KB: dict[str, int] = {
    "4": 16, "6": 32, "8": 64, "B": 128, "C": 256, "D": 384, "E": 512,
    "F": 768, "G": 1024, "H": 1536, "I": 2048,
}

STM8_FLASH_SIZES_KB: dict[str, int] = {"2": 4, "3": 8, "4": 16, "6": 32, "8": 64}

MCU_PACKAGE_CODES: dict[str, str] = {
    "T": "LQFP", "H": "BGA", "U": "VFQFPN", "Y": "WLCSP", "P": "TSSOP", "I": "UFBGA",
}

MCU_TEMPERATURE_GRADES: dict[str, str] = {"6": "industrial", "7": "extended", "3": "automotive"}

# MOSFET package is encoded in the prefix letter
MOSFET_PACKAGES: dict[str, str] = {
    "F": "TO-220FP", "P": "TO-220", "D": "DPAK", "B": "D2PAK", "W": "TO-247",
}

REGULATOR_PACKAGES: dict[str, str] = {
    "V": "TO-220", "T": "TO-220", "P": "TO-220FP", "D2T": "D2PAK", "DT": "DPAK",
    "Z": "TO-92", "U": "SOT-89", "D": "SOIC",
}

# 78xx variants by maximum output current (A)
REGULATOR_CURRENTS: dict[str, float] = {"": 1.5, "M": 0.5, "L": 0.1}


class STProvider(Provider):
    provider_id = "st"
    manufacturer = "STMicroelectronics"

    PATTERNS = (
        *(
            (category, pattern)
            for pattern in (r"^STM32[FLHGWUC][0-9A-Z]{2,}.*", r"^STM8[SLA][0-9A-Z]+.*")
            for category in (C.MICROCONTROLLER, C.MICROCONTROLLER_ST)
        ),
        *(
            (category, pattern)
            for pattern in (
                r"^STF[0-9]+[A-Z]+[0-9]+.*",
                r"^STP[0-9]+[A-Z]+[0-9]+.*",
                r"^STD[0-9]+[A-Z]+[0-9]+.*",
                r"^STB[0-9]+[A-Z]+[0-9]+.*",
                r"^STW[0-9]+[A-Z]+[0-9]+.*",
            )
            for category in (C.MOSFET, C.MOSFET_ST)
        ),
        *(
            (category, pattern)
            for pattern in (
                r"^L78[LM]?[0-9]{2}[A-Z0-9-]*$",
                r"^L79[LM]?[0-9]{2}[A-Z0-9-]*$",
                r"^MC78[LM]?[0-9]{2}[A-Z0-9-]*$",
                r"^MC79[LM]?[0-9]{2}[A-Z0-9-]*$",
            )
            for category in (C.VOLTAGE_REGULATOR, C.VOLTAGE_REGULATOR_LINEAR_ST)
        ),
        (C.IC, r"^ST[0-9]{3,4}[A-Z0-9-]*$"),
    )

    EQUIVALENT_SERIES = {
        "L78": frozenset({"MC78"}),
        "L79": frozenset({"MC79"}),
    }

    COMPATIBILITY_RULES = {
        "mcu": {
            "must_match": ["line", "pin_count"],
            "same_or_better": {"flash_size_kb": "higher"},
        },
        "mosfet": {
            "must_match": ["die"],
        },
        "regulator": {
            "must_match": ["output_voltage_v"],
            "same_or_better": {"output_current_a": "higher"},
        },
    }

    def _series(self, s: str) -> str:
        if s.startswith("STM32"):
            match = re.match(r"^(STM32[A-Z]{1,2}[0-9])", s)
            return match.group(1) if match else ""
        if s.startswith("STM8"):
            return s[:5]
        match = _MOSFET.match(s)
        if match:
            return "ST" + match.group(2)
        match = _REGULATOR.match(s)
        if match:
            prefix = "MC" if s.startswith("MC") else "L"
            return f"{prefix}7{match.group(1)}"
        match = _IC.match(s)
        return match.group(1) if match else ""

    def _mcu_match(self, s: str) -> re.Match[str] | None:
        return _STM32.match(s) or _STM8.match(s)

    def _package_code(self, s: str) -> str:
        match = self._mcu_match(s)
        if match:
            package = MCU_PACKAGE_CODES.get(match.group(4), match.group(4))
            pins = MCU_PIN_COUNTS.get(match.group(2))
            return f"{package}{pins}" if pins else package
        match = _MOSFET.match(s)
        if match:
            return MOSFET_PACKAGES[match.group(1)]
        match = _REGULATOR.match(s)
        if match:
            return self._regulator_package(s[match.end():])
        return ""

    def _regulator_package(self, suffix: str) -> str:
        """'CV' -> TO-220, 'ABD2T-TR' -> D2PAK, 'ACZ' -> TO-92"""
        suffix = re.sub(r"-?TR$", "", suffix)
        suffix = _REGULATOR_GRADE.sub("", suffix)
        if suffix.endswith("G") and suffix[:-1] in REGULATOR_PACKAGES:
            suffix = suffix[:-1]  # Lead-free marking
        return REGULATOR_PACKAGES.get(suffix) or resolve_suffix(suffix) or suffix

    def _pin_count(self, s: str) -> int:
        match = self._mcu_match(s)
        if not match:
            return -1
        return MCU_PIN_COUNTS.get(match.group(2), -1)

    def _flash_size_kb(self, s: str) -> int:
        match = _STM32.match(s)
        if match:
            return STM32_FLASH_SIZES_KB.get(match.group(3), -1)
        match = _STM8.match(s)
        if match:
            return STM8_FLASH_SIZES_KB.get(match.group(3), -1)
        return -1

    def _temperature_grade(self, s: str) -> str:
        match = self._mcu_match(s)
        if not match:
            return ""
        return MCU_TEMPERATURE_GRADES.get(match.group(5), "")

    def _specs(self, s: str, series: str, category: ComponentCategory) -> tuple[str, dict[str, Any]]:
        base = category.base
        if base is C.MICROCONTROLLER:
            match = self._mcu_match(s)
            return "mcu", {
                "line": match.group(1) if match else "",
                "pin_count": self._pin_count(s),
                "flash_size_kb": self._flash_size_kb(s),
            }
        if base is C.MOSFET:
            return "mosfet", {"die": series}
        if base is C.VOLTAGE_REGULATOR:
            match = _REGULATOR.match(s)
            volts = int(match.group(3))
            return "regulator", {
                "output_voltage_v": -volts if match.group(1) == "9" else volts,
                "output_current_a": REGULATOR_CURRENTS[match.group(2)],
            }
        return "", {}

    def cosmetically_compatible(
        self, candidate: CompatibilityAttributes, original: CompatibilityAttributes
    ) -> bool:
        if candidate.group == "mcu":
            return bool(candidate.specs["line"]) and candidate.package == original.package
        if candidate.group == "mosfet":
            # Same die in another package needs a different footprint
            return candidate.package == original.package
        return packages_compatible(candidate.package, original.package)
