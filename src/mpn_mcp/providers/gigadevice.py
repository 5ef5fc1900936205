"""GigaDevice serial flash (GD25 / GD5F) and GD32 microcontrollers.

GD32 ordering codes follow the STM32 layout::

    GD32 F 1 03 C 8 T 6
         |  | |  | | | '- temperature (6 = -40..85C, 7 = -40..105C)
         |  | |  | | '--- package (T = LQFP, U = QFN, ...)
         |  | |  | '----- flash size code (8 = 64KB, B = 128KB, ...)
         |  | |  '------- pin count code (C = 48, R = 64, ...)
         |  | '---------- line
         |  '------------ series
         '--------------- family (F, E, L, W, VF for RISC-V)
"""

import re
from typing import Any

from ..categories import ComponentCategory
from .base import CompatibilityAttributes, Provider

C = ComponentCategory

_NOR_DENSITY = re.compile(r"^GD25(?:LQ|WQ|[QBT])Q?(\d+)")
_NAND_DENSITY = re.compile(r"^GD5F(\d+)G")
_MCU = re.compile(r"^GD32(VF|[VEFLW])(\d)(\d{2})([A-Z])([0-9A-Z])([A-Z])(\d)(?:TR)?$")
_FLASH_TEMPERATURE = re.compile(r"([IJF])[GQP]?R?$")

# Longest first so "EWIGR" wins over "WIG"
FLASH_PACKAGE_CODES: dict[str, str] = {
    "EWIGR": "WSON-8",
    "CSIG": "SOP-8",
    "ESIG": "SOP-8",
    "WIGR": "WSON-8",
    "TIGR": "TFBGA",
    "EWIQ": "WSON-8",
    "EZIQ": "USON-8",
    "WIG": "WSON-8",
    "SIG": "SOP-8",
    "SIQ": "SOP-8",
    "SIP": "SOP-8",
    "EIG": "SOP-8",
    "ZIG": "USON-8",
    "FIG": "WLCSP",
    "LIG": "SOIC-16",
    "NIG": "DFN-8",
    "TIG": "TFBGA",
    "UIG": "VSOP-8",
    "BIG": "BGA",
}

MCU_PACKAGE_CODES: dict[str, str] = {
    "T": "LQFP", "C": "LQFP", "R": "LQFP",
    "K": "UFBGA", "U": "VFQFPN", "V": "VFQFPN", "H": "BGA",
    "Y": "WLCSP", "G": "WLCSP",
}

MCU_PIN_COUNTS: dict[str, int] = {
    "K": 32, "T": 36, "C": 48, "R": 64, "V": 100, "Z": 144, "I": 176,
}

MCU_FLASH_SIZES_KB: dict[str, int] = {
    "4": 16, "6": 32, "8": 64, "B": 128, "C": 256, "D": 384, "E": 512, "G": 1024, "I": 2048,
}

MCU_TEMPERATURE_GRADES: dict[str, str] = {"6": "industrial", "7": "extended"}
FLASH_TEMPERATURE_GRADES: dict[str, str] = {"I": "industrial", "J": "extended", "F": "automotive"}

_FLASH_SERIES = ("GD25LQ", "GD25WQ", "GD25Q", "GD25B", "GD25T", "GD5F")
_MCU_SERIES = (
    "GD32VF1", "GD32F1", "GD32F3", "GD32F4", "GD32E1", "GD32E2", "GD32E5", "GD32W5", "GD32L2",
)


class GigaDeviceProvider(Provider):
    provider_id = "gigadevice"
    manufacturer = "GigaDevice"

    PATTERNS = (
        *(
            (category, pattern)
            for pattern in (
                r"^GD25Q\d+.*",
                r"^GD25B\d+.*",
                r"^GD25LQ\d+.*",
                r"^GD25WQ\d+.*",
                r"^GD25T\d+.*",
                r"^GD5F\d+.*",
            )
            for category in (C.MEMORY, C.MEMORY_FLASH, C.MEMORY_FLASH_GIGADEVICE)
        ),
        *(
            (category, pattern)
            for pattern in (
                r"^GD32F[134]\d{2}.*",
                r"^GD32E[125]\d{2}.*",
                r"^GD32VF1\d{2}.*",
                r"^GD32W5\d{2}.*",
                r"^GD32L2\d{2}.*",
            )
            for category in (C.MICROCONTROLLER, C.MICROCONTROLLER_GIGADEVICE)
        ),
    )

    COMPATIBILITY_RULES = {
        "flash": {
            "must_match": ["density"],
        },
        "mcu": {
            "must_match": ["line", "pin_count"],
            "same_or_better": {"flash_size_kb": "higher"},
        },
    }

    def _series(self, s: str) -> str:
        for series in _FLASH_SERIES + _MCU_SERIES:
            if s.startswith(series):
                return series
        return ""

    def _package_code(self, s: str) -> str:
        if s.startswith(("GD25", "GD5F")):
            return self._flash_package(s)
        if s.startswith("GD32"):
            return self._mcu_package(s)
        return ""

    def _flash_package(self, s: str) -> str:
        for suffix, package in FLASH_PACKAGE_CODES.items():
            if s.endswith(suffix):
                return package
        # Tape-and-reel "R" does not change the package
        trimmed = s[:-1] if s.endswith("R") else s
        for suffix, package in FLASH_PACKAGE_CODES.items():
            if trimmed.endswith(suffix):
                return package
        return ""

    def _mcu_package(self, s: str) -> str:
        """GD32F103C8T6 -> 'LQFP48'"""
        match = _MCU.match(s)
        if not match:
            return ""
        package = MCU_PACKAGE_CODES.get(match.group(6), match.group(6))
        pins = MCU_PIN_COUNTS.get(match.group(4))
        return f"{package}{pins}" if pins else package

    def _density(self, s: str) -> str:
        """GD25Q128CSIG -> '128' (Mbit), GD5F1GQ4UB -> '1G' (Gbit)"""
        match = _NOR_DENSITY.match(s)
        if match:
            return match.group(1)
        match = _NAND_DENSITY.match(s)
        if match:
            return f"{match.group(1)}G"
        return ""

    def _pin_count(self, s: str) -> int:
        match = _MCU.match(s)
        if not match:
            return -1
        return MCU_PIN_COUNTS.get(match.group(4), -1)

    def _flash_size_kb(self, s: str) -> int:
        match = _MCU.match(s)
        if not match:
            return -1
        return MCU_FLASH_SIZES_KB.get(match.group(5), -1)

    def _temperature_grade(self, s: str) -> str:
        match = _MCU.match(s)
        if match:
            return MCU_TEMPERATURE_GRADES.get(match.group(7), "")
        if s.startswith(("GD25", "GD5F")):
            match = _FLASH_TEMPERATURE.search(s)
            if match:
                return FLASH_TEMPERATURE_GRADES[match.group(1)]
        return ""

    def mcu_line(self, s: str) -> str:
        """GD32F103C8T6 -> 'GD32F103', GD32VF103CBT6 -> 'GD32VF103'"""
        match = _MCU.match(s)
        if not match:
            return ""
        return f"GD32{match.group(1)}{match.group(2)}{match.group(3)}"

    def _specs(self, s: str, series: str, category: ComponentCategory) -> tuple[str, dict[str, Any]]:
        if series.startswith("GD32"):
            return "mcu", {
                "line": self.mcu_line(s),
                "pin_count": self._pin_count(s),
                "flash_size_kb": self._flash_size_kb(s),
            }
        return "flash", {"density": self._density(s)}

    def cosmetically_compatible(
        self, candidate: CompatibilityAttributes, original: CompatibilityAttributes
    ) -> bool:
        if candidate.group == "flash":
            # Same density in any package is an official second source
            return bool(candidate.specs["density"])
        if candidate.specs["pin_count"] == -1 or not candidate.specs["line"]:
            return False
        return super().cosmetically_compatible(candidate, original)
