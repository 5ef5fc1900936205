"""NXP microcontrollers (LPC, Kinetis, S32K, i.MX RT), power MOSFETs, EEPROM and small-signal BJTs."""

import re
from typing import Any

from ..categories import ComponentCategory
from .base import Provider

C = ComponentCategory

# LPC package letters following the part number: LPC1768FBD100 -> FBD (LQFP)
LPC_PACKAGE_CODES: dict[str, str] = {
    "FBD": "LQFP", "JBD": "LQFP", "FET": "TFBGA", "JET": "TFBGA",
    "FHN": "HVQFN", "JHN": "HVQFN", "UK": "WLCSP", "FD": "SO", "FDH": "TSSOP",
}

# Kinetis package codes after the temperature letter: MK64FN1M0VLL12 -> LL (LQFP-100)
KINETIS_PACKAGES: dict[str, tuple[str, int]] = {
    "LL": ("LQFP", 100), "LH": ("LQFP", 64), "LK": ("LQFP", 80), "LQ": ("LQFP", 144),
    "FM": ("QFN", 32), "FT": ("QFN", 48), "MC": ("MAPBGA", 121), "MD": ("MAPBGA", 144),
}

_LPC = re.compile(r"^(LPC\d+(?:[A-Z]\d+)?)([A-Z]{2,3})(\d{2,3})")
_LPC_SERIES = re.compile(r"^(LPC\d+(?:[A-Z]\d+)?)")
_KINETIS = re.compile(r"^(MK\d{2}[A-Z])[A-Z0-9]*?[VC](L[LHKQ]|F[MT]|M[CD])\d*")
_KINETIS_SERIES = re.compile(r"^(MK\d{2}[A-Z])")
_S32K = re.compile(r"^(S32K\d{3})")
_IMX = re.compile(r"^(MCIMX\d+)")
_MOSFET = re.compile(r"^((?:PSMN|BUK\d[A-Z]?)[0-9R]+-\d+|PMV\d+[A-Z]{0,2}|BSS\d+)")
_BJT = re.compile(r"^(BC8[45]7|PN2222|PN2907|PN3904|PN3906)([A-C])?")

MOSFET_PACKAGES: dict[str, str] = {
    "YL": "LFPAK56", "YS": "LFPAK56", "ES": "TO-220", "PS": "TO-220", "BL": "D2PAK",
    "MS": "LFPAK33", "UL": "TO-252",
}


class NXPProvider(Provider):
    provider_id = "nxp"
    manufacturer = "NXP Semiconductors"

    PATTERNS = (
        *(
            (category, pattern)
            for pattern in (
                r"^LPC[0-9]+.*",
                r"^MK[0-9]{2}.*",
                r"^S32K[0-9]+.*",
                r"^MCIMX[0-9]+.*",
            )
            for category in (C.MICROCONTROLLER, C.MICROCONTROLLER_NXP)
        ),
        *(
            (category, pattern)
            for pattern in (
                r"^PSMN[0-9R]+-[0-9]+[A-Z]*$",
                r"^BUK[0-9][A-Z]?[0-9R]+-[0-9]+[A-Z]*$",
                r"^PMV[0-9]+[A-Z]*.*",
                r"^BSS[0-9]+.*",
            )
            for category in (C.MOSFET, C.MOSFET_NXP)
        ),
        (C.MEMORY, r"^SE[0-9]{3}.*"),
        (C.MEMORY_NXP, r"^SE[0-9]{3}.*"),
        (C.TRANSISTOR, r"^BC8[45]7[A-C]?(?:,?[0-9]{3})?$"),
        (C.TRANSISTOR, r"^PN(?:2222|2907|3904|3906)A?$"),
    )

    COMPATIBILITY_RULES = {
        "mcu": {
            "must_match": ["pin_count"],
        },
        "mosfet": {
            "must_match": ["base_number"],
        },
        "transistor": {
            "must_match": ["gain_group"],
        },
    }

    def _series(self, s: str) -> str:
        for pattern in (_LPC_SERIES, _KINETIS_SERIES, _S32K, _IMX, _BJT):
            match = pattern.match(s)
            if match:
                return match.group(1)
        match = _MOSFET.match(s)
        if match:
            return match.group(1)
        if s.startswith("SE"):
            return s[:5]
        return ""

    def _package_code(self, s: str) -> str:
        match = _LPC.match(s)
        if match:
            return LPC_PACKAGE_CODES.get(match.group(2), match.group(2))
        match = _KINETIS.match(s)
        if match:
            return KINETIS_PACKAGES[match.group(2)][0]
        if s.startswith(("PSMN", "BUK")) and "-" in s:
            tail = re.sub(r"^\d+", "", s.rsplit("-", 1)[1])
            return MOSFET_PACKAGES.get(tail[:2], "")
        if s.startswith(("BC8", "PMV", "BSS")):
            return "SOT-23"
        if s.startswith("PN"):
            return "TO-92"
        return ""

    def _pin_count(self, s: str) -> int:
        match = _LPC.match(s)
        if match:
            return int(match.group(3))
        match = _KINETIS.match(s)
        if match:
            return KINETIS_PACKAGES[match.group(2)][1]
        return -1

    def _temperature_grade(self, s: str) -> str:
        match = _KINETIS.match(s)
        if match:
            # Temperature letter sits right before the package code
            temp = s[match.start(2) - 1]
            return {"V": "extended", "C": "industrial"}.get(temp, "")
        return ""

    def _specs(self, s: str, series: str, category: ComponentCategory) -> tuple[str, dict[str, Any]]:
        base = category.base
        if base is C.MICROCONTROLLER:
            return "mcu", {"pin_count": self._pin_count(s)}
        if base is C.MOSFET:
            return "mosfet", {"base_number": series}
        if base is C.TRANSISTOR:
            match = _BJT.match(s)
            return "transistor", {"gain_group": match.group(2) if match else None}
        return "", {}
