"""Vishay discretes: 1N400x rectifiers, 1N4148, 1N47xx Zeners, SiliconFET MOSFETs."""

import re
from typing import Any

from ..categories import ComponentCategory
from .base import Provider

C = ComponentCategory

# 1N4001..1N4007 repetitive peak reverse voltage (V) by last digit
RECTIFIER_VOLTAGES: dict[str, int] = {
    "1": 50, "2": 100, "3": 200, "4": 400, "5": 600, "6": 800, "7": 1000,
}

# 1N4728A..1N4764A nominal Zener voltage (V)
ZENER_VOLTAGES: dict[int, float] = dict(zip(range(4728, 4765), [
    3.3, 3.6, 3.9, 4.3, 4.7, 5.1, 5.6, 6.2, 6.8, 7.5,
    8.2, 9.1, 10, 11, 12, 13, 15, 16, 18, 20,
    22, 24, 27, 30, 33, 36, 39, 43, 47, 51,
    56, 62, 68, 75, 82, 91, 100,
]))

_RECTIFIER = re.compile(r"^1N400([1-7])")
_ZENER = re.compile(r"^1N(47\d{2})")
_MOSFET_BASE = re.compile(r"^(SI[RS]?\d{3,4})")

# Ordering suffixes after the base number are finish / packing options
_SUFFIX = r"(?:-?E3|-?T1|-?GE3|-?TR|/[0-9A-Z]+|-[0-9A-Z]+)*"


class VishayProvider(Provider):
    provider_id = "vishay"
    manufacturer = "Vishay Intertechnology"

    PATTERNS = (
        (C.DIODE, rf"^1N400[1-7]{_SUFFIX}$"),
        (C.DIODE_VISHAY, rf"^1N400[1-7]{_SUFFIX}$"),
        (C.DIODE, rf"^1N4148{_SUFFIX}$"),
        (C.DIODE_VISHAY, rf"^1N4148{_SUFFIX}$"),
        (C.DIODE, rf"^1N47(?:2[89]|[3-5][0-9]|6[0-4])A?{_SUFFIX}$"),
        (C.DIODE_VISHAY, rf"^1N47(?:2[89]|[3-5][0-9]|6[0-4])A?{_SUFFIX}$"),
        (C.MOSFET, r"^SI[0-9]{4}[A-Z0-9-]*$"),
        (C.MOSFET_VISHAY, r"^SI[0-9]{4}[A-Z0-9-]*$"),
        (C.MOSFET, r"^SI[RS][0-9]{3}[A-Z0-9-]*$"),
        (C.MOSFET_VISHAY, r"^SI[RS][0-9]{3}[A-Z0-9-]*$"),
    )

    COMPATIBILITY_RULES = {
        "rectifier": {
            "same_or_better": {"voltage_v": "higher"},  # 1N4007 replaces 1N4001
        },
        "zener": {
            "must_match": ["zener_voltage_v"],
        },
        "mosfet": {
            "must_match": ["base_number"],
        },
    }

    def _series(self, s: str) -> str:
        if _RECTIFIER.match(s):
            return "1N4000"
        if s.startswith("1N4148"):
            return "1N4148"
        if _ZENER.match(s):
            return "1N4700"
        match = _MOSFET_BASE.match(s)
        if match:
            return match.group(1)
        return ""

    def _package_code(self, s: str) -> str:
        if s.startswith("1N4148"):
            return "DO-35"
        if s.startswith("1N4"):
            return "DO-41"
        return ""

    def _specs(self, s: str, series: str, category: ComponentCategory) -> tuple[str, dict[str, Any]]:
        if series == "1N4000":
            return "rectifier", {"voltage_v": self.rectifier_voltage(s)}
        if series == "1N4700":
            number = int(_ZENER.match(s).group(1))
            return "zener", {"zener_voltage_v": ZENER_VOLTAGES.get(number)}
        if series.startswith("SI"):
            return "mosfet", {"base_number": series}
        return "", {}

    def rectifier_voltage(self, mpn: str) -> int:
        """Reverse voltage of a 1N400x rectifier, -1 for anything else."""
        s = self._owned(mpn)
        match = _RECTIFIER.match(s) if s else None
        return RECTIFIER_VOLTAGES[match.group(1)] if match else -1
