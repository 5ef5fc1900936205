"""Amphenol board-level connectors."""

import re
from typing import Any

from ..categories import ComponentCategory
from ..packages import detect_mounting_type
from .base import CompatibilityAttributes, Provider

C = ComponentCategory

# Series -> (family, pitch mm, rated current A)
SERIES_INFO: dict[str, tuple[str, str, float]] = {
    "504182": ("Mini-PV", "2.00", 3.0),
    "505478": ("Mini-PV SMT", "2.00", 3.0),
    "10120843": ("HD20", "2.00", 3.0),
    "10120855": ("HD20 SMT", "2.00", 3.0),
    "10051922": ("Minitek Pwr", "3.00", 5.0),
    "10151980": ("BergStik", "2.54", 3.0),
    "10129378": ("ICC", "2.54", 2.5),
    "RJHSE": ("SFP/SFP+", "0.80", 0.5),
    "USB3-A": ("USB 3.0", "2.50", 0.9),
    "RJMG2310": ("RJ45", "", 0.0),
}

# Series with a single termination style -> package style for mounting detection
SERIES_TERMINATION: dict[str, str] = {
    "504182": "THT", "10120843": "THT", "10151980": "THT",
    "505478": "SMD", "10120855": "SMD",
}

# Last two digits of the code for series sold in both styles
CODE_TERMINATION: dict[str, str] = {"01": "THT", "02": "SMD"}

_PACKAGE_CODE = re.compile(r"-([0-9]{4})[A-Z]*$")
_SHORT_CODE = re.compile(r"^(?:RJHSE-538[0-9]|RJMG2310|USB3-A)-([0-9A-Z]{2,4})")


class AmphenolProvider(Provider):
    provider_id = "amphenol"
    manufacturer = "Amphenol"

    PATTERNS = tuple(
        (category, pattern)
        for pattern in (
            r"^504182-[0-9]{4}.*",
            r"^505478-[0-9]{4}.*",
            r"^10120843-[0-9]{4}.*",
            r"^10120855-[0-9]{4}.*",
            r"^RJHSE-538[0-9]-[0-9]{2}.*",
            r"^USB3-A-[0-9]{2}-[0-9A-Z]{4}.*",
            r"^10051922-[0-9]{4}.*",
            r"^10151980-[0-9]{4}.*",
            r"^10129378-[0-9]{4}.*",
            r"^RJMG2310-[0-9]{2}.*",
        )
        for category in (C.CONNECTOR, C.CONNECTOR_AMPHENOL)
    )

    COMPATIBILITY_RULES = {
        "board_connector": {
            "must_match": ["pin_count", "mounting"],
            "same_or_better": {"rated_current_a": "higher"},
        },
    }

    def _series(self, s: str) -> str:
        if s.startswith("RJHSE-538"):
            return "RJHSE"
        for series in SERIES_INFO:
            if s.startswith(series):
                return series
        return ""

    def _package_code(self, s: str) -> str:
        match = _PACKAGE_CODE.search(s)
        if match:
            return match.group(1)
        match = _SHORT_CODE.match(s)
        return match.group(1) if match else ""

    def _pin_count(self, s: str) -> int:
        """First two digits of the package code: 504182-0210 -> 2 positions."""
        code = self._package_code(s)
        if len(code) < 2 or not code[:2].isdigit():
            return -1
        pins = int(code[:2])
        return pins if pins > 0 else -1

    def mounting_type(self, mpn: str) -> str:
        """Mounting style: 'smd', 'through_hole' or 'not_sure'."""
        s = self._owned(mpn)
        if not s:
            return "not_sure"
        termination = SERIES_TERMINATION.get(self._series(s))
        if termination is None:
            termination = CODE_TERMINATION.get(self._package_code(s)[-2:], "")
        return detect_mounting_type(termination)

    def _specs(self, s: str, series: str, category: ComponentCategory) -> tuple[str, dict[str, Any]]:
        _family, pitch, current = SERIES_INFO.get(series, ("", "", 0.0))
        return "board_connector", {
            "pin_count": self._pin_count(s),
            "mounting": self.mounting_type(s),
            "pitch_mm": pitch,
            "rated_current_a": current,
        }

    def cosmetically_compatible(
        self, candidate: CompatibilityAttributes, original: CompatibilityAttributes
    ) -> bool:
        # Position code and mounting already compared; plating and packing are cosmetic
        return candidate.specs["pin_count"] != -1
