"""Sitronix display and LED drivers (ST75xx, ST77xx, ST79xx, ST16xx)."""

import re
from typing import Any

from ..categories import ComponentCategory
from .base import CompatibilityAttributes, Provider

C = ComponentCategory

_BASE_PART = re.compile(r"^(ST(?:7[579]|16)[0-9]{2})")

# Trailing letter after the revision: ST7735S-B -> COG die
PACKAGE_CODES: dict[str, str] = {"B": "COG", "V": "LQFP", "R": "QFN"}


class SitronixProvider(Provider):
    provider_id = "sitronix"
    manufacturer = "Sitronix"

    PATTERNS = (
        (C.DISPLAY_DRIVER, r"^ST75[0-9]{2}[A-Z0-9-]*$"),
        (C.DISPLAY_DRIVER, r"^ST77[0-9]{2}[A-Z0-9-]*$"),
        (C.DISPLAY_DRIVER, r"^ST79[0-9]{2}[A-Z0-9-]*$"),
        (C.LED_DRIVER, r"^ST16[0-9]{2}[A-Z0-9-]*$"),
        (C.IC, r"^ST16[0-9]{2}[A-Z0-9-]*$"),
    )

    COMPATIBILITY_RULES = {
        "driver": {
            "must_match": ["base_part"],
        },
    }

    def _series(self, s: str) -> str:
        return s[:4] if _BASE_PART.match(s) else ""

    def _package_code(self, s: str) -> str:
        if "-" in s:
            return PACKAGE_CODES.get(s.rsplit("-", 1)[1][:1], "")
        return ""

    def _specs(self, s: str, series: str, category: ComponentCategory) -> tuple[str, dict[str, Any]]:
        return "driver", {"base_part": _BASE_PART.match(s).group(1)}

    def cosmetically_compatible(
        self, candidate: CompatibilityAttributes, original: CompatibilityAttributes
    ) -> bool:
        # Die revision and bump options share one controller
        return True
