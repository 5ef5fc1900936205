"""Manufacturer aliases for provider lookup.

Maps abbreviations and alternate names to provider ids. Keys are lowercase
for case-insensitive lookup.

NOTE: Only include TRUE aliases here (abbreviations, alternate names, former
company names). Provider ids and display names resolve automatically.
"""

import re

MANUFACTURER_ALIASES: dict[str, str] = {
    # Texas Instruments
    "texas": "ti",
    "texas instruments": "ti",
    "texas instruments inc": "ti",
    "national semiconductor": "ti",
    "national": "ti",
    "burr-brown": "ti",
    # STMicroelectronics
    "stm": "st",
    "stmicro": "st",
    "st micro": "st",
    "st microelectronics": "st",
    "sgs-thomson": "st",
    # NXP
    "nxp semiconductors": "nxp",
    "nxp semicon": "nxp",
    "philips": "nxp",
    "philips semiconductors": "nxp",
    "freescale": "nxp",
    # Vishay
    "vishay intertech": "vishay",
    "vishay siliconix": "vishay",
    "vishay general semiconductor": "vishay",
    "siliconix": "vishay",
    # Amphenol
    "amphenol icc": "amphenol",
    "amphenol fci": "amphenol",
    "fci": "amphenol",
    # GigaDevice
    "gd": "gigadevice",
    "gigadevice semicon beijing": "gigadevice",
    "gigadevice semiconductor": "gigadevice",
    # Sitronix
    "sitronix technology": "sitronix",
    "sitronix tech": "sitronix",
}


def _normalize_manufacturer_name(name: str) -> str:
    """Normalize manufacturer name for matching: lowercase, remove punctuation, collapse spaces."""
    normalized = re.sub(r'[.,\-\(\)&]', ' ', name.lower())  # Replace punctuation with space
    return re.sub(r'\s+', ' ', normalized).strip()  # Collapse multiple spaces


_ALIASES_NORMALIZED: dict[str, str] = {
    _normalize_manufacturer_name(k): v for k, v in MANUFACTURER_ALIASES.items()
}


def resolve_provider_id(name: str | None, known: dict[str, str] | None = None) -> str | None:
    """Resolve a manufacturer name, abbreviation or provider id to a provider id.

    ``known`` maps lowercase provider ids and display names to provider ids
    (built from the provider registry by the caller).

    Lookup order:
    1. Check aliases exactly (case-insensitive)
    2. Check provider ids and display names (case-insensitive)
    3. Check both with normalized punctuation
    4. Return None
    """
    if not name or not name.strip():
        return None
    known = known or {}
    name_lower = name.strip().lower()
    if name_lower in MANUFACTURER_ALIASES:
        return MANUFACTURER_ALIASES[name_lower]
    if name_lower in known:
        return known[name_lower]
    name_normalized = _normalize_manufacturer_name(name)
    if name_normalized in _ALIASES_NORMALIZED:
        return _ALIASES_NORMALIZED[name_normalized]
    for key, provider_id in known.items():
        if _normalize_manufacturer_name(key) == name_normalized:
            return provider_id
    return None
