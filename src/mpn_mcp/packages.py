"""Package codes shared by providers: suffix lookup, mounting style, compatibility."""

# Common manufacturer ordering-code suffixes -> package name
PACKAGE_CODES: dict[str, str] = {
    # DIP
    "N": "DIP", "P": "DIP", "PU": "PDIP",
    # SOIC
    "D": "SOIC", "M": "SOIC", "R": "SOIC", "DW": "SOIC-Wide", "SU": "SOIC",
    # TSSOP / MSOP
    "PW": "TSSOP", "DT": "TSSOP", "PT": "TSSOP", "XU": "TSSOP",
    "DGK": "MSOP",
    # QFP / QFN / CSP
    "AU": "TQFP", "MU": "QFN", "CU": "WLCSP",
    # SOT
    "DBV": "SOT-23", "MP": "SOT-223", "U": "SOT-223", "DRL": "SOT-553", "DRV": "SON",
    # TO
    "T": "TO-220", "T3": "TO-220", "CT": "TO-220", "TA": "TO-220F", "FP": "TO-220F",
    "K": "TO-3", "H": "TO-39", "KC": "TO-252", "KV": "TO-252", "TU": "TO-251", "F": "TO-251",
    # Power SMD
    "S": "D2PAK", "L": "DPAK",
    # Diodes
    "RL": "DO-41", "G": "DO-35",
    # Generic
    "SMD": "SMD", "THT": "THT",
}

POWER_PACKAGES = frozenset({
    "TO-220", "TO-220F", "TO-220FP", "TO-252", "TO-247", "TO-263",
    "D2PAK", "DPAK", "SOT-223",
})

# Small-signal IC packages that are footprint-different but electrically equivalent
LOGIC_PACKAGES = frozenset({"DIP", "PDIP", "SOIC", "TSSOP", "MSOP"})

THROUGH_HOLE_PACKAGES = frozenset({
    "DIP", "PDIP", "TO-220", "TO-220F", "TO-220FP", "TO-3", "TO-39", "TO-92", "TO-247",
    "DO-41", "DO-35", "DO-15", "THT",
})

SMD_PACKAGES = frozenset({
    "SOIC", "SOIC-WIDE", "TSSOP", "MSOP", "TQFP", "LQFP", "QFP", "QFN", "VFQFPN", "HVQFN",
    "BGA", "TFBGA", "UFBGA", "WLCSP", "SOT-23", "SOT-223", "SOT-553", "SON",
    "D2PAK", "DPAK", "TO-252", "TO-263", "SOD-123", "SMD",
})


def resolve_suffix(suffix: str | None) -> str:
    """Resolve the longest known package code at the start of a suffix.

    'DGKR' -> 'MSOP' (DGK + tape-and-reel R). Returns "" when nothing is known.
    """
    if not suffix:
        return ""
    upper = suffix.strip().upper()
    if upper in PACKAGE_CODES:
        return PACKAGE_CODES[upper]
    for length in range(min(len(upper), 3), 0, -1):
        prefix = upper[:length]
        if prefix in PACKAGE_CODES:
            return PACKAGE_CODES[prefix]
    return ""


def _family(package: str) -> str:
    """Strip a pin count: 'LQFP48' -> 'LQFP', 'SOP-8' -> 'SOP'."""
    upper = package.upper()
    if upper in THROUGH_HOLE_PACKAGES or upper in SMD_PACKAGES or upper in POWER_PACKAGES:
        return upper
    return upper.rstrip("0123456789").rstrip("-")


def detect_mounting_type(package: str | None) -> str:
    """Determine mounting style of a package name.

    Returns:
        "smd", "through_hole", or "not_sure" if the package is unknown.
    """
    if not package:
        return "not_sure"
    upper = package.strip().upper()
    family = _family(upper)
    if upper in THROUGH_HOLE_PACKAGES or family in THROUGH_HOLE_PACKAGES:
        return "through_hole"
    if upper in SMD_PACKAGES or family in SMD_PACKAGES:
        return "smd"
    if family.startswith(("SO", "QFN", "DFN", "WSON", "USON", "VSOP", "BGA", "WLCSP", "LGA")):
        return "smd"
    if family.startswith(("DIP", "SIP", "TO-")):
        return "through_hole"
    return "not_sure"


def packages_compatible(pkg1: str | None, pkg2: str | None) -> bool:
    """Whether two resolved package names are interchangeable for a replacement.

    Missing information on either side is not a conflict. Otherwise the
    packages must be equal, both power packages, or both small-signal
    IC packages.
    """
    if not pkg1 or not pkg2:
        return True
    p1, p2 = pkg1.upper(), pkg2.upper()
    if p1 == p2:
        return True
    if p1 in POWER_PACKAGES and p2 in POWER_PACKAGES:
        return True
    return _family(p1) in LOGIC_PACKAGES and _family(p2) in LOGIC_PACKAGES
