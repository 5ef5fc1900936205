"""Component category vocabulary.

Categories form a two-level hierarchy: generic categories (MOSFET, MEMORY, ...)
and manufacturer-qualified refinements (MOSFET_NXP, MEMORY_FLASH_GIGADEVICE, ...).
Every refinement names its generic base, so a provider claiming MOSFET_ST is
also expected to claim MOSFET.
"""

from enum import Enum


class ComponentCategory(Enum):
    # Generic categories
    IC = "IC"
    MICROCONTROLLER = "MICROCONTROLLER"
    MEMORY = "MEMORY"
    MEMORY_FLASH = "MEMORY_FLASH"
    MOSFET = "MOSFET"
    TRANSISTOR = "TRANSISTOR"
    DIODE = "DIODE"
    OPAMP = "OPAMP"
    VOLTAGE_REGULATOR = "VOLTAGE_REGULATOR"
    TEMPERATURE_SENSOR = "TEMPERATURE_SENSOR"
    SENSOR = "SENSOR"
    CONNECTOR = "CONNECTOR"
    LED_DRIVER = "LED_DRIVER"
    DISPLAY_DRIVER = "DISPLAY_DRIVER"
    CRYSTAL = "CRYSTAL"

    # Manufacturer-qualified refinements
    MICROCONTROLLER_ST = "MICROCONTROLLER_ST"
    MICROCONTROLLER_NXP = "MICROCONTROLLER_NXP"
    MICROCONTROLLER_GIGADEVICE = "MICROCONTROLLER_GIGADEVICE"
    MEMORY_NXP = "MEMORY_NXP"
    MEMORY_FLASH_GIGADEVICE = "MEMORY_FLASH_GIGADEVICE"
    MOSFET_ST = "MOSFET_ST"
    MOSFET_NXP = "MOSFET_NXP"
    MOSFET_VISHAY = "MOSFET_VISHAY"
    OPAMP_TI = "OPAMP_TI"
    VOLTAGE_REGULATOR_LINEAR_TI = "VOLTAGE_REGULATOR_LINEAR_TI"
    VOLTAGE_REGULATOR_LINEAR_ST = "VOLTAGE_REGULATOR_LINEAR_ST"
    TEMPERATURE_SENSOR_TI = "TEMPERATURE_SENSOR_TI"
    DIODE_VISHAY = "DIODE_VISHAY"
    CONNECTOR_AMPHENOL = "CONNECTOR_AMPHENOL"

    @property
    def base(self) -> "ComponentCategory":
        """Generic category this one refines (generic categories return themselves)."""
        return _BASES.get(self, self)

    @property
    def manufacturer(self) -> str:
        """Manufacturer tag of a qualified category, "" for generic ones."""
        return _MANUFACTURER_TAGS.get(self, "")

    @property
    def is_qualified(self) -> bool:
        return self in _MANUFACTURER_TAGS

    def is_same_family(self, other: "ComponentCategory | None") -> bool:
        """True when both categories share the same top-level generic base."""
        if other is None:
            return False
        return family_of(self) is family_of(other)


# Refinement -> generic base
_BASES: dict[ComponentCategory, ComponentCategory] = {
    ComponentCategory.MEMORY_FLASH: ComponentCategory.MEMORY,
    ComponentCategory.MICROCONTROLLER_ST: ComponentCategory.MICROCONTROLLER,
    ComponentCategory.MICROCONTROLLER_NXP: ComponentCategory.MICROCONTROLLER,
    ComponentCategory.MICROCONTROLLER_GIGADEVICE: ComponentCategory.MICROCONTROLLER,
    ComponentCategory.MEMORY_NXP: ComponentCategory.MEMORY,
    ComponentCategory.MEMORY_FLASH_GIGADEVICE: ComponentCategory.MEMORY_FLASH,
    ComponentCategory.MOSFET_ST: ComponentCategory.MOSFET,
    ComponentCategory.MOSFET_NXP: ComponentCategory.MOSFET,
    ComponentCategory.MOSFET_VISHAY: ComponentCategory.MOSFET,
    ComponentCategory.OPAMP_TI: ComponentCategory.OPAMP,
    ComponentCategory.VOLTAGE_REGULATOR_LINEAR_TI: ComponentCategory.VOLTAGE_REGULATOR,
    ComponentCategory.VOLTAGE_REGULATOR_LINEAR_ST: ComponentCategory.VOLTAGE_REGULATOR,
    ComponentCategory.TEMPERATURE_SENSOR_TI: ComponentCategory.TEMPERATURE_SENSOR,
    ComponentCategory.DIODE_VISHAY: ComponentCategory.DIODE,
    ComponentCategory.CONNECTOR_AMPHENOL: ComponentCategory.CONNECTOR,
}

_MANUFACTURER_TAGS: dict[ComponentCategory, str] = {
    ComponentCategory.MICROCONTROLLER_ST: "ST",
    ComponentCategory.MICROCONTROLLER_NXP: "NXP",
    ComponentCategory.MICROCONTROLLER_GIGADEVICE: "GIGADEVICE",
    ComponentCategory.MEMORY_NXP: "NXP",
    ComponentCategory.MEMORY_FLASH_GIGADEVICE: "GIGADEVICE",
    ComponentCategory.MOSFET_ST: "ST",
    ComponentCategory.MOSFET_NXP: "NXP",
    ComponentCategory.MOSFET_VISHAY: "VISHAY",
    ComponentCategory.OPAMP_TI: "TI",
    ComponentCategory.VOLTAGE_REGULATOR_LINEAR_TI: "TI",
    ComponentCategory.VOLTAGE_REGULATOR_LINEAR_ST: "ST",
    ComponentCategory.TEMPERATURE_SENSOR_TI: "TI",
    ComponentCategory.DIODE_VISHAY: "VISHAY",
    ComponentCategory.CONNECTOR_AMPHENOL: "AMPHENOL",
}


def family_of(category: ComponentCategory) -> ComponentCategory:
    """Walk the base chain to the top-level generic category.

    MEMORY_FLASH_GIGADEVICE -> MEMORY_FLASH -> MEMORY.
    """
    current = category
    while current.base is not current:
        current = current.base
    return current


def depth_of(category: ComponentCategory) -> int:
    """Number of refinement steps below the top-level category (MEMORY_FLASH -> 1)."""
    depth = 0
    current = category
    while current.base is not current:
        current = current.base
        depth += 1
    return depth


def parse_category(name: str | ComponentCategory | None) -> ComponentCategory | None:
    """Look up a category by name, case-insensitively. Unknown names return None."""
    if name is None:
        return None
    if isinstance(name, ComponentCategory):
        return name
    key = name.strip().upper().replace("-", "_").replace(" ", "_")
    if not key:
        return None
    try:
        return ComponentCategory[key]
    except KeyError:
        return None
