"""Closed registry of manufacturer providers.

Registration order is the last tie-break when two rules are equally specific,
so ``PROVIDERS`` is an explicit tuple rather than anything discovered at import
time. Add new providers here.
"""

from typing import Iterable

from ..manufacturer_aliases import resolve_provider_id
from ..store import PatternStore
from .amphenol import AmphenolProvider
from .base import SIMILARITY_WEIGHTS, CompatibilityAttributes, Provider
from .gigadevice import GigaDeviceProvider
from .nxp import NXPProvider
from .sitronix import SitronixProvider
from .st import STProvider
from .ti import TIProvider
from .vishay import VishayProvider

PROVIDER_CLASSES: tuple[type[Provider], ...] = (
    AmphenolProvider,
    GigaDeviceProvider,
    NXPProvider,
    STProvider,
    SitronixProvider,
    TIProvider,
    VishayProvider,
)

PROVIDERS: tuple[Provider, ...] = tuple(cls() for cls in PROVIDER_CLASSES)

_BY_ID: dict[str, Provider] = {provider.provider_id: provider for provider in PROVIDERS}

# Lowercase provider id / display name -> provider id
_KNOWN_NAMES: dict[str, str] = {
    **{provider.provider_id.lower(): provider.provider_id for provider in PROVIDERS},
    **{provider.manufacturer.lower(): provider.provider_id for provider in PROVIDERS},
}


def build_store(providers: Iterable[Provider] | None = None) -> PatternStore:
    """Register providers in order into a new store and freeze it."""
    store = PatternStore()
    for provider in (PROVIDERS if providers is None else providers):
        provider.initialize(store)
    store.freeze()
    return store


def get_provider(name: str | None) -> Provider | None:
    """Look up a registered provider by id, manufacturer name or alias."""
    provider_id = resolve_provider_id(name, _KNOWN_NAMES)
    return _BY_ID.get(provider_id) if provider_id else None


__all__ = [
    "PROVIDERS",
    "PROVIDER_CLASSES",
    "Provider",
    "CompatibilityAttributes",
    "SIMILARITY_WEIGHTS",
    "build_store",
    "get_provider",
    "AmphenolProvider",
    "GigaDeviceProvider",
    "NXPProvider",
    "STProvider",
    "SitronixProvider",
    "TIProvider",
    "VishayProvider",
]
