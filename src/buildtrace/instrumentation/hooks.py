"""Addon hook dispatch.

Addons declare which report hook they implement through two capability
methods. The choice is resolved once, when the addon is registered:

- ``supports_phase_hook()``: ``instrumentation(phase, info)`` is called for
  every phase.
- otherwise ``supports_legacy_build_hook()``: ``build_instrumentation(info)``
  is called for the ``build`` phase only.

Hooks run synchronously in registration order. Exceptions raised by a hook
propagate and stop dispatch to the remaining addons.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from buildtrace.core.logging import get_logger
from buildtrace.instrumentation.tree import SpanTree

log = get_logger("instrumentation.hooks")


@dataclass(frozen=True, slots=True)
class InstrumentationInfo:
    """Payload handed to addon hooks."""

    summary: Any
    tree: SpanTree


class HookKind(Enum):
    PHASE = "phase"
    LEGACY_BUILD = "legacy_build"
    NONE = "none"


class Addon:
    """Base class for addons receiving instrumentation reports.

    Override the ``supports_*`` method matching the hook you implement.
    """

    name: str = "addon"

    def supports_phase_hook(self) -> bool:
        return False

    def supports_legacy_build_hook(self) -> bool:
        return False

    def instrumentation(self, phase: str, info: InstrumentationInfo) -> None:
        raise NotImplementedError

    def build_instrumentation(self, info: InstrumentationInfo) -> None:
        raise NotImplementedError


def resolve_hook(addon: Addon) -> HookKind:
    if addon.supports_phase_hook():
        return HookKind.PHASE
    if addon.supports_legacy_build_hook():
        return HookKind.LEGACY_BUILD
    return HookKind.NONE


class HookDispatcher:
    """Registered addons and their resolved hooks."""

    def __init__(self, addons: Iterable[Addon] = ()) -> None:
        self._registered: list[tuple[Addon, HookKind]] = []
        for addon in addons:
            self.register(addon)

    def register(self, addon: Addon) -> HookKind:
        kind = resolve_hook(addon)
        self._registered.append((addon, kind))
        log.debug("addon_registered", addon=addon.name, hook=kind.value)
        return kind

    @property
    def addons(self) -> list[Addon]:
        return [addon for addon, _ in self._registered]

    def dispatch(self, phase: str, info: InstrumentationInfo) -> None:
        for addon, kind in self._registered:
            if kind is HookKind.PHASE:
                log.debug("addon_hook", addon=addon.name, hook=kind.value, phase=phase)
                addon.instrumentation(phase, info)
            elif kind is HookKind.LEGACY_BUILD and phase == "build":
                log.debug("addon_hook", addon=addon.name, hook=kind.value, phase=phase)
                addon.build_instrumentation(info)
