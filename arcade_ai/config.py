"""Configuration provider shared by the assistants."""

import logging
import os
from dataclasses import asdict, dataclass, fields, replace
from typing import Any, Callable, Dict, List, Mapping, Optional

from .utils import clamp_unit, is_finite_number

logger = logging.getLogger("arcade_ai.config")

ENV_PREFIX = "ARCADE_AI_"

_UNIT_FIELDS = ("difficulty_level", "assistance_intensity")
_BOOL_FIELDS = (
    "debug_mode",
    "educational_mode",
    "show_confidence",
    "show_alternatives",
)


@dataclass(frozen=True)
class AssistantSettings:
    """
    Snapshot of the assistant configuration.

    difficulty_level: 0 (maximum assistance) to 1 (minimal assistance).
    assistance_intensity: 0 (minimal) to 1 (maximum).
    """

    difficulty_level: float = 0.5
    debug_mode: bool = False
    educational_mode: bool = True
    assistance_intensity: float = 0.7
    show_confidence: bool = True
    show_alternatives: bool = False


Listener = Callable[[AssistantSettings], None]


class ConfigProvider:
    """
    Holds the current ``AssistantSettings`` and notifies subscribers on change.

    Numeric values are clamped into [0, 1]; NaN, infinities and non-numbers
    are dropped and the previous value stays in effect.
    """

    def __init__(
        self, settings: Optional[AssistantSettings] = None, **overrides: Any
    ) -> None:
        self._settings: AssistantSettings = settings or AssistantSettings()
        self._listeners: List[Listener] = []
        if overrides:
            self._settings = self._merge(self._settings, overrides)

    @classmethod
    def from_env(
        cls, environ: Optional[Mapping[str, str]] = None
    ) -> "ConfigProvider":
        """
        Build a provider from ``ARCADE_AI_*`` variables
        (e.g. ``ARCADE_AI_DIFFICULTY_LEVEL=0.2``, ``ARCADE_AI_DEBUG_MODE=1``).
        Unparseable values are ignored.
        """
        env = os.environ if environ is None else environ
        overrides: Dict[str, Any] = {}
        for name in _UNIT_FIELDS:
            raw = env.get(ENV_PREFIX + name.upper())
            if raw is None:
                continue
            try:
                overrides[name] = float(raw)
            except ValueError:
                logger.debug(f"Ignoring non-numeric {name}={raw!r} from environment")
        for name in _BOOL_FIELDS:
            raw = env.get(ENV_PREFIX + name.upper())
            if raw is None:
                continue
            overrides[name] = raw.strip().lower() in {"1", "true", "yes", "on"}
        return cls(**overrides)

    def get_config(self) -> AssistantSettings:
        return self._settings

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self._settings)

    # -------------------------------------------------------------------------
    # Setters
    # -------------------------------------------------------------------------

    def set_difficulty_level(self, level: float) -> None:
        self.update_config(difficulty_level=level)

    def set_debug_mode(self, enabled: bool) -> None:
        self.update_config(debug_mode=enabled)

    def set_educational_mode(self, enabled: bool) -> None:
        self.update_config(educational_mode=enabled)

    def set_assistance_intensity(self, intensity: float) -> None:
        self.update_config(assistance_intensity=intensity)

    def set_show_confidence(self, show: bool) -> None:
        self.update_config(show_confidence=show)

    def set_show_alternatives(self, show: bool) -> None:
        self.update_config(show_alternatives=show)

    def update_config(self, **partial: Any) -> None:
        """
        Apply several settings at once; listeners fire once if anything changed.

        Raises:
            ValueError: If a key is not an ``AssistantSettings`` field.
        """
        updated = self._merge(self._settings, partial)
        if updated != self._settings:
            self._settings = updated
            self._notify()

    def reset(self) -> None:
        self._settings = AssistantSettings()
        self._notify()

    # -------------------------------------------------------------------------
    # Subscriptions
    # -------------------------------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener``; returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        settings = self._settings
        for listener in tuple(self._listeners):
            listener(settings)

    @staticmethod
    def _merge(
        settings: AssistantSettings, partial: Mapping[str, Any]
    ) -> AssistantSettings:
        known = {f.name for f in fields(AssistantSettings)}
        unknown = set(partial) - known
        if unknown:
            raise ValueError(f"Unknown configuration keys: {sorted(unknown)}")

        changes: Dict[str, Any] = {}
        for name, value in partial.items():
            if name in _UNIT_FIELDS:
                if not is_finite_number(value):
                    logger.debug(f"Rejected {name}={value!r}; keeping {getattr(settings, name)}")
                    continue
                changes[name] = clamp_unit(value)
            else:
                changes[name] = bool(value)
        return replace(settings, **changes)
