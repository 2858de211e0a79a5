"""
Typed access to one key group of the settings store.
"""

from typing import TYPE_CHECKING, Any, List, Optional, cast

if TYPE_CHECKING:
    from PySide6.QtCore import QSettings

TRUE_STRINGS = ("true", "1", "yes")


class SettingsGroup:
    """Base for settings subsystems.

    Subclasses set ``group`` and address their keys relative to it, so
    ``self._get_bool("console_enabled")`` reads ``logging/console_enabled``
    inside the active profile. INI storage hands values back as strings,
    the getters convert them.
    """

    group = ""

    def __init__(self, settings: "QSettings"):
        self.settings = settings

    def key(self, name: str) -> str:
        return f"{self.group}/{name}" if self.group else name

    def _raw(self, name: str, default: Any) -> Any:
        return self.settings.value(self.key(name), default)

    def _get_str(self, name: str, default: str = "") -> str:
        value = self._raw(name, default)
        return default if value is None else str(value)

    def _get_bool(self, name: str, default: bool = False) -> bool:
        value = self._raw(name, default)
        if value is None:
            return default
        if isinstance(value, str):
            return value.lower() in TRUE_STRINGS
        return bool(value)

    def _get_int(self, name: str, default: int = 0) -> int:
        value = self._raw(name, default)
        try:
            return default if value is None else int(cast(str | int, value))
        except (TypeError, ValueError):
            return default

    def _get_list(self, name: str, default: Optional[List[str]] = None) -> List[str]:
        value = self._raw(name, None)
        if isinstance(value, list):
            return ["" if item is None else str(item) for item in cast(List[object], value)]
        # A one-element list comes back from INI storage as a plain string
        if isinstance(value, str) and value:
            return [value]
        return list(default or [])

    def _set(self, name: str, value: Any) -> None:
        self.settings.setValue(self.key(name), value)
        self.settings.sync()
