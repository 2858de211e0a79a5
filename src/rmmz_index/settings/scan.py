"""
Scan settings: thread pool size and image header reading.
"""

from .base import SettingsGroup

MIN_WORKERS = 1
MAX_WORKERS = 64
DEFAULT_WORKERS = 8


def clamp_workers(value: int) -> int:
    return max(MIN_WORKERS, min(MAX_WORKERS, value))


class ScanSettings(SettingsGroup):
    """Keys under ``scan/``."""

    group = "scan"

    @property
    def max_workers(self) -> int:
        """Thread pool size for collection reads and directory scans."""
        return clamp_workers(self._get_int("max_workers", DEFAULT_WORKERS))

    @max_workers.setter
    def max_workers(self, value: int) -> None:
        self._set("max_workers", clamp_workers(value))

    @property
    def read_image_dimensions(self) -> bool:
        """Whether the asset scanner opens images to read pixel sizes."""
        return self._get_bool("read_image_dimensions", True)

    @read_image_dimensions.setter
    def read_image_dimensions(self, enabled: bool) -> None:
        self._set("read_image_dimensions", enabled)
