"""Screen view writing the StarBook screen to an image file."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from starbook.api.telescope.screen import save_screen


logger = logging.getLogger(__name__)


class FileScreenView:
    """Keeps the latest StarBook screen in a PNG file, overwritten on each update."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self.updates = 0

    def show(self, raster: Any) -> None:
        save_screen(raster, self.path)
        self.updates += 1
        logger.debug(f"Screen update #{self.updates} written to {self.path}")
