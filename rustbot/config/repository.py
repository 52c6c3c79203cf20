from __future__ import annotations

import json
import logging
import os
from typing import Any


class ConfigRepository:
    """Reads the JSON configuration file.

    The parsed content is cached and reused while the file's modification
    time and size stay the same.
    """

    def __init__(self, path: str | os.PathLike[str]):
        if not isinstance(path, str | os.PathLike):
            raise TypeError("path must be str or os.PathLike")
        self.path = str(path)
        self._file_mtime: float | None = None
        self._file_size: int | None = None
        self._cached: dict[str, Any] | None = None

    def load_raw(self) -> dict[str, Any]:
        """Load the raw configuration mapping.

        Returns:
            The decoded JSON object, or an empty dict when the file is
            missing, unreadable or not a JSON object.
        """
        try:
            st = os.stat(self.path)
            if (
                self._cached is not None
                and self._file_mtime == st.st_mtime
                and self._file_size == st.st_size
            ):
                return self._cached

            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
            if not isinstance(data, dict):
                logging.error(f"Configuration file must hold a JSON object: {self.path}")
                return {}
            self._cached = data
            self._file_mtime = st.st_mtime
            self._file_size = st.st_size
            return data
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as e:
            logging.error(f"Configuration load error: {e}")
            return {}
