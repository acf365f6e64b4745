"""Reader for CONVERTBOT_* environment settings.

Setting names are given without the prefix, so ``get_int("PROBE_TIMEOUT")``
reads ``CONVERTBOT_PROBE_TIMEOUT``. Tests pass a plain mapping instead of
touching os.environ.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path

logger = logging.getLogger(__name__)

ENV_PREFIX = "CONVERTBOT_"


class EnvReader:
    """Typed access to ConvertBot's environment overrides.

    Unparsable values never raise: they are logged and the caller's default
    (usually the config file value) wins.
    """

    def __init__(
        self, env: Mapping[str, str] | None = None, prefix: str = ENV_PREFIX
    ) -> None:
        self._env: Mapping[str, str] = env if env is not None else os.environ
        self._prefix = prefix

    def var_name(self, name: str) -> str:
        return f"{self._prefix}{name}"

    def _raw(self, name: str) -> str | None:
        value = self._env.get(self.var_name(name))
        # An empty variable counts as unset
        return value or None

    def get_str(self, name: str, default: str | None = None) -> str | None:
        value = self._raw(name)
        return default if value is None else value

    def get_int(self, name: str, default: int | None = None) -> int | None:
        value = self._raw(name)
        if value is None:
            return default
        try:
            return int(value)
        except ValueError:
            logger.warning(
                "Ignoring %s=%r: not an integer", self.var_name(name), value
            )
            return default

    def get_path(
        self, name: str, must_exist: bool = True, default: Path | None = None
    ) -> Path | None:
        """Get a user-expanded path.

        Args:
            name: Setting name without the prefix.
            must_exist: Ignore (and warn about) paths that do not exist, so
                a stale tool override falls through to the next layer.
            default: Returned when unset or ignored.
        """
        value = self._raw(name)
        if value is None:
            return default
        path = Path(value).expanduser()
        if must_exist and not path.exists():
            logger.warning(
                "Ignoring %s: %s does not exist", self.var_name(name), value
            )
            return default
        return path
