"""Lazily parsed textual header block."""

from __future__ import annotations

import logging
from enum import Enum

from grindreader.core.datafile.primitives import BinarySource
from grindreader.core.exceptions import HeaderParseError

logger = logging.getLogger(__name__)

HeaderValue = str | int | float

_SEPARATOR = ": "
_SUMMARY_KEY = "summary"
_RUNS_KEY = "runs"


class HeaderState(Enum):
    """Load state of a header store."""

    NOT_LOADED = "not_loaded"
    LOADED = "loaded"


def default_headers() -> dict[str, HeaderValue]:
    """Values of the well-known keys before any header line is applied."""
    return {
        "runs": 0,
        "summary": 0.0,
        "cmd": "",
        "creator": "",
        "events": "",
    }


class HeaderStore:
    """Parses the header block on first access and caches it."""

    def __init__(self, source: BinarySource, header_offset: int) -> None:
        self._source = source
        self._header_offset = header_offset
        self._state = HeaderState.NOT_LOADED
        self._values: dict[str, HeaderValue] = {}

    @property
    def state(self) -> HeaderState:
        return self._state

    def get(self, key: str) -> HeaderValue:
        """Get a header value. Keys that never appeared read as an empty string."""
        return self.load().get(key, "")

    def load(self) -> dict[str, HeaderValue]:
        """Read the header block if it has not been read yet."""
        if self._state is HeaderState.NOT_LOADED:
            self._values = self._parse()
            self._state = HeaderState.LOADED
            logger.debug(
                "Loaded %d headers (runs=%s, summary=%s)",
                len(self._values),
                self._values[_RUNS_KEY],
                self._values[_SUMMARY_KEY],
            )
        return self._values

    def _parse(self) -> dict[str, HeaderValue]:
        headers = default_headers()
        runs = 0
        summary = 0.0
        self._source.seek(self._header_offset)

        while True:
            raw = self._source.read_line()
            if raw is None:
                break
            line = raw.decode("utf-8", errors="replace")
            if not line.strip():
                break

            key, separator, value = line.partition(_SEPARATOR)
            key = key.strip()
            value = value.strip()
            if not separator:
                raise HeaderParseError(f"Header line without '{_SEPARATOR}': {line!r}")

            if key == _SUMMARY_KEY:
                # Only the time component is tracked; the memory component is dropped.
                time_part = value.split(" ", 1)[0]
                try:
                    elapsed = float(time_part)
                except ValueError as e:
                    raise HeaderParseError(f"Invalid summary value: {value!r}") from e
                runs += 1
                summary += elapsed
            else:
                headers[key] = value

        # The aggregates always win over literal runs or summary lines.
        headers[_RUNS_KEY] = runs
        headers[_SUMMARY_KEY] = summary
        return headers
