"""
OutputManager — the THAC0 verbosity system core.

Central coordinator for verbosity-gated output with per-channel overrides.
The emit rule is: message shows when message.level <= threshold.
The threshold is either a per-channel override or the global verbosity.

THAC0 axis:
    ←── quieter ─────────── default ─────────── louder ──→
    -4    -3      -2       -1      0      1       2       3
    wall  errors  warnings minimal default summary layout debug

Per-channel overrides:
    --show layout:2    pins the layout channel to threshold 2
    Specific > generic, except at -4 (hard wall, nothing at all)
"""

import sys
from typing import Any, Dict, Optional, TextIO

from . import channels as _channels
from .levels import ERROR, NOTHING


class OutputManager:
    """Central coordinator for THAC0 verbosity-gated output.

    All output is written to the configured file handle (default: stderr).

    Usage::

        out = OutputManager(verbosity=2)
        out.emit(2, "column width {width}", channel='layout', width=19)
        out.error("Something went wrong")
    """

    def __init__(
        self,
        verbosity: int = 0,
        channel_overrides: Dict[str, int] = None,
        file: TextIO = None,
    ):
        self.verbosity = verbosity
        self.channel_overrides: Dict[str, int] = dict(channel_overrides or {})
        self.file = file if file is not None else sys.stderr

    def threshold(self, channel: str) -> int:
        """Return the effective threshold for a channel."""
        return self.channel_overrides.get(channel, self.verbosity)

    def emit(self, level: int, message: str, *,
             channel: str = 'general', **kwargs: Any) -> None:
        """Emit a message if level <= threshold for that channel.

        At threshold -4 (hard wall), nothing is emitted regardless of level.

        Args:
            level: Message level (higher = more verbose)
            message: Format string (uses str.format with kwargs)
            channel: Output channel name
            **kwargs: Values for template placeholders
        """
        threshold = self.threshold(channel)
        if threshold <= NOTHING:
            return
        if level > threshold:
            return
        text = message.format(**kwargs) if kwargs else message
        print(text, file=self.file)

    def error(self, message: str) -> None:
        """Emit an error message (level -3, shown unless at hard wall)."""
        self.emit(ERROR, message, channel='error')

    def channel_active(self, channel: str, level: int = 0) -> bool:
        """Check if a channel would display a message at the given level.

        Used by callers to skip building expensive diagnostic text.
        """
        threshold = self.threshold(channel)
        return threshold > NOTHING and level <= threshold


# =============================================================================
# Module-level singleton
# =============================================================================

_manager: Optional[OutputManager] = None


def init_output(verbosity: int = 0, channels: list = None,
                file: TextIO = None) -> OutputManager:
    """Initialize the module-level OutputManager singleton.

    Call once at program startup after the logging flags are known.

    Args:
        verbosity: THAC0 verbosity level (0=default, positive=verbose, negative=quiet)
        channels: List of channel spec strings (e.g., ['layout:2', 'trace:3'])
        file: Destination stream (default: stderr)

    Returns:
        The initialized OutputManager instance

    Raises:
        ValueError: If a channel spec is malformed
    """
    global _manager

    # Opt-in channels stay off unless explicitly enabled
    channel_overrides = {ch: -1 for ch in _channels.OPT_IN_CHANNELS}

    for spec in channels or []:
        cfg = _channels.parse_channel_spec(spec)
        channel_overrides[cfg.name] = cfg.level

    _manager = OutputManager(
        verbosity=verbosity,
        channel_overrides=channel_overrides,
        file=file,
    )
    return _manager


def get_output() -> OutputManager:
    """Get the module-level OutputManager, creating a default if needed."""
    global _manager
    if _manager is None:
        _manager = OutputManager()
    return _manager
