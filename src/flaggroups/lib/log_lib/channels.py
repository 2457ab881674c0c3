"""
Channel configuration and parsing for the THAC0 verbosity system.

Channels are named output categories. Each channel can carry its own
verbosity threshold that overrides the global level.

Channel spec syntax:
    CHANNEL[:LEVEL]

    Examples:
        layout          # level 0
        layout:2        # level 2
        trace:3         # enable function tracing
"""

from dataclasses import dataclass


KNOWN_CHANNELS = {
    'layout',       # Column width resolution and section skipping
    'parse',        # Parser assembly and parse outcome
    'general',      # Default channel
    'error',        # Error messages
    'trace',        # Function tracing (@trace decorator)
}

CHANNEL_DESCRIPTIONS = {
    'layout':  'Column widths and skipped sections',
    'parse':   'Parser assembly and parse results',
    'general': 'General output',
    'error':   'Error messages',
    'trace':   'Function call tracing',
}

# Channels that are OFF by default (require explicit --show to activate).
OPT_IN_CHANNELS = {
    'trace',
}


@dataclass
class ChannelConfig:
    """Configuration for a single output channel."""
    name: str
    level: int = 0


def parse_channel_spec(spec: str) -> ChannelConfig:
    """Parse a channel spec string into a ChannelConfig.

    Args:
        spec: Channel spec string like "layout" or "layout:2"

    Returns:
        ChannelConfig with parsed values

    Raises:
        ValueError: If the channel is unknown or the level is not an integer
    """
    name, _, level = spec.partition(':')
    name = name.strip()
    if name not in KNOWN_CHANNELS:
        raise ValueError(f"Unknown channel: {name!r}")
    if not level:
        return ChannelConfig(name=name)
    try:
        return ChannelConfig(name=name, level=int(level))
    except ValueError:
        raise ValueError(f"Invalid level for channel {name!r}: {level!r}") from None


def format_channel_list() -> str:
    """Format the list of known channels for display."""
    lines = ["Available channels:"]
    max_name = max(len(name) for name in KNOWN_CHANNELS)
    for name in sorted(KNOWN_CHANNELS):
        desc = CHANNEL_DESCRIPTIONS.get(name, '')
        opt_in = " (opt-in)" if name in OPT_IN_CHANNELS else ""
        lines.append(f"  {name:<{max_name}}  {desc}{opt_in}")
    return "\n".join(lines)
