"""
THAC0 verbosity level constants.

The emit rule is simple:

    message.level <= threshold  →  message is shown

The threshold is either the global verbosity or a per-channel override.

Level assignments used by flaggroups:
    ←── quieter ─────────── default ─────────── louder ──→
    -4    -3      -2       -1      0      1       2       3
    wall  errors  warnings minimal default summary layout debug
"""

# Positive levels (diagnostics, shown with -v / --show CHANNEL:LEVEL)
DEBUG = 3          # Per-flag detail, function tracing
LAYOUT = 2         # Column widths, parser assembly
SUMMARY = 1        # One line per render or parse
DEFAULT = 0        # Regular program output

# Negative levels (quiet suppression)
MINIMAL = -1       # Opt-in channels sit here until enabled
WARNING = -2
ERROR = -3         # Errors only
NOTHING = -4       # Hard wall, exit code only
