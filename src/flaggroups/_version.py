"""
Version information for flaggroups.

This file is the canonical source for version numbers. setup.py carries
the PEP 440 form (PIP_VERSION) by hand; bump both together.

Format: MAJOR.MINOR.PATCH[-PHASE]
Example: 0.1.0-alpha
"""

# Version components - edit these for version bumps
MAJOR = 0
MINOR = 1
PATCH = 0
PHASE = "alpha"  # None, "alpha", "beta", "rc1", etc.

__app_name__ = "flaggroups"


def get_version():
    """Return the semantic version string (MAJOR.MINOR.PATCH[-PHASE])."""
    base = f"{MAJOR}.{MINOR}.{PATCH}"
    if PHASE:
        base = f"{base}-{PHASE}"
    return base


def get_pip_version():
    """
    Return the PEP 440 form of the version.

    0.1.0-alpha -> 0.1.0a0, 0.1.0-rc1 -> 0.1.0rc1
    """
    base = f"{MAJOR}.{MINOR}.{PATCH}"
    phase_map = {"alpha": "a0", "beta": "b0"}
    if PHASE:
        base += phase_map.get(PHASE, PHASE)
    return base


__version__ = get_version()
VERSION = __version__
PIP_VERSION = get_pip_version()
