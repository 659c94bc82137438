"""
Version information for qlog.

Single source for the version string; setup.py and the CLI --version
output both read from here.

Format: MAJOR.MINOR.PATCH[-PHASE]
PEP 440 form (for pip): phase alpha -> a0, beta -> b0, rcN -> rcN
"""

MAJOR = 0
MINOR = 1
PATCH = 0
PHASE = "alpha"  # None, "alpha", "beta", "rc1", ...

__app_name__ = "qlog"

_PEP440_PHASES = {"alpha": "a0", "beta": "b0"}


def get_base_version():
    """Return MAJOR.MINOR.PATCH[-PHASE]."""
    base = f"{MAJOR}.{MINOR}.{PATCH}"
    return f"{base}-{PHASE}" if PHASE else base


def get_pip_version():
    """Return the PEP 440 form of the version, e.g. 0.1.0a0."""
    base = f"{MAJOR}.{MINOR}.{PATCH}"
    if PHASE:
        base += _PEP440_PHASES.get(PHASE, PHASE)
    return base


__version__ = get_base_version()
VERSION = __version__
PIP_VERSION = get_pip_version()
