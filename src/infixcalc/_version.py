"""Installed version of infixcalc."""

from importlib.metadata import PackageNotFoundError, version

DIST_NAME = "infixcalc"
UNKNOWN_VERSION = "0.0.0"


def get_version() -> str:
    """Version recorded in the installed distribution's metadata.

    Editable installs carry the metadata too; a bare source checkout
    reports ``UNKNOWN_VERSION``.
    """
    try:
        return version(DIST_NAME)
    except PackageNotFoundError:
        return UNKNOWN_VERSION
