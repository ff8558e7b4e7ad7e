"""Version utility for nestlint."""

import sys
from importlib.metadata import PackageNotFoundError, version


def get_nestlint_version() -> str:
    """Get the nestlint version.

    Returns:
        Version string or "unknown" if version cannot be determined

    """
    try:
        return version("nestlint")
    except PackageNotFoundError:
        return "unknown"


def show_version() -> None:
    """Display the application version and exit."""
    app_version = get_nestlint_version()
    if app_version == "unknown":
        print("nestlint (version unknown)")  # noqa: T201
    else:
        print(f"nestlint {app_version}")  # noqa: T201
    sys.exit(0)
