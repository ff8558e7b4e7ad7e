"""Logging helper module."""

from logging import (
    DEBUG,
    WARNING,
    Formatter,
    Logger,
    StreamHandler,
    getLogger,
)

from nestlint.args import Args


def init_logging(args: Args) -> None:
    """Initialize logging for the application.

    Should be called once when the application starts.
    """
    # --- Logging Configuration ---
    console_handler = StreamHandler()
    console_formatter = Formatter("%(levelname)s: %(message)s")
    console_handler.setFormatter(console_formatter)

    root_logger = getLogger()
    root_logger.addHandler(console_handler)
    configure_3p_loggers(root_logger)

    # Configure Logging Level based on args
    if args.verbose:
        console_handler.setLevel(DEBUG)
        root_logger.setLevel(DEBUG)
        root_logger.debug("Debug logging enabled.")
    else:
        console_handler.setLevel(WARNING)
        root_logger.setLevel(WARNING)
    # --- End Logging Configuration ---


def get_logger(name: str) -> Logger:
    """Proxy for logging.getLogger."""
    return getLogger(name)


def configure_3p_loggers(root_logger: Logger) -> None:
    """Keep third-party loggers (lark) from writing to the console."""
    for name in root_logger.manager.loggerDict:
        if name.startswith("nestlint"):
            continue  # Skip our own loggers
        third_party_logger = getLogger(name)
        third_party_logger.handlers.clear()
