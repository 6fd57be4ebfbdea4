import logging

from rich.console import Console
from rich.logging import RichHandler


def configure_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[
            RichHandler(
                console=Console(stderr=True),
                show_path=verbose,
                rich_tracebacks=verbose,
            )
        ],
        force=True,
    )
    # google-genai and its HTTP stack are chatty at INFO
    for name in ("google_genai", "httpx", "httpcore"):
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
