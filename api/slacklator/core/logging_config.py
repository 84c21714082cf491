import logging
import sys
from typing import Optional

from slacklator.core.config import Settings, get_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(settings: Optional[Settings] = None) -> None:
    """Configure root logging for the process hosting the translation core.

    Call once from the glue layer's entry point. Library modules only create
    module-level loggers and never configure handlers themselves.
    """
    settings = settings or get_settings()
    logging.basicConfig(
        level=logging.DEBUG if settings.DEBUG else logging.INFO,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )
    # The deepl client logs every request at INFO
    logging.getLogger("deepl").setLevel(logging.WARNING)
