from __future__ import annotations
import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

def configure_logging(level: str = "INFO") -> None:
    # Request lines, intake decisions and mail results all go to the root handler
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
