"""
Root logger setup. Importing this module configures logging once from
``PharmacogenomicsConfig.logging``.
"""
import logging

from app.services.pharmacogenomics.config import get_config


def setup_logging() -> None:
    settings = get_config().logging
    logging.basicConfig(
        level=getattr(logging, settings.level.upper(), logging.INFO),
        format=settings.format,
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)


setup_logging()
