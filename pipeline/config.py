import logging
import os

from dotenv import load_dotenv

load_dotenv()

METADATA_PATH = os.getenv("GQL_METADATA_PATH", "schema/tables.json")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


def configure_logging(level=None):
    """Apply LOG_LEVEL to the root logger; safe to call more than once."""
    logging.basicConfig(
        level=level or LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
