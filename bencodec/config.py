"""
Configuration settings for the bencode codec.
Loads configuration from .env file with fallback to defaults.
"""
import os
import logging
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# ===== Codec Settings =====
DICT_ORDER_INSERTION = 'insertion'
DICT_ORDER_SORTED = 'sorted'
DICT_ORDERS = (DICT_ORDER_INSERTION, DICT_ORDER_SORTED)

DICT_ORDER = os.getenv('BENCODE_DICT_ORDER', DICT_ORDER_INSERTION).strip().lower()
ENFORCE_INT64 = os.getenv('BENCODE_ENFORCE_INT64', 'True').lower() in ('true', '1', 't')
MAX_DEPTH = int(os.getenv('BENCODE_MAX_DEPTH', '256'))

# ===== Application Settings =====
DEBUG = os.getenv('DEBUG', 'False').lower() in ('true', '1', 't')
LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO' if not DEBUG else 'DEBUG')
LOG_FORMAT = os.getenv('LOG_FORMAT', '%(asctime)s - %(name)s - %(levelname)s - %(message)s')


def configure_logging(level: str = None) -> None:
    """
    Configure root logging from the settings above.

    Args:
        level: Overrides LOG_LEVEL when given
    """
    level = (level or LOG_LEVEL).upper()
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format=LOG_FORMAT)

    if DEBUG:
        logger = logging.getLogger(__name__)
        logger.debug("=== Configuration ===")
        logger.debug(f"Dict order: {DICT_ORDER}")
        logger.debug(f"Enforce int64: {ENFORCE_INT64}")
        logger.debug(f"Max depth: {MAX_DEPTH}")
        logger.debug(f"Log level: {level}")
