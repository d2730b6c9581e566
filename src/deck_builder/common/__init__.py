from .logging_config import setup_logging
from .reliability import retry_call
