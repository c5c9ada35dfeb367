import logging
import os
import sys

# Create main logger
logger = logging.getLogger("etchosts")

# Create console handler and set level based on env var
console_handler = logging.StreamHandler(sys.stdout)


# Custom filter to suppress lock acquire/release messages
class SuppressLockChatterFilter(logging.Filter):
    def filter(self, record):
        message = record.getMessage()
        return not (message.startswith("Acquired lock") or message.startswith("Released lock"))


# Get log level from environment variable, default to INFO
log_level = os.environ.get("ETCHOSTS_LOG_LEVEL", "INFO").upper()
try:
    logger.setLevel(getattr(logging, log_level))
except AttributeError:
    logger.setLevel(logging.INFO)
    logger.warning(f"Invalid log level {log_level}, defaulting to INFO")

# Lock messages are noisy under concurrent callers, only show them on request
if not os.environ.get("ETCHOSTS_TRACE_LOCKS"):
    console_handler.addFilter(SuppressLockChatterFilter())

# Create formatter
formatter = logging.Formatter('%(asctime)s - %(levelname)s - %(message)s')
console_handler.setFormatter(formatter)

# Add console handler to main logger
logger.addHandler(console_handler)
