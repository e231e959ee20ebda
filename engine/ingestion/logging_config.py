"""
Centralized logging configuration for the code index.

Suppresses verbose output from embedding and HTTP libraries that would
otherwise flood logs with non-actionable messages.

Import triggers the suppression - no function call needed.
configure_logging() is available for entry points that own the root logger.
"""
import logging

# Suppress verbose third-party library output
_SUPPRESSED_LOGGERS = [
    'sentence_transformers',
    'transformers',
    'huggingface_hub',
    'filelock',
    'urllib3',
]

for _logger_name in _SUPPRESSED_LOGGERS:
    logging.getLogger(_logger_name).setLevel(logging.WARNING)


def configure_logging(level: int = logging.INFO) -> None:
    """Install a basic handler on the root logger"""
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )
