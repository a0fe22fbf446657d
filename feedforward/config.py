"""
config.py
~~~~~~~~~

Defaults, weight-file tokens and logging setup.
"""

import os
import logging

# Training
DEFAULT_LEARNING_RATE = 0.1
DEFAULT_REPORT_INTERVAL = 100

# Initial weights and biases are drawn uniformly from this range
WEIGHT_RANGE = (-1.0, 1.0)

# Weight file tokens
BIAS_MARKER = 'B'
LAYER_SEPARATOR = '---'

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def configure_logging() -> int:
    """
    Set up logging from the environment.

    The level comes from ``LOG_LEVEL`` (default ``INFO``); unknown names
    fall back to ``INFO``.

    Returns:
        int: The logging level that was applied
    """
    log_level_str = os.getenv('LOG_LEVEL', 'INFO').upper()
    log_level = getattr(logging, log_level_str, logging.INFO)
    if not isinstance(log_level, int):
        log_level = logging.INFO

    logging.basicConfig(level=log_level, format=LOG_FORMAT)
    logging.getLogger('feedforward').setLevel(log_level)
    return log_level
