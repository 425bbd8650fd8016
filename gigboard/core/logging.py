"""
Logging utilities for Gigboard Service.
Provides standardized logging configuration and helpers.
"""

import logging
import sys
from typing import Optional, Dict, Any
from datetime import datetime


def setup_logging(level: str = "INFO", service_name: str = "gigboard") -> logging.Logger:
    """
    Setup standardized logging for the service.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR)
        service_name: Name of the service for log identification

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(service_name)
    logger.setLevel(getattr(logging, level.upper()))

    # Remove existing handlers
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(getattr(logging, level.upper()))

    formatter = logging.Formatter(
        f'[%(asctime)s] {service_name.upper()}: %(levelname)s - %(name)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    console_handler.setFormatter(formatter)

    logger.addHandler(console_handler)

    return logger


def log_mutation(action: str, entity_id: int, actor_id: Optional[int] = None,
                 extra: Optional[Dict[str, Any]] = None) -> None:
    """
    Log a committed mutation with standard format.

    Args:
        action: Dotted action name, e.g. "application.approved"
        entity_id: ID of the affected entity
        actor_id: User who performed the action, if known
        extra: Additional fields to include
    """
    logger = logging.getLogger(f"gigboard.{action.split('.')[0]}")
    log_data = {
        'action': action,
        'id': entity_id,
        'timestamp': datetime.now().isoformat()
    }

    if actor_id is not None:
        log_data['actor_id'] = actor_id
    if extra:
        log_data.update(extra)

    logger.info(f"Mutation committed: {log_data}")


def log_rejected(action: str, reason: str, actor_id: Optional[int] = None) -> None:
    """
    Log a domain operation that was refused.

    Args:
        action: Dotted action name
        reason: Error message returned to the caller
        actor_id: User who attempted the action, if known
    """
    logger = logging.getLogger(f"gigboard.{action.split('.')[0]}")
    log_data = {
        'action': action,
        'status': 'rejected',
        'reason': reason,
        'timestamp': datetime.now().isoformat()
    }

    if actor_id is not None:
        log_data['actor_id'] = actor_id

    logger.warning(f"Mutation rejected: {log_data}")
