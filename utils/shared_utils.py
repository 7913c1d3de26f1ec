"""
Shared utility functions for routers and services
"""
import json
import logging
from typing import Any, Optional

logger = logging.getLogger(__name__)


def log_endpoint_event(endpoint: str, resource_id: Optional[Any] = None, result: str = "success",
                       details: Optional[dict] = None):
    """Log endpoint execution to app.log"""
    logger.info(f"{endpoint} | id={resource_id if resource_id is not None else 'none'} | {result} | "
                f"{json.dumps(details or {}, default=str)}")
