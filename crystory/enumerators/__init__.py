"""Device topology enumerator implementations"""

import logging
from typing import Optional

from .base import BaseEnumerator
from .null import NullEnumerator
from .system_profiler import SystemProfilerEnumerator


def detect_enumerator(backend: str = "auto", logger: Optional[logging.Logger] = None,
                      data_type: str = "SPUSBDataType", output_format: str = "json") -> BaseEnumerator:
    """Select the topology enumerator for this system

    Args:
        backend: 'auto', 'system_profiler' or 'none'
        logger: Logger instance
        data_type: system_profiler data type
        output_format: system_profiler output format

    Returns:
        BaseEnumerator instance
    """
    logger = logger or logging.getLogger(__name__)

    if backend == "none":
        logger.debug("Topology enumeration disabled")
        return NullEnumerator(logger=logger)

    profiler = SystemProfilerEnumerator(logger=logger, data_type=data_type, output_format=output_format)
    if backend == "system_profiler":
        return profiler

    if profiler.is_available():
        logger.debug("Selected topology enumerator: system_profiler")
        return profiler

    logger.debug("Selected topology enumerator: none")
    return NullEnumerator(logger=logger)


__all__ = ["BaseEnumerator", "NullEnumerator", "SystemProfilerEnumerator", "detect_enumerator"]
