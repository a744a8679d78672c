"""
Services package - operation catalog and the engine boundary.

Contains all image logic separated from HTTP/API concerns.
"""
from imageops.services.gateway import process
from imageops.services.inspector import info
from imageops.services.mapper import to_engine_options
from imageops.services.operations import (
    OPERATIONS,
    Operation,
    available_operations,
    get_operation,
)

__all__ = [
    "OPERATIONS",
    "Operation",
    "available_operations",
    "get_operation",
    "info",
    "process",
    "to_engine_options",
]
