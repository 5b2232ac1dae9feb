"""
Connection pool size calculations for the HTTP transport.
"""
import os
from typing import Tuple


def calculate_pool_size(multiplier: int = 2, max_size: int = 16) -> Tuple[int, int]:
    """
    Calculate connection pool sizes based on CPU cores.

    Args:
        multiplier: Multiplier for the number of pooled hosts (default: 2x CPU cores)
        max_size: Maximum number of pooled hosts

    Returns:
        Tuple of (pool_connections, pool_maxsize); each host pool holds
        twice as many connections as there are pooled hosts.
    """
    cpu_count = os.cpu_count() or 4

    pool_connections = min(cpu_count * multiplier, max_size)
    return pool_connections, pool_connections * 2
