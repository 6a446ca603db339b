from typing import List, Sequence

from domain_finder.config import ConfigurationError


def batch(names: Sequence[str], size: int) -> List[List[str]]:
    """
    Split ``names`` into consecutive groups of at most ``size`` items.

    The last group holds the remainder. Order is preserved within and across
    groups; an empty input yields no groups.

    Raises:
        ConfigurationError: If size is not a positive integer
    """
    if size <= 0:
        raise ConfigurationError(f"Batch size must be at least 1, got {size}")
    return [list(names[i:i + size]) for i in range(0, len(names), size)]
