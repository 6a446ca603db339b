"""
Result types produced by a lookup.
"""

from dataclasses import dataclass, field
from typing import Optional, Union


@dataclass(frozen=True)
class Resolved:
    """The first search result pointed at ``hostname``."""
    hostname: str


@dataclass(frozen=True)
class NotFound:
    """The search ran but produced no usable result link."""


@dataclass(frozen=True)
class Failed:
    """Navigation or the browser session itself failed."""
    reason: str = field(default="", compare=False)


Resolution = Union[Resolved, NotFound, Failed]


@dataclass(frozen=True)
class Outcome:
    """Container for one name and how its lookup ended."""
    name: str
    resolution: Resolution

    @property
    def resolved(self) -> bool:
        return isinstance(self.resolution, Resolved)

    @property
    def not_found(self) -> bool:
        return isinstance(self.resolution, NotFound)

    @property
    def failed(self) -> bool:
        return isinstance(self.resolution, Failed)

    @property
    def domain(self) -> Optional[str]:
        if isinstance(self.resolution, Resolved):
            return self.resolution.hostname
        return None
