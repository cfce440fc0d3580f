"""Suspend sources and their priorities"""

from enum import Enum, unique


@unique
class SuspendSource(Enum):
    """A named origin of suspend requests.

    The enum value is the priority; higher values take precedence when
    several sources want the engine suspended at the same time.
    """

    SMART_SUSPEND = 100
    DOZE = 50

    @property
    def priority(self) -> int:
        return self.value

    @classmethod
    def by_priority(cls) -> list["SuspendSource"]:
        """All sources, highest priority first"""
        return sorted(cls, key=lambda source: source.priority, reverse=True)
