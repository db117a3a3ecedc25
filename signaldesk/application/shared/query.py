"""Base Query class for the CQRS pattern.

Query - a request to read data. Queries have no side effects.
"""

from abc import ABC
from dataclasses import dataclass


@dataclass(frozen=True)
class Query(ABC):
    """Base class for all queries.

    Example:
        >>> @dataclass(frozen=True)
        ... class GetMonitorStatusQuery(Query):
        ...     pass

        >>> status = await handler.handle(GetMonitorStatusQuery())
    """

    pass
