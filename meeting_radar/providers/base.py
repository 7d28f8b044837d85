"""
Base class for calendar providers.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List

from ..models import Meeting


class CalendarProvider(ABC):
    """
    Interface every calendar source implements.

    Implementations hold no state shared with other providers; the aggregator
    may call several of them concurrently.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable identifier used in logs and error reports."""

    @abstractmethod
    async def fetch_meetings(
        self,
        start: datetime,
        end: datetime
    ) -> List[Meeting]:
        """
        Fetch meetings with a join link that overlap [start, end).

        Args:
            start: Window start (timezone-aware).
            end: Window end (timezone-aware, exclusive).

        Returns:
            Meetings in no guaranteed order.

        Raises:
            AuthenticationError: Credential missing or unusable.
            ProviderError: The source could not be read.
        """
