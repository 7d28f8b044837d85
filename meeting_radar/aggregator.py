"""
Aggregates meetings from all configured calendar providers.
"""

import asyncio
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Sequence

from .config import get_logger
from .core.exceptions import AggregationError
from .models import Meeting
from .providers.base import CalendarProvider

logger = get_logger("aggregator")


@dataclass
class ProviderFailure:
    """A provider that failed during aggregation."""
    provider: str
    error: Exception


@dataclass
class AggregationResult:
    """Meetings from the providers that succeeded, plus the failures."""
    meetings: List[Meeting] = field(default_factory=list)
    errors: List[ProviderFailure] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        """True when every provider succeeded."""
        return not self.errors


def sort_meetings(meetings: Sequence[Meeting]) -> List[Meeting]:
    """Stable ascending sort by start time; ties keep their input order."""
    return sorted(meetings, key=lambda m: m.start_time)


class MeetingsAggregator:
    """
    Fans out to every provider and merges the results into one ordered list.
    """

    def __init__(self, providers: Sequence[CalendarProvider]):
        self.providers = list(providers)

    async def get_meetings(self, start: datetime, end: datetime) -> List[Meeting]:
        """
        Fetch from each provider in order and return the merged, sorted list.

        Raises:
            AggregationError: The first provider failure; no partial results are returned.
        """
        all_meetings: List[Meeting] = []

        for provider in self.providers:
            try:
                meetings = await provider.fetch_meetings(start, end)
            except Exception as e:
                logger.error(f"Error fetching from {provider.name}: {e}")
                raise AggregationError(
                    f"Failed to fetch meetings from {provider.name}: {e}",
                    details={"provider": provider.name}
                ) from e
            all_meetings.extend(meetings)
            logger.debug(f"{provider.name}: found {len(meetings)} meetings")

        result = sort_meetings(all_meetings)
        logger.info(f"Total meetings found: {len(result)}")
        return result

    async def collect(self, start: datetime, end: datetime) -> AggregationResult:
        """
        Fetch from all providers concurrently, isolating failures per provider.

        Returns:
            Sorted meetings from the providers that succeeded and one
            ProviderFailure per provider that raised.
        """
        outcomes = await asyncio.gather(
            *(provider.fetch_meetings(start, end) for provider in self.providers),
            return_exceptions=True
        )

        result = AggregationResult()
        all_meetings: List[Meeting] = []

        for provider, outcome in zip(self.providers, outcomes):
            if isinstance(outcome, BaseException):
                # Cancellation and interpreter exits are not provider failures
                if not isinstance(outcome, Exception):
                    raise outcome
                logger.error(f"Error fetching from {provider.name}: {outcome}")
                result.errors.append(ProviderFailure(provider=provider.name, error=outcome))
                continue
            all_meetings.extend(outcome)
            logger.debug(f"{provider.name}: found {len(outcome)} meetings")

        result.meetings = sort_meetings(all_meetings)
        logger.info(
            f"Total meetings found: {len(result.meetings)} "
            f"({len(self.providers) - len(result.errors)}/{len(self.providers)} providers succeeded)"
        )
        return result
