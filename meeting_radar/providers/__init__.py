"""
Calendar providers and the factory that builds them from connected accounts.
"""

from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from .base import CalendarProvider
from .google_calendar import GoogleCalendarProvider
from ..config import settings, get_logger
from ..core.exceptions import ConfigurationError
from ..link_detection import LinkDetector, default_detectors
from ..storage.settings_store import AccountConfig

logger = get_logger("providers")


class ProviderFactory:
    """Factory for creating calendar provider instances."""

    @staticmethod
    def create(
        account: AccountConfig,
        detectors: Optional[Sequence[LinkDetector]] = None
    ) -> CalendarProvider:
        """
        Create the provider for one account.

        Args:
            account: Connected account.
            detectors: Link detectors in priority order.

        Raises:
            ConfigurationError: If the account's provider is not supported.
        """
        if detectors is None:
            detectors = default_detectors(settings.detectors.internal_meet_host)

        if account.provider_id == GoogleCalendarProvider.provider_id:
            token_file = account.properties.get("tokenPath") or str(
                Path(settings.google.token_dir) / f"{account.email}.json"
            )
            return GoogleCalendarProvider(
                token_file=token_file,
                detectors=detectors,
                account_email=account.email,
            )

        raise ConfigurationError(
            f"Unsupported calendar provider: {account.provider_id}",
            details={"email": account.email}
        )

    @classmethod
    def create_all(
        cls,
        accounts: Iterable[AccountConfig],
        detectors: Optional[Sequence[LinkDetector]] = None
    ) -> List[CalendarProvider]:
        """
        Create providers for every enabled account, skipping unsupported ones.

        Returns:
            Providers in account order.
        """
        providers = []

        for account in accounts:
            if not account.enabled:
                continue
            try:
                providers.append(cls.create(account, detectors))
            except ConfigurationError as e:
                logger.warning(f"Skipping account {account.email}: {e}")

        logger.debug(f"Created {len(providers)} calendar providers")
        return providers


__all__ = [
    "CalendarProvider",
    "GoogleCalendarProvider",
    "ProviderFactory",
]
