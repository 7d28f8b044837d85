"""
Meeting Radar application runner.
Loads meetings once, then keeps them fresh and announces upcoming ones until stopped.
"""

import asyncio
import signal
import sys
from datetime import datetime

from .config import settings, setup_logging, get_logger
from .core.exceptions import MeetingRadarException
from .scheduler import MeetingNotifier, MeetingRefreshScheduler, Notification
from .service import MeetingsService

main_logger = get_logger("main")


class MeetingRadar:
    """
    Application orchestrator.

    Coordinates:
    - Initial meeting load (cache first)
    - Background refresh and notifications
    """

    def __init__(self, service: MeetingsService = None):
        self.service = service or MeetingsService()
        self.notifier = MeetingNotifier(on_notify=self._on_notify)
        self.scheduler = MeetingRefreshScheduler(self.service, self.notifier)
        self._shutdown_event = asyncio.Event()

    async def run(self) -> None:
        """Run until a shutdown signal is received."""
        self._setup_signal_handlers()

        try:
            result = await self.service.load_meetings(use_cache=True)
            for failure in result.errors:
                main_logger.error(f"❌ {failure.provider}: {failure.error}")
        except MeetingRadarException as e:
            main_logger.error(f"❌ Failed to load meetings: {e}")

        self._print_meetings()
        self.scheduler.start()
        main_logger.info("Meeting Radar is running. Press Ctrl+C to stop.")

        try:
            await self._shutdown_event.wait()
        finally:
            self.scheduler.stop()
            main_logger.info("Meeting Radar stopped")

    def _setup_signal_handlers(self) -> None:
        """Set up signal handlers for graceful shutdown."""
        signal.signal(signal.SIGINT, lambda s, f: self._shutdown_event.set())
        signal.signal(signal.SIGTERM, lambda s, f: self._shutdown_event.set())

    async def _on_notify(self, notification: Notification) -> None:
        print(f"\n🔔 {notification.title}\n   {notification.meeting.join_url}\n")

    def _print_meetings(self) -> None:
        """Print the meetings that are still upcoming or in progress."""
        meetings = self.service.visible_meetings()

        print("\n" + "=" * 60)
        print(f"MEETINGS ({len(meetings)})")
        print("=" * 60)
        current_day = None
        for meeting in meetings:
            local_start = meeting.start_time.astimezone(settings.tz_info)
            if local_start.date() != current_day:
                current_day = local_start.date()
                print(f"\n{current_day.strftime('%A, %d.%m.%Y')}")
            print(f"  {local_start.strftime('%H:%M')}  {meeting.title}  [{meeting.platform.value}]")
            print(f"         {meeting.join_url}")
        print("=" * 60 + "\n")


async def main():
    """Main entry point."""
    setup_logging()
    main_logger.info(f"Starting Meeting Radar at {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")

    app = MeetingRadar()
    await app.run()


def run():
    """Run Meeting Radar (synchronous entry point)."""
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        print("\nGoodbye!")
    except Exception as e:
        print(f"\nFatal error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    run()
