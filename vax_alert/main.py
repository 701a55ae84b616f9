"""
Entrypoint: poll the TurboVax dashboard and email on every available location.

Точка входа. Процесс рассчитан на работу под супервизором, который
перезапускает его при падении: любая ошибка завершает процесс с кодом 1.
"""

from __future__ import annotations

import asyncio
import logging
import sys

from .config import Settings, get_settings
from .dashboard import DashboardClient
from .errors import ConfigError, VaxAlertError
from .monitor import AlertMonitor
from .notifier import EmailNotifier
from .utils import setup_logging


logger = logging.getLogger(__name__)


async def run(settings: Settings) -> None:
    """Acquire the HTTP client and SMTP session, then loop until an error propagates."""
    dashboard = DashboardClient(settings.monitor.dashboard_url)
    with EmailNotifier(settings.email) as notifier:
        async with dashboard.session():
            monitor = AlertMonitor(
                dashboard=dashboard,
                notifier=notifier,
                check_interval=settings.monitor.check_interval,
            )
            await monitor.run_forever()


def main() -> None:
    """Entry point for running the alert loop."""
    try:
        settings = get_settings()
    except ConfigError as e:
        # Логирование ещё не настроено, пишем прямо в stderr
        print(f"vax-alert: {e}", file=sys.stderr)
        sys.exit(1)

    log_file = setup_logging(settings.logging)
    logger.info(
        "Starting vaccine slot alerts for %s, logging to %s", settings.email.address, log_file
    )

    try:
        asyncio.run(run(settings))
    except KeyboardInterrupt:
        logger.info("User break - exiting")
        sys.exit(130)
    except VaxAlertError as e:
        logger.critical("Fatal %s: %s", type(e).__name__, e, exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
