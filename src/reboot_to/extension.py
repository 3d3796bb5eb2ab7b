from __future__ import annotations
import logging
from typing import Any, Callable, Optional

from reboot_to.config import Settings
from reboot_to.countdown import ConfirmationSurface, RebootCountdown, Scheduler
from reboot_to.errors import CallFailure, RebootToError
from reboot_to.menu import MenuBinder, MenuSurface
from reboot_to.platforms.linux import LogindManager

logger = logging.getLogger(__name__)


class RebootToExtension:
    """Owns one enable/disable cycle: logind connection, menu entries, countdown."""

    def __init__(self, menu: MenuSurface, dialog_factory: Callable[[], ConfirmationSurface],
                 scheduler: Scheduler, settings: Optional[Settings] = None,
                 service_factory: Callable[[], Any] = LogindManager,
                 on_error: Optional[Callable[[RebootToError], None]] = None) -> None:
        self.menu = menu
        self.dialog_factory = dialog_factory
        self.scheduler = scheduler
        self.settings = settings or Settings()
        self.service_factory = service_factory
        self.on_error = on_error

        self.service: Any = None
        self.binder: Optional[MenuBinder] = None
        self.countdown: Optional[RebootCountdown] = None

    @property
    def enabled(self) -> bool:
        return self.service is not None

    def enable(self) -> None:
        # ServiceUnavailable propagates, nothing is inserted in that case
        service = self.service_factory()
        try:
            entries = list(service.boot_loader_entries)
        except RebootToError:
            service.close()
            raise
        logger.info('Found %d entries for reboot: [%s]', len(entries), ', '.join(entries))

        self.service = service
        service.on_error = self._call_failed
        self.countdown = RebootCountdown(
            service,
            self.dialog_factory,
            self.scheduler,
            seconds=self.settings.countdown_seconds,
            tick_interval_ms=self.settings.tick_interval_ms,
            refresh_interval_ms=self.settings.refresh_interval_ms,
        )
        self.binder = MenuBinder(self.menu, self.countdown.start, offset=self.settings.menu_offset)
        self.binder.build(entries)

    def disable(self) -> None:
        if self.countdown is not None:
            self.countdown.dispose()
            self.countdown = None
        if self.binder is not None:
            self.binder.dispose()
            self.binder = None
        if self.service is not None:
            self.service.close()
            self.service = None

    def reload(self) -> None:
        self.disable()
        self.enable()

    def _call_failed(self, method: str, message: str) -> None:
        # logind refused a call that was already sent, the dialog is stale
        if self.countdown is not None:
            self.countdown.dispose()
        if self.on_error is not None:
            self.on_error(CallFailure(method, message))
