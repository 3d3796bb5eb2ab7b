from __future__ import annotations
import logging
from typing import Any, Callable, Optional, Protocol

from reboot_to.errors import RebootToError
from reboot_to.i18n import _
from reboot_to.models import BootEntry, CountdownState, FlowState

logger = logging.getLogger(__name__)


class Scheduler(Protocol):
    def start_periodic(self, interval_ms: int, callback: Callable[[], None]) -> Any: ...

    def cancel(self, handle: Any) -> None: ...


class ConfirmationSurface(Protocol):
    def open(self, title: str, message: str, on_cancel: Callable[[], None],
             on_confirm: Callable[[], None]) -> None: ...

    def set_message(self, text: str) -> None: ...

    def close(self) -> None: ...


class RebootService(Protocol):
    def set_next_boot_entry(self, entry_id: str) -> None: ...

    def reboot(self, interactive: bool) -> None: ...


def dialog_title(entry: BootEntry) -> str:
    return _('Restart to %s') % entry.pretty_name


def dialog_message(seconds: int) -> str:
    return _('The system will restart automatically in %d seconds.') % seconds


class CountdownTasks:
    """The tick and refresh timers of one countdown, stopped together."""

    def __init__(self, scheduler: Scheduler, tick: Any, refresh: Any) -> None:
        self.scheduler = scheduler
        self.tick = tick
        self.refresh = refresh

    @property
    def active(self) -> bool:
        return self.tick is not None or self.refresh is not None

    def cancel(self) -> None:
        if self.tick is not None:
            self.scheduler.cancel(self.tick)
            self.tick = None
        if self.refresh is not None:
            self.scheduler.cancel(self.refresh)
            self.refresh = None


class RebootCountdown:
    def __init__(self, service: RebootService, dialog_factory: Callable[[], ConfirmationSurface],
                 scheduler: Scheduler, seconds: int = 60, tick_interval_ms: int = 1000,
                 refresh_interval_ms: int = 500) -> None:
        self.service = service
        self.dialog_factory = dialog_factory
        self.scheduler = scheduler
        self.seconds = seconds
        self.tick_interval_ms = tick_interval_ms
        self.refresh_interval_ms = refresh_interval_ms

        self.state = FlowState.IDLE
        self.countdown: Optional[CountdownState] = None
        self.dialog: Optional[ConfirmationSurface] = None
        self.tasks: Optional[CountdownTasks] = None

    @property
    def remaining_seconds(self) -> Optional[int]:
        return self.countdown.remaining_seconds if self.countdown else None

    @property
    def selected_entry(self) -> Optional[BootEntry]:
        return self.countdown.selected_entry if self.countdown else None

    def start(self, entry: BootEntry) -> None:
        if self.state is FlowState.COUNTING:
            # a newer selection replaces the running countdown
            logger.info('Replacing countdown for "%s" with "%s"', self.countdown.selected_entry.id, entry.id)
            self.cancel()
        # a dialog left open by an earlier confirm
        self._close_dialog()

        logger.info('selected "%s" entry for reboot', entry.id)
        self.state = FlowState.COUNTING
        self.countdown = CountdownState(remaining_seconds=self.seconds, selected_entry=entry)

        dialog = self.dialog_factory()
        self.dialog = dialog
        dialog.open(
            dialog_title(entry),
            dialog_message(self.countdown.remaining_seconds),
            on_cancel=self._bind(dialog, self.cancel),
            on_confirm=self._bind(dialog, self.confirm),
        )
        self.tasks = CountdownTasks(
            self.scheduler,
            tick=self.scheduler.start_periodic(self.tick_interval_ms, self.tick),
            refresh=self.scheduler.start_periodic(self.refresh_interval_ms, self.refresh),
        )

    def _bind(self, dialog: ConfirmationSurface, handler: Callable[[], None]) -> Callable[[], None]:
        # buttons of a replaced dialog must not act on the current countdown
        def slot() -> None:
            if dialog is self.dialog:
                handler()
        return slot

    def tick(self) -> None:
        if self.state is not FlowState.COUNTING:
            return
        if self.countdown.remaining_seconds > 0:
            self.countdown.remaining_seconds -= 1
        if self.countdown.remaining_seconds == 0:
            self.confirm()

    def refresh(self) -> None:
        if self.state is not FlowState.COUNTING or self.dialog is None:
            return
        self.dialog.set_message(dialog_message(self.countdown.remaining_seconds))

    def cancel(self) -> None:
        if self.state is not FlowState.COUNTING:
            # after a confirm the dialog stays open until the user dismisses it
            self._close_dialog()
            return
        logger.info('Reboot to "%s" cancelled', self.countdown.selected_entry.id)
        self._stop_tasks()
        self.state = FlowState.TERMINATED
        self.countdown = None
        self._close_dialog()

    def confirm(self) -> None:
        if self.state is not FlowState.COUNTING:
            return
        entry = self.countdown.selected_entry
        self._stop_tasks()
        self.state = FlowState.TERMINATED
        self.countdown = None

        logger.info('rebooting to %s', entry.id)
        try:
            self.service.set_next_boot_entry(entry.id)
            self.service.reboot(False)
        except RebootToError:
            self._close_dialog()
            raise

    def dispose(self) -> None:
        """Cancel a running countdown and close any dialog left open after a confirm."""
        self.cancel()
        self._stop_tasks()
        self._close_dialog()

    def _stop_tasks(self) -> None:
        if self.tasks is not None:
            self.tasks.cancel()
            self.tasks = None

    def _close_dialog(self) -> None:
        dialog, self.dialog = self.dialog, None
        if dialog is not None:
            dialog.close()
