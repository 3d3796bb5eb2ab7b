from __future__ import annotations
import logging
from typing import Callable, Optional, Set

from PySide6.QtCore import QObject, Qt, QTimer
from PySide6.QtGui import QAction, QIcon, QKeySequence
from PySide6.QtWidgets import (
    QApplication, QDialog, QVBoxLayout, QHBoxLayout, QLabel, QMenu, QMessageBox, QPushButton,
    QSystemTrayIcon
)

from reboot_to.config import Settings
from reboot_to.errors import RebootToError, ServiceUnavailable
from reboot_to.extension import RebootToExtension
from reboot_to.i18n import _
from reboot_to.platforms.linux import LogindManager

logger = logging.getLogger(__name__)

Guard = Callable[[Callable[[], None]], Callable[[], None]]


def _unguarded(callback: Callable[[], None]) -> Callable[[], None]:
    return callback


class QtMenuSurface:
    """Inserts and removes actions of a QMenu by position."""

    def __init__(self, menu: QMenu) -> None:
        self.menu = menu

    def insert_item(self, position: int, label: str, callback: Callable[[], None]) -> QAction:
        action = QAction(label, self.menu)
        action.triggered.connect(lambda checked=False: callback())
        actions = self.menu.actions()
        if position < len(actions):
            self.menu.insertAction(actions[position], action)
        else:
            self.menu.addAction(action)
        return action

    def remove_item(self, action: QAction) -> None:
        self.menu.removeAction(action)
        action.deleteLater()


class QtScheduler:
    """Periodic callbacks on the Qt event loop."""

    def __init__(self, guard: Guard = _unguarded) -> None:
        self.guard = guard
        self.timers: Set[QTimer] = set()

    def start_periodic(self, interval_ms: int, callback: Callable[[], None]) -> QTimer:
        timer = QTimer()
        timer.setInterval(interval_ms)
        timer.timeout.connect(self.guard(callback))
        timer.start()
        self.timers.add(timer)
        return timer

    def cancel(self, timer: QTimer) -> None:
        timer.stop()
        self.timers.discard(timer)
        timer.deleteLater()


class ConfirmationDialog:
    """Countdown dialog with Cancel (Escape) and Restart buttons."""

    def __init__(self, parent=None, guard: Guard = _unguarded) -> None:
        self.guard = guard
        self._closing = False
        self._on_cancel: Optional[Callable[[], None]] = None

        self.widget = QDialog(parent)
        self.widget.setWindowFlag(Qt.WindowStaysOnTopHint)
        layout = QVBoxLayout(self.widget)

        self.title = QLabel()
        self.title.setStyleSheet('font-weight: bold; font-size: 18px')
        self.title.setAlignment(Qt.AlignHCenter)
        layout.addWidget(self.title)
        layout.addSpacing(12)

        self.message = QLabel()
        self.message.setWordWrap(True)
        layout.addWidget(self.message)

        btn_row = QHBoxLayout()
        self.btn_cancel = QPushButton(_('Cancel'))
        self.btn_cancel.setShortcut(QKeySequence(Qt.Key_Escape))
        self.btn_restart = QPushButton(_('Restart'))
        for btn in (self.btn_cancel, self.btn_restart):
            btn.setAutoDefault(False)
            btn.setDefault(False)
            btn_row.addWidget(btn)
        layout.addLayout(btn_row)

        # Escape and the window close button end up here as well
        self.widget.rejected.connect(self._rejected)

    def open(self, title: str, message: str, on_cancel: Callable[[], None],
             on_confirm: Callable[[], None]) -> None:
        self.title.setText(title)
        self.message.setText(message)
        self._on_cancel = on_cancel
        cancel, confirm = self.guard(on_cancel), self.guard(on_confirm)
        self.btn_cancel.clicked.connect(lambda checked=False: cancel())
        self.btn_restart.clicked.connect(lambda checked=False: confirm())
        self.widget.open()

    def set_message(self, text: str) -> None:
        self.message.setText(text)

    def close(self) -> None:
        self._closing = True
        self.widget.close()
        self.widget.deleteLater()

    def _rejected(self) -> None:
        if not self._closing and self._on_cancel is not None:
            self.guard(self._on_cancel)()


class RebootToApp(QObject):
    """Tray icon whose menu lists the boot loader entries."""

    def __init__(self, settings: Optional[Settings] = None, service_factory=LogindManager) -> None:
        super().__init__()
        self.settings = settings or Settings()

        self.menu = QMenu()
        # two built-in items come before the entries, see Settings.menu_offset
        header = self.menu.addAction(_('Restart to'))
        header.setEnabled(False)
        self.menu.addSeparator()
        self.menu.addSeparator()
        self.act_refresh = self.menu.addAction(_('Refresh'))
        self.act_quit = self.menu.addAction(_('Quit'))
        self.act_refresh.triggered.connect(self.refresh)
        self.act_quit.triggered.connect(self.quit)

        self.tray = QSystemTrayIcon(QIcon.fromTheme('system-reboot'))
        self.tray.setToolTip(_('Restart to'))
        self.tray.setContextMenu(self.menu)

        self.extension = RebootToExtension(
            QtMenuSurface(self.menu),
            lambda: ConfirmationDialog(guard=self.guarded),
            QtScheduler(guard=self.guarded),
            self.settings,
            service_factory=service_factory,
            on_error=self.report_failure,
        )

    def show(self) -> None:
        if not QSystemTrayIcon.isSystemTrayAvailable():
            logger.warning('No system tray available, the menu will not be visible')
        self.tray.show()
        self.enable()

    def enable(self) -> None:
        try:
            self.extension.enable()
        except ServiceUnavailable as e:
            self.report_unavailable(e)

    def refresh(self) -> None:
        try:
            self.extension.reload()
        except ServiceUnavailable as e:
            self.report_unavailable(e)

    def report_unavailable(self, e: ServiceUnavailable) -> None:
        logger.error('logind unavailable: %s', e)
        QMessageBox.warning(None, _('Unavailable'),
                            _('Could not connect to the login manager, boot loader entries are not available.'))

    def report_failure(self, e: RebootToError) -> None:
        QMessageBox.critical(None, _('Restart failed'), str(e))

    def quit(self) -> None:
        self.extension.disable()
        self.tray.hide()
        QApplication.quit()

    def guarded(self, callback: Callable[[], None]) -> Callable[[], None]:
        def slot(*_args) -> None:
            try:
                callback()
            except RebootToError as e:
                logger.exception('Restart failed')
                self.report_failure(e)
        return slot
