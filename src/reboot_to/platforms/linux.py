from __future__ import annotations
import logging
from typing import Callable, List, Optional

from PySide6.QtCore import QObject
from PySide6.QtDBus import QDBusConnection, QDBusInterface, QDBusPendingCallWatcher

from reboot_to.errors import CallFailure, ServiceUnavailable

logger = logging.getLogger(__name__)

LOGIN1_SERVICE = 'org.freedesktop.login1'
LOGIN1_PATH = '/org/freedesktop/login1'
LOGIN1_MANAGER = 'org.freedesktop.login1.Manager'


class LogindManager:
    """Boot loader entries and reboot requests through systemd-logind.

    Connects on construction and raises ServiceUnavailable when the system
    bus or the manager interface is unreachable. Method calls are sent
    asynchronously; error replies are logged and handed to `on_error`.
    """

    def __init__(self, bus: Optional[QDBusConnection] = None) -> None:
        self.bus = bus if bus is not None else QDBusConnection.systemBus()
        if not self.bus.isConnected():
            raise ServiceUnavailable(f'system bus: {self.bus.lastError().message()}')
        self.iface: Optional[QDBusInterface] = QDBusInterface(LOGIN1_SERVICE, LOGIN1_PATH, LOGIN1_MANAGER, self.bus)
        if not self.iface.isValid():
            raise ServiceUnavailable(f'{LOGIN1_SERVICE}: {self.iface.lastError().message()}')
        # parent of the watchers, keeps replies to calls in flight alive past close()
        self._owner = QObject()
        self._pending: List[QDBusPendingCallWatcher] = []
        self.on_error: Optional[Callable[[str, str], None]] = None

    def available(self) -> bool:
        return self.iface is not None and self.iface.isValid()

    @property
    def boot_loader_entries(self) -> List[str]:
        if not self.available():
            raise ServiceUnavailable(LOGIN1_SERVICE)
        value = self.iface.property('BootLoaderEntries')
        return [str(v) for v in (value or [])]

    def set_next_boot_entry(self, entry_id: str) -> None:
        self._call('SetRebootToBootLoaderEntry', entry_id)

    def reboot(self, interactive: bool) -> None:
        self._call('Reboot', bool(interactive))

    def close(self) -> None:
        self.iface = None

    def _call(self, method: str, *args) -> None:
        if not self.available():
            raise CallFailure(method, 'logind connection is closed')
        pending = self.iface.asyncCall(method, *args)
        watcher = QDBusPendingCallWatcher(pending, self._owner)
        watcher.finished.connect(lambda w, m=method: self._finished(m, w))
        self._pending.append(watcher)

    def _finished(self, method: str, watcher: QDBusPendingCallWatcher) -> None:
        if watcher in self._pending:
            self._pending.remove(watcher)
        if watcher.isError():
            error = watcher.error()
            logger.error('%s failed: %s %s', method, error.name(), error.message())
            if self.on_error is not None:
                self.on_error(method, f'{error.name()}: {error.message()}')
        else:
            logger.debug('%s done', method)
        watcher.deleteLater()
