import os
from typing import Any, Callable, Dict, List, Optional

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from reboot_to import i18n  # noqa: E402

# ============================================================================
# COMMON TEST DATA
# ============================================================================

SAMPLE_ENTRIES = [
    "Pop_OS-current.conf",
    "Pop_OS-recovery.conf",
    "auto-windows",
    "auto-reboot-to-firmware-setup",
]


# ============================================================================
# FAKE COLLABORATORS
# ============================================================================


class FakeMenu:
    """Host menu holding two built-in items, like the tray menu."""

    def __init__(self):
        self.items: List[Any] = ["builtin-1", "builtin-2"]
        self.callbacks: Dict[int, Callable[[], None]] = {}
        self._next = 0

    def insert_item(self, position: int, label: str, callback: Callable[[], None]) -> int:
        handle = self._next
        self._next += 1
        self.items.insert(position, (handle, label))
        self.callbacks[handle] = callback
        return handle

    def remove_item(self, handle: int) -> None:
        self.items = [i for i in self.items if not (isinstance(i, tuple) and i[0] == handle)]
        self.callbacks.pop(handle)

    @property
    def labels(self) -> List[str]:
        return [i[1] for i in self.items if isinstance(i, tuple)]

    def activate(self, index: int) -> None:
        handle = [i for i in self.items if isinstance(i, tuple)][index][0]
        self.callbacks[handle]()


class FakeDialog:
    def __init__(self):
        self.title: Optional[str] = None
        self.message: Optional[str] = None
        self.messages: List[str] = []
        self.is_open = False
        self.closed = False
        self.on_cancel: Optional[Callable[[], None]] = None
        self.on_confirm: Optional[Callable[[], None]] = None

    def open(self, title, message, on_cancel, on_confirm):
        self.title = title
        self.message = message
        self.on_cancel = on_cancel
        self.on_confirm = on_confirm
        self.is_open = True

    def set_message(self, text):
        if self.closed:
            raise RuntimeError("dialog already disposed")
        self.message = text
        self.messages.append(text)

    def close(self):
        self.is_open = False
        self.closed = True


class FakeScheduler:
    def __init__(self):
        self.tasks: Dict[int, tuple] = {}
        self.cancelled: List[int] = []
        self._next = 0

    def start_periodic(self, interval_ms, callback):
        handle = self._next
        self._next += 1
        self.tasks[handle] = (interval_ms, callback)
        return handle

    def cancel(self, handle):
        self.cancelled.append(handle)
        self.tasks.pop(handle, None)

    def callback_for(self, interval_ms):
        for interval, callback in self.tasks.values():
            if interval == interval_ms:
                return callback
        return None

    def fire(self, interval_ms, times=1):
        for _ in range(times):
            callback = self.callback_for(interval_ms)
            if callback is None:
                return
            callback()


class FakeService:
    def __init__(self, entries=None, fail_on=None):
        self.boot_loader_entries = list(SAMPLE_ENTRIES if entries is None else entries)
        self.calls: List[tuple] = []
        self.closed = False
        self.fail_on = fail_on

    def set_next_boot_entry(self, entry_id):
        self._record("SetRebootToBootLoaderEntry", entry_id)

    def reboot(self, interactive):
        self._record("Reboot", interactive)

    def close(self):
        self.closed = True

    def _record(self, method, arg):
        from reboot_to.errors import CallFailure

        if self.fail_on == method:
            raise CallFailure(method, "Access denied")
        self.calls.append((method, arg))


# ============================================================================
# FIXTURES
# ============================================================================


@pytest.fixture(autouse=True)
def english_catalog():
    """Tests compare against the English source strings."""
    i18n.translations = i18n.gettext.NullTranslations()
    yield


@pytest.fixture
def fake_menu():
    return FakeMenu()


@pytest.fixture
def dialogs():
    """Every dialog the flow created, in order."""
    return []


@pytest.fixture
def dialog_factory(dialogs):
    def factory():
        dialog = FakeDialog()
        dialogs.append(dialog)
        return dialog

    return factory


@pytest.fixture
def scheduler():
    return FakeScheduler()


@pytest.fixture
def service():
    return FakeService()


@pytest.fixture(scope="session")
def qapp():
    from PySide6.QtWidgets import QApplication

    app = QApplication.instance() or QApplication([])
    yield app
