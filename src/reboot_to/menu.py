from __future__ import annotations
import logging
from typing import Any, Callable, Dict, List, Optional, Protocol, Sequence

from reboot_to.i18n import _
from reboot_to.models import BootEntry, MenuAction

logger = logging.getLogger(__name__)


class MenuSurface(Protocol):
    def insert_item(self, position: int, label: str, callback: Callable[[], None]) -> Any: ...

    def remove_item(self, handle: Any) -> None: ...


def pretty_name(entry_id: str) -> str:
    """Turn a logind boot entry id into a menu label.

    The substitutions are applied in a fixed order, e.g.
    'auto-reboot-to-firmware-setup' -> 'UEFI', 'auto-windows' -> 'Windows',
    'Pop_OS-current.conf' -> 'Pop_OS current'.
    """
    name = entry_id.removesuffix('.conf')
    name = name.replace('auto-reboot-to-firmware-setup', 'UEFI')
    name = name.removeprefix('auto-')
    name = name.replace('-', ' ', 1)
    return name[:1].upper() + name[1:]


def action_label(name: str) -> str:
    return _('Restart to %s') % name + '...'


class MenuBinder:
    def __init__(self, menu: MenuSurface, on_activate: Callable[[BootEntry], None], offset: int = 2) -> None:
        self.menu = menu
        self.on_activate = on_activate
        self.offset = offset
        self.actions: List[MenuAction] = []
        self._pretty_names: Dict[str, str] = {}

    @property
    def pretty_names(self) -> Dict[str, str]:
        return dict(self._pretty_names)

    def label_for(self, entry_id: str) -> Optional[str]:
        return self._pretty_names.get(entry_id)

    def build(self, entries: Sequence[str]) -> List[MenuAction]:
        if not entries:
            logger.info('No boot loader entries available, nothing to add')
        for index, entry_id in enumerate(entries):
            name = pretty_name(entry_id)
            self._pretty_names[entry_id] = name
            entry = BootEntry(id=entry_id, pretty_name=name)
            action = MenuAction(entry=entry, label=action_label(name))
            action.handle = self.menu.insert_item(self.offset + index, action.label, self._activator(entry))
            self.actions.append(action)
        logger.debug('Added %d reboot entries: [%s]', len(entries), ', '.join(entries))
        return list(self.actions)

    def _activator(self, entry: BootEntry) -> Callable[[], None]:
        def activate() -> None:
            self.on_activate(entry)
        return activate

    def dispose(self) -> None:
        for action in self.actions:
            self.menu.remove_item(action.handle)
        self.actions = []
        self._pretty_names.clear()
