from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


@dataclass(frozen=True)
class BootEntry:
    id: str  # logind id: 'auto-windows', 'Pop_OS-current.conf', ...
    pretty_name: str


@dataclass
class MenuAction:
    entry: BootEntry
    label: str
    handle: Any = None  # whatever the host menu returned on insert


class FlowState(Enum):
    IDLE = 'idle'
    COUNTING = 'counting'
    TERMINATED = 'terminated'


@dataclass
class CountdownState:
    remaining_seconds: int
    selected_entry: Optional[BootEntry] = None
