from __future__ import annotations
import os
from dataclasses import dataclass, replace
from typing import Mapping, Optional

ENV_COUNTDOWN = 'REBOOT_TO_COUNTDOWN'
ENV_LANG = 'REBOOT_TO_LANG'
ENV_LOG_LEVEL = 'REBOOT_TO_LOG_LEVEL'

_LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')


@dataclass(frozen=True)
class Settings:
    countdown_seconds: int = 60
    tick_interval_ms: int = 1000
    refresh_interval_ms: int = 500
    # the tray menu carries two built-in items before the boot entries
    menu_offset: int = 2
    language: Optional[str] = None
    log_level: str = 'WARNING'

    def __post_init__(self) -> None:
        if self.countdown_seconds < 1:
            raise ValueError(f'countdown must be at least 1 second, got {self.countdown_seconds}')
        if self.tick_interval_ms <= 0 or self.refresh_interval_ms <= 0:
            raise ValueError('timer intervals must be positive')
        if self.menu_offset < 0:
            raise ValueError('menu offset cannot be negative')
        if self.log_level not in _LOG_LEVELS:
            raise ValueError(f'unknown log level {self.log_level!r}')

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'Settings':
        env = os.environ if environ is None else environ
        kwargs = {}
        raw = env.get(ENV_COUNTDOWN, '').strip()
        if raw:
            try:
                kwargs['countdown_seconds'] = int(raw)
            except ValueError:
                raise ValueError(f'{ENV_COUNTDOWN} must be an integer, got {raw!r}') from None
        lang = env.get(ENV_LANG, '').strip()
        if lang:
            kwargs['language'] = lang
        level = env.get(ENV_LOG_LEVEL, '').strip()
        if level:
            kwargs['log_level'] = level.upper()
        return cls(**kwargs)

    def with_overrides(self, countdown: Optional[int] = None, language: Optional[str] = None,
                       verbose: int = 0) -> 'Settings':
        """Apply command line values on top of the environment."""
        changes = {}
        if countdown is not None:
            changes['countdown_seconds'] = countdown
        if language:
            changes['language'] = language
        if verbose:
            changes['log_level'] = 'DEBUG' if verbose > 1 else 'INFO'
        return replace(self, **changes) if changes else self
