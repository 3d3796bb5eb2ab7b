from __future__ import annotations
import argparse
import json
import logging
import sys
from typing import Callable, List

from PySide6.QtCore import QCoreApplication

from .errors import ServiceUnavailable
from .menu import pretty_name
from .platforms.linux import LogindManager

logger = logging.getLogger(__name__)


def format_entries(entries: List[str], output: str) -> str:
    if output == 'json':
        return json.dumps([
            {'id': e, 'name': pretty_name(e)} for e in entries
        ], ensure_ascii=False, indent=2)
    # default: table-like text
    lines = ["ID\tNAME"]
    for e in entries:
        lines.append(f"{e}\t{pretty_name(e)}")
    return "\n".join(lines)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog='reboot-to', description='Restart into another boot loader entry')
    sub = p.add_subparsers(dest='cmd', required=False)

    p.add_argument('--countdown', type=int, metavar='SECONDS', help='Seconds before the automatic restart (default 60)')
    p.add_argument('--lang', help='Language of the user interface')
    p.add_argument('-v', '--verbose', action='count', default=0, help='More logging, repeat for debug output')

    list_p = sub.add_parser('list', help='List the boot loader entries logind offers')
    list_p.add_argument('-o', '--output', choices=['text', 'json'], default='text')

    return p


def run_cli(args: argparse.Namespace, service_factory: Callable = LogindManager) -> int:
    # QtDBus needs an application object before the first bus connection
    if QCoreApplication.instance() is None:
        app = QCoreApplication(sys.argv[:1])  # noqa: F841
    try:
        mgr = service_factory()
    except ServiceUnavailable as e:
        logger.debug('logind unavailable: %s', e)
        print(f'Could not connect to logind: {e}')
        return 2
    try:
        entries = mgr.boot_loader_entries
    finally:
        mgr.close()
    print(format_entries(entries, getattr(args, 'output', 'text')))
    return 0
