import logging
import sys

from reboot_to import i18n
from reboot_to.cli import build_parser, run_cli
from reboot_to.config import Settings
from reboot_to.platforms.common import current_platform, is_supported


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        settings = Settings.from_env().with_overrides(
            countdown=args.countdown, language=args.lang, verbose=args.verbose)
    except ValueError as e:
        parser.error(str(e))

    logging.basicConfig(level=settings.log_level, format='%(asctime)s %(levelname)s %(name)s: %(message)s')
    i18n.set_language(settings.language)

    if not is_supported():
        print(f'reboot-to needs systemd-logind, not available on {current_platform()}')
        sys.exit(2)

    if args.cmd == 'list':
        sys.exit(run_cli(args))

    # GUI mode
    from PySide6.QtWidgets import QApplication
    from reboot_to.gui.app import RebootToApp

    app = QApplication(sys.argv[:1])
    app.setQuitOnLastWindowClosed(False)
    w = RebootToApp(settings)
    w.show()
    sys.exit(app.exec())


if __name__ == '__main__':
    main()
