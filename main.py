import sys
import os
import argparse
import logging

from locforge_logger import get_logger, set_console_level
logger = get_logger("main")

if getattr(sys, 'frozen', False):
    application_path = os.path.dirname(sys.executable)
    sys.path.insert(0, application_path)
    logger.debug(f"Running from bundle. Added to sys.path: {application_path}")
elif __file__:
    application_path = os.path.dirname(__file__)
    if application_path not in sys.path:
        sys.path.insert(0, application_path)

import locforge_config as config
from app_bootstrap import bootstrap, build_engine, make_fetcher
from locforge_exceptions import EmptyOverlayError
from models.settings_model import SettingsModel


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Bilingual (vi/en) translation editor for the kanji study app (LocForge).",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    source = parser.add_mutually_exclusive_group()
    source.add_argument(
        "--locales-dir",
        default=None,
        help="Read bundles from <dir>/<lang>/<namespace>.json."
    )
    source.add_argument(
        "--base-url",
        default=None,
        help="Fetch bundles from <url>/<lang>/<namespace>.json."
    )
    parser.add_argument(
        "--namespace",
        choices=config.NAMESPACES,
        default=None,
        help="Namespace to open (defaults to the last one used)."
    )
    parser.add_argument(
        "--lang",
        choices=sorted(config.SUPPORTED_LANGUAGES),
        default=None,
        help="UI language (defaults to the system locale)."
    )
    parser.add_argument(
        "--export",
        metavar="PATH",
        default=None,
        help="Write the saved edits to PATH and exit without starting the GUI."
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Log debug output to the console."
    )
    return parser


def run_export(path: str) -> int:
    """Headless export of the saved edits."""
    engine = build_engine()
    try:
        written = engine.overlay.export(path)
    except EmptyOverlayError as e:
        logger.warning(e.message)
        return 1
    except OSError as e:
        logger.error(f"Export failed: {e}")
        return 2
    logger.info(f"Exported {engine.overlay.edit_count()} edit(s) to {written}")
    return 0


def main(argv=None):
    args = build_parser().parse_args(argv)

    if args.debug:
        set_console_level(logging.DEBUG)

    if args.export:
        sys.exit(run_export(args.export))

    from gui.qt import QApplication

    settings = SettingsModel.instance()
    if args.namespace:
        settings.active_namespace = args.namespace

    app = QApplication(sys.argv)

    engine = build_engine(
        settings=settings,
        fetcher=make_fetcher(settings, locales_dir=args.locales_dir, base_url=args.base_url),
        language=args.lang,
    )
    controller, window = bootstrap(engine)
    logger.info("Bootstrap complete. Controller and View created.")

    window.show()
    logger.info("LocForge GUI started.")

    exit_code = app.exec()
    logger.info(f"LocForge GUI finished with exit code {exit_code}.")
    sys.exit(exit_code)


if __name__ == "__main__":
    logger.info("Starting LocForge...")
    main()
