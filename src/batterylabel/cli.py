"""
Command line entry point.

    batterylabel render --level 42 --style default --percent-mode outside -o label.png
    batterylabel watch
"""

import argparse
import logging
import signal
import sys
from typing import List, Optional

from PIL import Image

from batterylabel.color import format_color, parse_color, to_rgba
from batterylabel.config.settings import Settings, SystemSettings
from batterylabel.framework.looper import Looper
from batterylabel.logging import setup_logging
from batterylabel.render.sink import LoggingSink
from batterylabel.render.widget import BatteryLevelTextWidget, Justify
from batterylabel.resources import ResourceLoader
from batterylabel.services.power import BATTERY_POLL_INTERVAL, BatteryPollingService
from batterylabel.state.battery import BatteryController, BatteryStyle, PercentMode
from batterylabel.view import BatteryLevelView, number_locale

log = logging.getLogger(__name__)

SETTINGS_CHECK_INTERVAL_MS = 1000


def _enum_arg(enum_cls):
    def parse(value: str):
        try:
            return enum_cls[value.upper()]
        except KeyError:
            choices = ", ".join(m.name.lower() for m in enum_cls)
            raise argparse.ArgumentTypeError(f"invalid choice {value!r} (choose from {choices})")
    parse.__name__ = enum_cls.__name__
    return parse


def _color_arg(value: str) -> int:
    try:
        return parse_color(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="batterylabel", description="Status bar battery percentage label")
    parser.add_argument("--config", help="Settings file (default: $BATTERYLABEL_CONFIG_PATH)")
    parser.add_argument("--resources", default="", help="Font/resource directory")
    parser.add_argument("--log-level", default="INFO", help="Logging level (default: INFO)")
    parser.add_argument("--log-file", help="Also log to this file")
    parser.add_argument("--locale", help="Locale for the percentage text, e.g. de_DE (default: from LC_NUMERIC/LANG)")
    sub = parser.add_subparsers(dest="command", required=True)

    render = sub.add_parser("render", help="Render one label snapshot to a PNG")
    render.add_argument("--level", type=int, default=50, help="Battery level 0-100")
    render.add_argument("--charging", action="store_true", help="Battery is charging")
    render.add_argument("--style", type=_enum_arg(BatteryStyle), default=BatteryStyle.DEFAULT)
    render.add_argument("--percent-mode", type=_enum_arg(PercentMode), default=PercentMode.OUTSIDE)
    render.add_argument("--force-show", action="store_true", help="Show the label whatever the style")
    render.add_argument("--color", type=_color_arg, help="Text color, e.g. 0xff00ff00 or #00ff00")
    render.add_argument("--background", type=_color_arg, default=0xFF000000, help="Canvas color")
    render.add_argument("--width", type=int, default=40)
    render.add_argument("--height", type=int, default=16)
    render.add_argument("-o", "--output", default="battery_label.png", help="Output PNG path")

    watch = sub.add_parser("watch", help="Follow the host battery and log label changes")
    watch.add_argument("--interval", type=float, default=BATTERY_POLL_INTERVAL,
                       help=f"Battery poll interval in seconds (default: {BATTERY_POLL_INTERVAL})")
    watch.add_argument("--style", type=_enum_arg(BatteryStyle), default=BatteryStyle.DEFAULT)
    watch.add_argument("--percent-mode", type=_enum_arg(PercentMode), default=PercentMode.INSIDE)
    return parser


def cmd_render(args, settings: SystemSettings, resources: ResourceLoader) -> int:
    """Drive a view through one battery snapshot and save the widget as PNG."""
    looper = Looper()
    controller = BatteryController(looper)
    widget = BatteryLevelTextWidget(0, 0, args.width, args.height,
                                    update_callback=lambda full: None,
                                    resources=resources, justify=Justify.CENTER)
    view = BatteryLevelView(widget, settings, looper, resources, locale=args.locale)
    view.set_battery_controller(controller)
    view.on_configuration_changed()
    view.attach()

    controller.set_style(args.style, args.percent_mode)
    controller.set_battery_level(args.level, args.charging, args.charging)
    view.set_force_shown(args.force_show)
    if args.color is not None:
        view.on_color_setting_changed(args.color)
        # Snapshot shows where a fade ends
        view.color_policy.animator.end()
    looper.run_pending()

    canvas = Image.new("RGBA", (args.width, args.height), to_rgba(args.background))
    widget.draw_on(canvas, 0, 0)
    canvas.save(args.output)
    view.detach()

    log.info(f"[cli] Wrote {args.output}: text={view.text!r} visibility={view.visibility.name} "
             f"color={format_color(view.color_state.current_color)}")
    return 0


def cmd_watch(args, settings: SystemSettings, resources: ResourceLoader) -> int:
    """Run the label against the host battery until interrupted."""
    looper = Looper()
    controller = BatteryController(looper)
    view = BatteryLevelView(LoggingSink(), settings, looper, resources, locale=args.locale)
    view.set_battery_controller(controller)
    poller = BatteryPollingService(controller, interval=args.interval)

    def check_settings():
        settings.check_for_changes()
        looper.post_delayed(check_settings, SETTINGS_CHECK_INTERVAL_MS)

    def shutdown(signum, frame):
        log.info(f"[cli] Received signal {signum}, exiting...")
        looper.stop()

    signal.signal(signal.SIGINT, shutdown)
    signal.signal(signal.SIGTERM, shutdown)

    view.on_configuration_changed()
    view.attach()
    controller.set_style(args.style, args.percent_mode)
    poller.start()
    looper.post_delayed(check_settings, SETTINGS_CHECK_INTERVAL_MS)
    try:
        looper.run_forever()
    finally:
        poller.stop()
        view.detach()
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    level = getattr(logging, str(args.log_level).upper(), None)
    if not isinstance(level, int):
        parser.error(f"unknown log level {args.log_level!r}")
    try:
        number_locale(args.locale)
    except ValueError as e:
        parser.error(str(e))
    setup_logging(args.log_file, level)

    store = Settings(args.config) if args.config else Settings()
    settings = SystemSettings(store)
    resources = ResourceLoader(args.resources, settings=store)

    if args.command == "render":
        return cmd_render(args, settings, resources)
    return cmd_watch(args, settings, resources)


if __name__ == "__main__":
    sys.exit(main())
