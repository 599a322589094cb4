# sirc.py
import argparse
import asyncio
import logging
import logging.handlers
import os
import sys
from typing import List, Optional

from sirc_core.app_config import AppConfig
from sirc_core.client.console_ui import ConsoleUI
from sirc_core.client.dummy_ui import DummyUI
from sirc_core.client.input_handler import InputHandler
from sirc_core.client.session_manager import SessionManager
from sirc_core.config_defs import Identity

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(config: AppConfig):
    """Set up logging for the application using the config object."""
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    formatter = logging.Formatter(LOG_FORMAT)

    # stdout belongs to the chat display, so console logging goes to stderr.
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(config.console_log_level_int)
    root_logger.addHandler(console_handler)

    sirc_base_logger = logging.getLogger("sirc")
    if not config.log_enabled:
        sirc_base_logger.setLevel(config.console_log_level_int)
        return

    log_dir = os.path.join(config.BASE_DIR, "logs")
    try:
        os.makedirs(log_dir, exist_ok=True)
    except OSError as e:
        print(f"Error creating log directory {log_dir}: {e}. Logging to project root.", file=sys.stderr)
        log_dir = config.BASE_DIR

    try:
        full_log_path = os.path.join(log_dir, config.log_file)
        file_handler = logging.handlers.RotatingFileHandler(
            full_log_path,
            maxBytes=config.log_max_bytes,
            backupCount=config.log_backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        file_handler.setLevel(config.log_level_int)
        root_logger.addHandler(file_handler)

        sirc_base_logger.setLevel(min(config.log_level_int, config.console_log_level_int))
        sirc_base_logger.info(f"Logging initialized. Log file: {full_log_path}")
        sirc_base_logger.info(
            f"'sirc' logger level: {logging.getLevelName(sirc_base_logger.level)} "
            f"(file: {config.log_level_str}, console: {config.console_log_level_str})"
        )
    except OSError as e:
        print(f"Failed to initialize file logging: {e}", file=sys.stderr)
        logging.basicConfig(level=config.console_log_level_int, format=LOG_FORMAT, handlers=[console_handler], force=True)
        logging.getLogger("sirc").error(f"File logging setup failed. Using console logging only. Error: {e}")


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="sIRC - a small multi-server IRC client",
        epilog="Each positional COMMAND runs at startup, e.g.: sirc \"server irc.libera.chat\" \"join #python\"",
    )
    parser.add_argument("commands", nargs="*", metavar="COMMAND", help="Command to run at startup. A leading / is optional.")
    parser.add_argument("--config", default=None, help="Path to the INI config file. Overrides SIRC_CONFIG.")
    parser.add_argument("--nick", default=None, help="Nickname for new connections. Overrides config.")
    parser.add_argument("--username", default=None, help="Username for new connections. Overrides config.")
    parser.add_argument("--realname", default=None, help="Real name for new connections. Overrides config.")
    parser.add_argument("--headless", action="store_true", help="Run without reading stdin; only the startup commands run.")
    return parser.parse_args(argv)


def normalize_startup_command(arg: str) -> str:
    """Startup arguments name a command even without the leading /."""
    arg = arg.strip()
    if not arg or arg.startswith("/"):
        return arg
    return "/" + arg


def main(argv: Optional[List[str]] = None):
    args = parse_arguments(argv)
    app_config = AppConfig(args.config)

    setup_logging(app_config)
    app_logger = logging.getLogger("sirc.main_app")
    app_logger.info("Starting sIRC.")
    if not app_config.config_file_loaded:
        app_logger.info(f"No config file at {app_config.CONFIG_FILE_PATH}; using defaults.")

    identity = Identity(
        nick=args.nick or app_config.nick,
        username=args.username or app_config.username,
        realname=args.realname or app_config.realname,
    )

    if args.headless:
        ui = DummyUI()
        input_handler = None
    else:
        ui = ConsoleUI()
        input_handler = InputHandler()

    initial_commands = [normalize_startup_command(arg) for arg in args.commands]

    async def run():
        manager = SessionManager(app_config, ui, identity=identity, input_handler=input_handler)
        await manager.run_main_loop(initial_commands)

    try:
        asyncio.run(run())
    except KeyboardInterrupt:
        app_logger.info("Keyboard interrupt received before the event loop took over signals.")
    except Exception as e:
        app_logger.critical(f"Critical error in main loop: {e}", exc_info=True)
        sys.exit(1)
    finally:
        app_logger.info("sIRC shutdown sequence in main() complete.")
        logging.shutdown()


if __name__ == "__main__":
    main()
