import logging
from pathlib import Path
from typing import List, Optional

from raygate.local.config import effective_settings as config
from raygate.log.setup import set_console_level
from raygate.v2ray import V2rayConfigError, load_config, transform, write_config
from raygate.webserver import ServiceControlError, ServiceSupervisor, nginx_supervisor
from raygate.webserver.process_utils import get_executable_path

log = logging.getLogger(__name__)


def get_nginx_supervisor() -> ServiceSupervisor:
    """Builds the Nginx supervisor from the current settings."""
    return nginx_supervisor(config.NGINX_EXECUTABLE_PATH, config.NGINX_STATUS_COMMAND)


def _load_source(args: List[str]):
    source = Path(args[0]) if args else config.SIMPLIFIED_CONFIG_PATH
    log.debug(f"Reading simplified configuration from '{source}'.")
    return load_config(source)


def handle_apply_command(args: List[str]) -> bool:
    """
    Generates the V2Ray configuration file.

    :param args: Optional [SOURCE] [DEST] paths overriding the configured ones.
    :return: True if the file was written.
    """
    destination = Path(args[1]) if len(args) > 1 else config.V2RAY_CONFIG_PATH
    try:
        simplified = _load_source(args)
        write_config(simplified, destination)
    except (FileNotFoundError, ValueError, TypeError) as e:
        log.error(f"Could not read the simplified configuration: {e}")
        return False
    except V2rayConfigError as e:
        log.error(f"Failed to configure V2Ray: {e}")
        return False
    print(f"V2Ray configuration written to '{destination}'.")
    return True


def handle_render_command(args: List[str]) -> Optional[str]:
    """
    Prints the V2Ray configuration that 'apply' would write.

    :param args: Optional [SOURCE] path.
    :return: The rendered document, or None on failure.
    """
    try:
        rendered = transform(_load_source(args)).decode("utf-8")
    except (FileNotFoundError, ValueError, TypeError) as e:
        log.error(f"Could not read the simplified configuration: {e}")
        return None
    except V2rayConfigError as e:
        log.error(f"Failed to render V2Ray configuration: {e}")
        return None
    print(rendered)
    return rendered


def display_status() -> Optional[bool]:
    """Prints whether Nginx is running. Returns None if the status could not be determined."""
    try:
        running = get_nginx_supervisor().is_running()
    except ServiceControlError as e:
        log.error(str(e))
        return None
    print(f"Nginx is currently {'Running' if running else 'Stopped'}.")
    return running


def handle_stop_command() -> bool:
    """Stops Nginx and verifies that it is gone."""
    try:
        get_nginx_supervisor().stop()
    except ServiceControlError as e:
        log.error(str(e))
        return False
    print("Nginx stopped.")
    return True


def check_configuration() -> bool:
    """
    Validates that the Nginx binary and the simplified configuration exist.

    :return: True if all required files are found, otherwise False.
    """
    log.info("Performing configuration and path validation...")
    all_ok = True
    checks = {
        "Nginx": get_executable_path(config.NGINX_EXECUTABLE_PATH),
        "Simplified config": config.SIMPLIFIED_CONFIG_PATH,
    }
    for name, path in checks.items():
        if not path.exists():
            log.error(f"CONFIG CHECK FAILED: {name} not found at '{path}'")
            all_ok = False
        else:
            log.info(f"Config Check OK: Found {name} at '{path}'")
    return all_ok


def _config_show():
    """Displays the current modifiable settings."""
    print("\n--- Current Application Configuration ---")
    for key, value in config.modifiable_items().items():
        print(f"  {key} = {value}")
    print("---")
    print("Use 'config set <KEY> <VALUE>' to change a setting.")
    print("---------------------------------------\n")


def _config_set(args: List[str]) -> bool:
    """Sets and persists a modifiable setting."""
    if len(args) < 2:
        print("Usage: config set <SETTING_NAME> <VALUE>")
        return False

    key, value_str = args[0].upper(), " ".join(args[1:])
    success, message = config.update_setting(key, value_str)
    print(message)
    return success


def _config_help():
    """Displays help for the config command."""
    print("\nConfig Command Help:")
    print("  config show                - Display all modifiable settings.")
    print("  config set KEY VALUE       - Change and persist a setting.")
    print("  config help                - Show this help message.")
    print("Use 'check-config' to validate paths.")


def handle_config_command(args: List[str]) -> None:
    """
    Handles all sub-commands for the 'config' command-line interface.

    :param args: A list of string arguments following the 'config' command.
    """
    sub_command = args[0].lower() if args else "show"

    if sub_command == "show":
        _config_show()
    elif sub_command == "set":
        _config_set(args[1:])
    elif sub_command == "help":
        _config_help()
    else:
        print(f"Unknown config sub-command: '{sub_command}'. Type 'config help' for available commands.")


def toggle_verbose_logging() -> None:
    """Toggles verbose (DEBUG) logging for the console output."""
    config.VERBOSE_LOGGING = not config.VERBOSE_LOGGING
    set_console_level(logging.DEBUG if config.VERBOSE_LOGGING else logging.INFO)
    print(f"Verbose logging {'enabled' if config.VERBOSE_LOGGING else 'disabled'}.")


def print_help() -> None:
    """Prints the list of available commands."""
    print("\nAvailable commands:")
    print("  apply [SOURCE] [DEST]  - Write the V2Ray configuration from the simplified config.")
    print("  render [SOURCE]        - Print the V2Ray configuration without writing it.")
    print("  status                 - Show whether Nginx is running.")
    print("  stop                   - Stop Nginx.")
    print("  check-config           - Validate configured paths.")
    print("  config [show|set|help] - View or change settings.")
    print("  verbose                - Toggle debug output.")
    print("  help                   - Show this message.")
    print("  exit                   - Leave the console.\n")
