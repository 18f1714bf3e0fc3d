import logging
from typing import Any, List, Tuple

from raygate.local.console.handler import (
    check_configuration,
    display_status,
    handle_apply_command,
    handle_config_command,
    handle_render_command,
    handle_stop_command,
    print_help,
    toggle_verbose_logging,
)

log = logging.getLogger(__name__)

# The handler result that marks a failed command. Commands not listed never fail.
FAILED_RESULTS = {
    "apply": False,
    "render": None,
    "status": None,
    "stop": False,
    "check-config": False,
}


def _dispatch(command: str, args: List[str]) -> Tuple[bool, Any]:
    log.debug(f"Executing command: {command}, args: {args}")
    command_map = {
        "apply": lambda: handle_apply_command(args),
        "render": lambda: handle_render_command(args),
        "status": display_status,
        "stop": handle_stop_command,
        "check-config": check_configuration,
        "config": lambda: handle_config_command(args),
        "verbose": toggle_verbose_logging,
        "help": print_help,
        "exit": lambda: True,
    }

    if command not in command_map:
        log.info(f"Unknown command: '{command}'. Type 'help' for a list of commands.")
        return False, None
    return True, command_map[command]()


def execute_command(command: str, args: List[str]) -> bool:
    """
    Executes a single command from the user.

    :param command: The main command string (e.g., 'apply', 'config').
    :param args: A list of arguments for the command.
    :return bool: True if the console should exit, False otherwise.
    """
    _, result = _dispatch(command, args)
    return command == "exit" and result is True


def run_once(command: str, args: List[str]) -> int:
    """
    Executes a single command in non-interactive mode.

    :return int: The process exit status, 0 on success and 1 on failure.
    """
    found, result = _dispatch(command, args)
    if not found:
        return 1
    if command in FAILED_RESULTS and result is FAILED_RESULTS[command]:
        return 1
    return 0
