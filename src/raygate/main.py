import sys
import logging

# Basic console logger for messages BEFORE full setup is complete.
# This logger will be replaced by the full setup later.
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)-8s - [console] - %(message)s',
    stream=sys.stdout
)
log = logging.getLogger("console")

import raygate.local.console as console
from raygate.local.config import effective_settings as config
from raygate.log.setup import setup_logging


def main() -> None:
    """The main entry point for the console application."""
    setup_logging(logging.INFO)

    # Non-interactive mode for one-off commands
    if len(sys.argv) > 1:
        command, args = sys.argv[1].lower(), sys.argv[2:]
        if "--verbose" in args:
            args.remove("--verbose")
            console.toggle_verbose_logging()

        sys.exit(console.run_once(command, args))

    # Interactive mode
    print("--- raygate Management Console ---")
    print("Type 'help' for a list of commands.")
    print(f"V2Ray configuration target: {config.V2RAY_CONFIG_PATH}")

    while True:
        try:
            command_line = input("> ").strip().split()
            if not command_line:
                continue

            command, args = command_line[0].lower(), command_line[1:]
            log.debug(f"Received command: {command}, args: {args}")

            if console.execute_command(command, args):
                break

        except (KeyboardInterrupt, EOFError):
            log.warning("\nExiting console.")
            break
        except Exception as e:
            log.error(f"An unexpected error occurred in the console: {e}", exc_info=True)


if __name__ == "__main__":
    main()
