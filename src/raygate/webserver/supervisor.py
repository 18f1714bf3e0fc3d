import shlex
import psutil
import logging
from pathlib import Path
from typing import Optional

from raygate.webserver import process_utils
from raygate.webserver.errors import StatusQueryError, StopCommandError, StopVerificationError

log = logging.getLogger(__name__)

STATUS_COMMAND_TEMPLATE = "ps -ef | grep '{executable}' | grep -v grep | awk '{{print $2}}'"


class ServiceSupervisor:
    """
    Queries and stops one external service identified by its executable path.

    Nothing is tracked in memory: every call asks the operating system for
    the current state.
    """

    def __init__(
        self,
        name: str,
        executable_path: Path,
        stop_command: str,
        status_command: Optional[str] = None,
        use_process_table: bool = True,
    ) -> None:
        """
        :param name: Human readable service name used in messages.
        :param executable_path: The service executable, matched against the process table.
        :param stop_command: Shell command that asks the service to stop.
        :param status_command: Shell pipeline printing one PID per line for running instances.
        :param use_process_table: Enumerate processes through psutil before using the pipeline.
        """
        self.name = name
        self.executable_path = executable_path
        self.stop_command = stop_command
        self.status_command = status_command or STATUS_COMMAND_TEMPLATE.format(executable=executable_path)
        self.use_process_table = use_process_table

    def is_running(self) -> bool:
        """
        Checks whether at least one instance of the service is running.

        :raises StatusQueryError: If the status query could not be launched.
        """
        if self.use_process_table:
            try:
                pids = process_utils.find_processes(str(self.executable_path))
            except psutil.Error as e:
                log.warning(
                    f"Could not enumerate processes for {self.name}: {e}. "
                    f"Falling back to '{self.status_command}'."
                )
            else:
                log.debug(f"{self.name} process table lookup found PIDs: {pids}")
                return bool(pids)
        return self._query_status_command()

    def _query_status_command(self) -> bool:
        try:
            result = process_utils.run_shell_command(self.status_command)
        except OSError as e:
            raise StatusQueryError(f"Failed to check {self.name} status: {e}") from e

        if result.returncode != 0:
            # A failing pipeline with no output means nothing matched.
            log.debug(
                f"{self.name} status command exited with {result.returncode}: {result.stderr.strip()}"
            )

        pids = process_utils.parse_pid_lines(result.stdout)
        log.debug(f"{self.name} status command found PIDs: {pids}")
        return bool(pids)

    def stop(self) -> None:
        """
        Issues the service's stop command once and verifies the result with a
        single status check. There is no retry and no forced termination.

        :raises StopCommandError: If the stop command could not be launched.
        :raises StopVerificationError: If the service is still running afterwards.
        """
        log.info(f"Stopping {self.name}...")
        try:
            result = process_utils.run_shell_command(self.stop_command)
        except OSError as e:
            raise StopCommandError(f"Failed to stop {self.name}: {e}") from e

        if result.returncode != 0:
            # Stopping an already stopped service fails here; the status check decides.
            log.debug(
                f"{self.name} stop command exited with {result.returncode}: {result.stderr.strip()}"
            )

        if self.is_running():
            raise StopVerificationError(f"Failed to stop {self.name}")
        log.info(f"{self.name} stopped.")


def nginx_supervisor(executable_path: Path, status_command: str = "") -> ServiceSupervisor:
    """
    Builds the supervisor for Nginx.

    :param executable_path: The Nginx binary.
    :param status_command: Optional shell pipeline; when set it replaces the process table lookup.
    """
    nginx_exe = process_utils.get_executable_path(executable_path)
    return ServiceSupervisor(
        name="Nginx",
        executable_path=nginx_exe,
        stop_command=f"{shlex.quote(str(nginx_exe))} -s stop",
        status_command=status_command or None,
        use_process_table=not status_command,
    )
