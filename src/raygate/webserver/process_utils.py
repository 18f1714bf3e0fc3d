import os
import sys
import psutil
import logging
import subprocess
from pathlib import Path
from typing import List

log = logging.getLogger(__name__)


#* --- Process Status ---
def find_processes(executable: str) -> List[int]:
    """
    Returns the PIDs of all processes whose executable or command line
    contains `executable`, excluding the calling process.

    :param executable: The executable path to look for.
    :raises psutil.Error: If the process table cannot be enumerated.
    """
    own_pid = os.getpid()
    pids = []
    for proc in psutil.process_iter(["pid", "exe", "cmdline"]):
        info = proc.info
        if info["pid"] == own_pid:
            continue
        exe = info.get("exe") or ""
        cmdline = " ".join(info.get("cmdline") or [])
        if executable in exe or executable in cmdline:
            pids.append(info["pid"])
    return pids


def parse_pid_lines(output: str) -> List[str]:
    """Returns the non-empty, trimmed lines of a process listing."""
    return [line.strip() for line in output.splitlines() if line.strip()]


#* --- Command Execution ---
def get_executable_path(base_path: Path) -> Path:
    """Returns the platform-specific full path for an executable."""
    return base_path.with_suffix(".exe") if sys.platform == "win32" else base_path


def run_shell_command(command: str) -> subprocess.CompletedProcess:
    """
    Runs `command` through the system shell and waits for it to finish.

    There is no timeout: a hung command blocks the caller.

    :raises OSError: If the shell cannot be started.
    """
    log.debug(f"Running shell command: {command}")
    result = subprocess.run(
        command, shell=True, stdin=subprocess.DEVNULL, capture_output=True, text=True
    )
    if result.stderr:
        log.debug(f"Command '{command}' wrote to stderr: {result.stderr.strip()}")
    return result
