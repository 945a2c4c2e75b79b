import os
import shutil
import subprocess
from pathlib import Path
from typing import List, Optional, Sequence, Union

from ..exceptions import AIBridgeError
from ..logger import logger

STDERR_TAIL_CHARS = 500


class CommandError(AIBridgeError):
    """An external analysis tool exited with a non-zero status."""
    def __init__(self, cmd: Sequence, returncode: int, stdout: str, stderr: str):
        self.cmd = [str(x) for x in cmd]
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        tool = Path(self.cmd[0]).name if self.cmd else "tool"
        super().__init__(
            f"{tool} exited with status {returncode}",
            suggestion=(stderr or "").strip()[-STDERR_TAIL_CHARS:] or None,
        )


def executable_available(executable: Union[str, Path]) -> bool:
    """True if ``executable`` is a runnable file or resolvable on PATH."""
    if not executable:
        return False
    path = Path(executable)
    if path.is_file() and os.access(path, os.X_OK):
        return True
    return shutil.which(str(executable)) is not None


def run_command(cmd: Sequence, timeout: Optional[float] = None) -> subprocess.CompletedProcess:
    """
    Run a bridge executable and capture its text output.

    Raises:
        CommandError: Non-zero exit status
        subprocess.TimeoutExpired: The tool ran longer than ``timeout``
        OSError: The executable could not be started
    """
    args: List[str] = [str(x) for x in cmd]
    cmd_str = " ".join(args)
    logger.debug(f"Running command: {cmd_str}")

    try:
        result = subprocess.run(args, timeout=timeout, capture_output=True, text=True)
    except subprocess.TimeoutExpired:
        logger.error(f"Command timed out after {timeout}s: {cmd_str}")
        raise
    except OSError as e:
        logger.error(f"Could not start {args[0]}: {e}")
        raise

    if result.stderr:
        logger.debug(f"{Path(args[0]).name} stderr: {result.stderr.strip()}")

    if result.returncode != 0:
        raise CommandError(args, result.returncode, result.stdout, result.stderr)

    return result
