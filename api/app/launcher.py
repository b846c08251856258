"""Run the external backend as a child process.

The backend-as-a-service ships its own watch script; this wrapper starts it
with the current environment and inherited stdio and hands its exit code back
to the caller.
"""

from __future__ import annotations

import logging
import os
import subprocess
from pathlib import Path
from typing import Mapping, Sequence

from config import get_settings

logger = logging.getLogger("api.launcher")


def launch_backend(
    command: Sequence[str] | None = None,
    env: Mapping[str, str] | None = None,
    cwd: str | Path | None = None,
) -> int:
    """Start ``command`` and block until it exits.

    ``command`` defaults to the configured ``backend_command``. Returns the
    child's exit code, or ``1`` when the executable cannot be started.
    """

    argv = list(command) if command is not None else get_settings().backend_argv
    if not argv:
        logger.error("no backend command configured")
        return 1

    logger.info("starting backend: %s", " ".join(argv))
    try:
        proc = subprocess.Popen(argv, cwd=cwd, env=dict(env or os.environ))
    except (FileNotFoundError, PermissionError) as exc:
        logger.error("failed to start backend %s: %s", argv[0], exc)
        return 1

    try:
        code = proc.wait()
    except KeyboardInterrupt:
        logger.info("stopping backend (pid %s)", proc.pid)
        proc.terminate()
        try:
            code = proc.wait(timeout=10)
        except subprocess.TimeoutExpired:
            proc.kill()
            code = proc.wait()

    logger.info("backend exited with code %s", code)
    return code
