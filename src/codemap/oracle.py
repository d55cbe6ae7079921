"""Generation oracle -- the external text-completion collaborator.

The oracle is synchronous: a prompt goes in, text comes out, or
:class:`OracleError` is raised. :class:`CommandOracle` runs a CLI with the
prompt on stdin, e.g. ``claude -p -``.
"""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Sequence
from pathlib import Path
from typing import Protocol, runtime_checkable

from .errors import OracleError

logger = logging.getLogger(__name__)


@runtime_checkable
class GenerationOracle(Protocol):
    def generate(self, prompt: str) -> str:
        """Return the completion for *prompt*. Raises OracleError on failure."""
        ...


class CommandOracle:
    """Oracle backed by a command that reads a prompt on stdin."""

    def __init__(
        self,
        command: Sequence[str],
        *,
        cwd: Path | None = None,
        timeout: float | None = None,
    ) -> None:
        if not command:
            raise ValueError("oracle command must not be empty")
        self.command = list(command)
        self.cwd = cwd
        self.timeout = timeout

    def generate(self, prompt: str) -> str:
        logger.debug("Calling oracle: %s", " ".join(self.command))
        try:
            result = subprocess.run(
                self.command,
                input=prompt,
                cwd=self.cwd,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except FileNotFoundError as exc:
            raise OracleError(f"oracle command not found: {self.command[0]}") from exc
        except subprocess.TimeoutExpired as exc:
            raise OracleError(f"oracle timed out after {self.timeout}s") from exc
        except OSError as exc:
            raise OracleError(f"oracle failed to start: {exc}") from exc

        if result.returncode != 0:
            raise OracleError(
                f"oracle exited with {result.returncode}: {result.stderr.strip()}"
            )
        output = result.stdout.strip()
        if not output:
            raise OracleError("oracle returned no output")
        return output

    def __repr__(self) -> str:
        return f"CommandOracle({self.command!r})"
