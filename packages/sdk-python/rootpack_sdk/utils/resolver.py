"""
Resolver Runner
===============

Runs the external dependency resolver (Composer) as a subprocess.
rootpack never resolves constraints itself; it only prepares the root
manifest and reports whether the resolver succeeded.
"""

import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Union

from rootpack_common import Defaults, ResolverError
from rootpack_common.logger import get_logger

logger = get_logger(__name__)

SUPPORTED_COMMANDS = ("install", "update")


@dataclass
class ResolverResult:
    command: List[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def succeeded(self) -> bool:
        return self.returncode == 0


class ComposerRunner:
    """
    Invokes ``composer <command>`` in the app root.

    Args:
        root: Working directory for the resolver
        binary: Resolver executable
        timeout: Seconds before the run is aborted
    """

    def __init__(
        self,
        root: Union[str, Path],
        binary: str = Defaults.RESOLVER_BINARY,
        timeout: int = Defaults.RESOLVER_TIMEOUT,
    ):
        self.root = Path(root)
        self.binary = binary
        self.timeout = timeout

    def is_available(self) -> bool:
        return shutil.which(self.binary) is not None

    def run(self, command: str, extra_args: Optional[Sequence[str]] = None) -> ResolverResult:
        """
        Run a resolver command.

        Raises:
            ResolverError: If the command is unsupported, the binary is
                missing, the run times out or exits non-zero
        """
        if command not in SUPPORTED_COMMANDS:
            raise ResolverError(
                f"Unsupported resolver command: '{command}'. "
                f"Supported commands: {', '.join(SUPPORTED_COMMANDS)}"
            )

        args = [self.binary, command, "--no-interaction", *(extra_args or [])]
        logger.info("Running resolver", command=" ".join(args), cwd=str(self.root))
        try:
            completed = subprocess.run(
                args,
                cwd=str(self.root),
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except FileNotFoundError:
            raise ResolverError(f"Resolver not found: '{self.binary}'. Is Composer installed?")
        except subprocess.TimeoutExpired:
            raise ResolverError(f"Resolver timed out after {self.timeout}s: {' '.join(args)}")

        result = ResolverResult(
            command=args,
            returncode=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
        )
        if not result.succeeded:
            raise ResolverError(
                f"Resolver failed with exit code {result.returncode}: {result.stderr.strip()}",
                returncode=result.returncode,
            )
        return result
