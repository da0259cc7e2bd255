"""Collect generated source and write it to its destination."""

import logging
import shutil
import subprocess
from collections.abc import Iterable
from pathlib import Path

logger = logging.getLogger(__name__)


class EmissionError(RuntimeError):
    """Raised when the output cannot be written."""


class DestinationExistsError(EmissionError):
    """Raised instead of overwriting an existing output."""


class Emitter:
    """Accumulates generated chunks in order and writes them once."""

    def __init__(self, destination: str | Path, *, overwrite: bool = True) -> None:
        self.destination = Path(destination)
        self.overwrite = overwrite
        self._chunks: list[str] = []

    def add(self, chunk: str) -> None:
        self._chunks.append(chunk)

    def extend(self, chunks: Iterable[str]) -> None:
        self._chunks.extend(chunks)

    @property
    def text(self) -> str:
        return "".join(self._chunks)

    def write(self) -> Path:
        """Write everything collected so far.

        Raises DestinationExistsError, leaving the file untouched, when the
        destination exists and overwriting was not requested.
        """
        mode = "w" if self.overwrite else "x"
        try:
            self.destination.parent.mkdir(parents=True, exist_ok=True)
            with self.destination.open(mode, encoding="utf-8") as f:
                f.write(self.text)
        except FileExistsError as exc:
            raise DestinationExistsError(
                f"{self.destination} exists, use --overwrite to replace it"
            ) from exc
        except OSError as exc:
            raise EmissionError(f"Cannot write {self.destination}: {exc}") from exc

        logger.info("Wrote %s", self.destination)
        return self.destination

    def format(self, command: list[str]) -> bool:
        """Run an external formatter over the written file.

        Failures are logged; the unformatted output stays in place.
        """
        executable = shutil.which(command[0])
        if executable is None:
            logger.warning(
                "%s not found, run \"%s %s\" yourself",
                command[0],
                " ".join(command),
                self.destination,
            )
            return False

        try:
            result = subprocess.run(
                [executable, *command[1:], str(self.destination)],
                check=False,
                capture_output=True,
                text=True,
            )
        except OSError as exc:
            logger.warning("Cannot run %s: %s", command[0], exc)
            return False

        if result.returncode != 0:
            logger.warning(
                "%s failed on %s: %s",
                command[0],
                self.destination,
                result.stderr.strip() or f"exit status {result.returncode}",
            )
            return False

        logger.debug("Formatted %s with %s", self.destination, command[0])
        return True
