"""Write encoded export artifacts to local files."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

from .serializers import EncodedArtifact

logger = logging.getLogger(__name__)


@dataclass
class WriteReport:
    """Paths that were written and artifacts that could not be."""

    written: list[Path] = field(default_factory=list)
    failed: list[tuple[str, str]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed


def _ensure_secure_directory(directory: Path) -> None:
    """Create the directory and set restrictive permissions when possible."""

    directory.mkdir(parents=True, exist_ok=True)
    try:
        os.chmod(directory, 0o700)
    except (NotImplementedError, PermissionError):  # pragma: no cover - platform specific
        pass


def write_artifact(artifact: EncodedArtifact, output_dir: Path) -> Path:
    """Write one artifact into ``output_dir`` and return its path."""

    out_dir = output_dir if isinstance(output_dir, Path) else Path(output_dir)
    _ensure_secure_directory(out_dir)
    path = out_dir / artifact.filename
    path.write_bytes(artifact.content)
    return path


def write_artifacts(artifacts: Iterable[EncodedArtifact], output_dir: Path) -> WriteReport:
    """Write each artifact independently; earlier files stay if a later one fails."""

    report = WriteReport()
    for artifact in artifacts:
        try:
            path = write_artifact(artifact, output_dir)
        except OSError as exc:
            logger.error(
                "Failed to write export file",
                extra={"artifact": artifact.filename, "error": str(exc)},
            )
            report.failed.append((artifact.filename, str(exc)))
            continue
        logger.info("Export file written", extra={"path": str(path), "bytes": len(artifact.content)})
        report.written.append(path)
    return report


__all__ = ["WriteReport", "write_artifact", "write_artifacts"]
