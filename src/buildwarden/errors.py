"""Exceptions raised by buildwarden operations."""
from pathlib import Path
from typing import Iterable, TYPE_CHECKING

if TYPE_CHECKING:
    from .report.artifact import ReportArtifact


class BuildWardenError(Exception):
    """Base class for failures that should stop the triggering build step."""


class PropertyFileError(BuildWardenError):
    """A property file could not be parsed."""

    def __init__(self, path: Path | None, line_number: int, reason: str):
        self.path = path
        self.line_number = line_number
        self.reason = reason
        location = f"{path}:{line_number}" if path is not None else f"line {line_number}"
        super().__init__(f"{location}: {reason}")


class ConfigurationMismatch(BuildWardenError):
    """Two or more property files disagree on the value of a watched property.

    Attributes:
        paths: Property files that were compared, in comparison order
        key: The watched property key
        values: Distinct values observed, None standing for an absent key
    """

    def __init__(self, paths: Iterable[Path], key: str, values: Iterable[str | None]):
        self.paths = list(paths)
        self.key = key
        self.values = list(values)
        super().__init__(self._describe())

    def _describe(self) -> str:
        names = [str(path) for path in self.paths]
        if len(names) > 1:
            files = ', '.join(names[:-1]) + ' and ' + names[-1]
        else:
            files = ''.join(names)
        scope = 'both' if len(names) == 2 else 'all'
        return (f"{files} have different {self.key} which may cause two daemons to be spawned on CI and in IDEA. "
                f"Use the same {self.key} for {scope} builds.")


class ArtifactExportFailure(BuildWardenError):
    """A report artifact could not be written to the shared destination.

    The underlying OSError is available as __cause__.
    """

    def __init__(self, artifact: 'ReportArtifact', destination: Path, reason: str | None = None):
        self.artifact = artifact
        self.destination = destination
        message = f"Failed to export {artifact.kind} report {artifact.path} of project " \
                  f"{artifact.project_name!r} to {destination}"
        if reason:
            message += f": {reason}"
        super().__init__(message)
