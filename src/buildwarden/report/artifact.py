import os
from enum import StrEnum
from pathlib import Path
from typing import NamedTuple


class ArtifactKind(StrEnum):
    DIRECTORY = 'directory'
    FILE = 'file'


class ReportArtifact(NamedTuple):
    """A report produced by a build task, eligible for export on CI.

    Attributes:
        path: Report directory or file
        project_name: Name of the project whose task produced the report
        kind: Whether the report is a directory tree or a single file
    """
    path: Path
    project_name: str
    kind: ArtifactKind

    @classmethod
    def from_path(cls, project_name: str, path: str | os.PathLike) -> 'ReportArtifact':
        """Create an artifact, deciding its kind from the filesystem.

        Anything that is not a directory (including a path that does not exist yet) is
        treated as a file.
        """
        path = Path(path)
        kind = ArtifactKind.DIRECTORY if path.is_dir() else ArtifactKind.FILE
        return cls(path, project_name, kind)

    @property
    def export_name(self) -> str:
        """File name of the exported artifact in the shared destination.

        Directories become report-<project>-<dir>.zip. Files become
        report-<project>-<parent dir>-<file>, since report files of different tasks often share
        a name such as index.html.
        """
        if self.kind == ArtifactKind.DIRECTORY:
            return f"report-{self.project_name}-{self.path.name}.zip"
        return f"report-{self.project_name}-{self.path.parent.name}-{self.path.name}"


class ExportedArtifact(NamedTuple):
    """Result of exporting a report artifact.

    Attributes:
        artifact: The exported report
        path: File written to the shared destination
        fingerprint: Hex MurmurHash3 x64 128-bit digest of the written file
    """
    artifact: ReportArtifact
    path: Path
    fingerprint: str
