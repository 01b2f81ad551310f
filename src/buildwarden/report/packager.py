import logging
import os
import shutil
import stat
import tempfile
import zipfile
from pathlib import Path
from typing import Callable

import mmh3

from .artifact import ArtifactKind, ExportedArtifact, ReportArtifact
from ..errors import ArtifactExportFailure
from ..utils.walker import FileContext, WalkPolicy, is_walk_ancestor, walk_with_policy

logger = logging.getLogger(__name__)

FINGERPRINT_CHUNK_SIZE = 1 << 20


def compute_fingerprint(path: Path) -> str:
    """Compute the 128-bit Murmur3 digest of a file's content as 32 hex digits."""
    hasher = mmh3.mmh3_x64_128()
    with open(path, 'rb') as f:
        for chunk in iter(lambda: f.read(FINGERPRINT_CHUNK_SIZE), b''):
            hasher.update(chunk)
    return f"{hasher.uintdigest():032x}"


class ReportPackager:
    """Exports report artifacts into a shared destination directory for CI upload.

    Every export produces exactly one file named after the owning project and the report
    path (see ReportArtifact.export_name), so packagers for different projects may run in
    parallel against the same destination.
    """

    def __init__(self, destination: str | os.PathLike):
        self.destination = Path(destination)

    def package(self, artifact: ReportArtifact) -> ExportedArtifact:
        """Export a report directory as a zip archive, or a report file as a renamed copy.

        An existing export with the same name is replaced. Output is written to a temporary
        file and moved into place, so a failed export leaves nothing under the final name.

        Raises:
            ArtifactExportFailure: The report could not be read or the output could not be
                                   written; the OSError is chained as __cause__
        """
        output = self.destination / artifact.export_name

        try:
            self.destination.mkdir(parents=True, exist_ok=True)
            if artifact.kind == ArtifactKind.DIRECTORY:
                self._write_atomically(output, lambda tmp: self._archive_directory(artifact.path, tmp, output))
            else:
                self._write_atomically(output, lambda tmp: shutil.copyfile(artifact.path, tmp))
            fingerprint = compute_fingerprint(output)
            if artifact.kind == ArtifactKind.FILE and compute_fingerprint(artifact.path) != fingerprint:
                raise ArtifactExportFailure(artifact, output, "copied content differs from the report")
        except OSError as e:
            logger.error("Failed to export report %s of project %s: %s", artifact.path, artifact.project_name, e)
            raise ArtifactExportFailure(artifact, output, e.strerror or str(e)) from e

        logger.info("Exported %s report %s of project %s to %s (fingerprint %s)",
                    artifact.kind, artifact.path, artifact.project_name, output, fingerprint)
        return ExportedArtifact(artifact, output, fingerprint)

    def _write_atomically(self, output: Path, writer: Callable[[Path], object]):
        fd, tmp_name = tempfile.mkstemp(prefix=f".{output.name}.", suffix='.tmp', dir=self.destination)
        os.close(fd)
        tmp_path = Path(tmp_name)
        try:
            writer(tmp_path)
            # mkstemp creates files with mode 0600
            os.chmod(tmp_path, 0o644)
            os.replace(tmp_path, output)
        except BaseException:
            tmp_path.unlink(missing_ok=True)
            raise

    @staticmethod
    def _archive_directory(source: Path, archive_path: Path, output: Path):
        # Keep the archive out of itself when the destination lies inside the report tree
        root = source.absolute()
        excluded = {p.absolute().relative_to(root) for p in (archive_path, output) if p.absolute().is_relative_to(root)}
        policy = WalkPolicy(excluded, _follow_report_symlink)

        with zipfile.ZipFile(archive_path, 'w', compression=zipfile.ZIP_DEFLATED,
                             strict_timestamps=False) as archive:
            for file_path, context in walk_with_policy(source, policy):
                relative_path = context.relative_path
                assert relative_path is not None, "Walked entries must have a relative path"
                if context.is_dir() or context.is_file():
                    archive.write(context.path, relative_path.as_posix())
                else:
                    logger.debug("Skipping %s while archiving %s: not a regular file or directory",
                                 file_path, source)


def _follow_report_symlink(file_path: Path, context: FileContext) -> FileContext | None:
    """Follow links to files and directories, except links back into a directory being walked."""
    if not context.is_symlink():
        return None
    try:
        target_stat = file_path.stat()
    except OSError:
        # Broken link
        return None
    if stat.S_ISDIR(target_stat.st_mode) and is_walk_ancestor(context, target_stat):
        logger.debug("Not following %s: it leads back into a directory that contains it", file_path)
        return None
    return context.substitute(file_path)
