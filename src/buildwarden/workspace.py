import logging
import os
from pathlib import Path
from typing import Iterable, Mapping

from .checks.consistency import check_daemon_args
from .config.settings import WorkspaceSettings, SETTING_LOGGING_PATH, SETTING_REPORTS_DESTINATION, \
    DEFAULT_REPORTS_DESTINATION
from .conventions import ProjectConventions, detect_conventions, list_subprojects
from .environment import BuildEnvironment
from .report.artifact import ExportedArtifact
from .report.packager import ReportPackager
from .report.publisher import TaskOutcome, publish_failed_reports


class BuildWorkspace:
    """Build-lifecycle steps for one included build directory.

    BuildWorkspace binds the build directory, its settings and the detected build environment,
    and exposes the steps the build runs:
    - check_daemon_args(): part of every build, fails on inconsistent daemon JVM arguments
    - publish_failed_reports(): after the build on CI, exports failed task reports
    - conventions(): describes the language conventions of each subproject

    The lower-level functions in checks, report and conventions take all of their inputs as
    arguments; this class only supplies them from the workspace configuration.
    """

    def __init__(self, path: str | os.PathLike, environ: Mapping[str, str] | None = None,
                 enable_code_quality: bool = False):
        """Initialize the workspace for a build directory.

        Args:
            path: Build directory (typically buildSrc)
            environ: Environment variables used for CI detection, defaults to os.environ
            enable_code_quality: Request code quality checks even on CI

        Raises:
            FileNotFoundError: Build directory does not exist
            NotADirectoryError: Build directory path is not a directory
        """
        build_dir = Path(path)
        if not build_dir.exists():
            raise FileNotFoundError(f"Build directory not found: {build_dir}")
        if not build_dir.is_dir():
            raise NotADirectoryError(f"Build directory is not a directory: {build_dir}")

        self._build_dir = build_dir
        self._settings = WorkspaceSettings(build_dir)
        self._environment = BuildEnvironment.detect(self._settings, environ, enable_code_quality)

    @property
    def build_dir(self) -> Path:
        return self._build_dir

    @property
    def settings(self) -> WorkspaceSettings:
        return self._settings

    @property
    def environment(self) -> BuildEnvironment:
        return self._environment

    @property
    def report_destination(self) -> Path:
        """Shared directory receiving exported reports, relative paths resolved against the build directory."""
        return self._build_dir / str(self._settings.get(SETTING_REPORTS_DESTINATION, DEFAULT_REPORTS_DESTINATION))

    def configure_logging_from_settings(self) -> bool:
        """Configure logging from workspace settings if a log path is specified.

        Preserves the current logging level if already configured (e.g., from CLI arguments).
        Only changes the log file path.

        Returns:
            True if logging was configured, False otherwise
        """
        log_path_setting = self._settings.get(SETTING_LOGGING_PATH)
        if log_path_setting:
            log_path = self._build_dir / str(log_path_setting)
            current_level = logging.root.level if logging.root.level != logging.NOTSET else logging.INFO

            for handler in logging.root.handlers[:]:
                logging.root.removeHandler(handler)

            logging.basicConfig(
                filename=log_path,
                level=current_level,
                format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            )
            return True
        return False

    def check_daemon_args(self) -> str | None:
        """Fail when this build and its parent build configure different daemon JVM arguments.

        Returns:
            The agreed org.gradle.jvmargs value, or None when neither build sets it

        Raises:
            ConfigurationMismatch: The property files disagree
        """
        return check_daemon_args(self._build_dir, self._settings)

    def publish_failed_reports(self, outcomes: Iterable[TaskOutcome]) -> list[ExportedArtifact]:
        """Export failed task reports to the report destination when running on CI.

        Raises:
            ExceptionGroup: One ArtifactExportFailure per report that could not be exported
        """
        return publish_failed_reports(outcomes, ReportPackager(self.report_destination), self._environment)

    def conventions(self, project_dirs: Iterable[Path] | None = None) -> list[ProjectConventions]:
        """Detect conventions for the given project directories, or for every subproject."""
        if project_dirs is None:
            project_dirs = list_subprojects(self._build_dir)
        return [detect_conventions(Path(p)) for p in project_dirs]
