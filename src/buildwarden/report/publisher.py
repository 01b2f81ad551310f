"""Export of failed task reports for CI artifact upload."""

import json
import logging
import os
from pathlib import Path
from typing import Any, Iterable, NamedTuple

from .artifact import ExportedArtifact, ReportArtifact
from .packager import ReportPackager
from ..environment import BuildEnvironment
from ..errors import ArtifactExportFailure

logger = logging.getLogger(__name__)


class TaskOutcome(NamedTuple):
    """Outcome of one reporting task of a finished build.

    Attributes:
        project: Name of the project owning the task
        report: The task's HTML report destination (directory or file)
        task: Task name, informational only
        failed: Whether the task recorded a failure
    """
    project: str
    report: Path
    task: str = ''
    failed: bool = True

    @classmethod
    def from_dict(cls, data: dict[str, Any], base_dir: Path | None = None) -> 'TaskOutcome':
        """Load an outcome from a dictionary, resolving a relative report path against base_dir.

        Raises:
            KeyError: "project" or "report" is missing
            TypeError: A field has the wrong JSON type
        """
        project = _require_type(data, 'project', str)
        report = Path(_require_type(data, 'report', str))
        task = _require_type(data, 'task', str, '')
        failed = _require_type(data, 'failed', bool, True)
        if base_dir is not None and not report.is_absolute():
            report = base_dir / report
        return cls(project, report, task, failed)

    def to_artifact(self) -> ReportArtifact:
        return ReportArtifact.from_path(self.project, self.report)


_MISSING = object()


def _require_type(data: dict[str, Any], key: str, expected: type, default: Any = _MISSING) -> Any:
    if key not in data:
        if default is _MISSING:
            raise KeyError(key)
        return default
    value = data[key]
    if not isinstance(value, expected):
        raise TypeError(f"{key!r} must be a {expected.__name__}, got {type(value).__name__}")
    return value


def load_task_outcomes(path: str | os.PathLike) -> list[TaskOutcome]:
    """Read task outcomes from a JSON file.

    The document is either a list of outcome objects or an object with an "outcomes" list.
    Each object requires "project" and "report"; "task" defaults to "" and "failed" to true.
    Relative report paths are resolved against the directory containing the file.

    Raises:
        FileNotFoundError: The file does not exist
        ValueError: The file is not valid JSON or does not have the expected structure
    """
    path = Path(path)
    with open(path, 'r', encoding='utf-8') as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid task outcomes file {path}: {e}") from e

    if isinstance(data, dict):
        data = data.get('outcomes')
    if not isinstance(data, list):
        raise ValueError(f"Invalid task outcomes file {path}: expected a list of outcomes")

    outcomes = []
    for index, entry in enumerate(data):
        if not isinstance(entry, dict):
            raise ValueError(f"Invalid task outcomes file {path}: entry {index} is not an object")
        try:
            outcomes.append(TaskOutcome.from_dict(entry, path.parent))
        except KeyError as e:
            raise ValueError(f"Invalid task outcomes file {path}: entry {index} lacks {e.args[0]!r}") from e
        except TypeError as e:
            raise ValueError(f"Invalid task outcomes file {path}: entry {index}: {e}") from e
    return outcomes


def publish_failed_reports(
        outcomes: Iterable[TaskOutcome],
        packager: ReportPackager,
        environment: BuildEnvironment) -> list[ExportedArtifact]:
    """Export the report of every failed task so CI can upload it.

    Nothing happens outside a CI execution context. Reports that were never written are
    skipped. A failed export does not prevent the remaining reports from being exported; all
    failures are raised together once every outcome has been handled.

    Args:
        outcomes: Outcomes of the build's reporting tasks
        packager: Packager writing into the shared destination
        environment: Detected build environment

    Returns:
        The exported artifacts, in outcome order

    Raises:
        ExceptionGroup: One ArtifactExportFailure per report that could not be exported
    """
    if not environment.is_ci:
        logger.info("Not running on CI, skipping report publishing")
        return []

    exported: list[ExportedArtifact] = []
    failures: list[ArtifactExportFailure] = []

    for outcome in outcomes:
        if not outcome.failed:
            continue

        if not outcome.report.exists():
            logger.warning("Report %s of %s:%s does not exist, nothing to publish",
                           outcome.report, outcome.project, outcome.task)
            continue

        try:
            exported.append(packager.package(outcome.to_artifact()))
        except ArtifactExportFailure as e:
            failures.append(e)

    if failures:
        raise ExceptionGroup(f"Failed to publish {len(failures)} report(s)", failures)

    return exported
