from .artifact import ArtifactKind, ReportArtifact, ExportedArtifact
from .packager import ReportPackager
from .publisher import TaskOutcome, load_task_outcomes, publish_failed_reports
