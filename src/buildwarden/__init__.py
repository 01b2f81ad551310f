from .errors import BuildWardenError, ConfigurationMismatch, ArtifactExportFailure, PropertyFileError
from .properties import PropertyFile
from .config.settings import WorkspaceSettings
from .environment import BuildEnvironment
from .checks.consistency import check_property_consistency, check_daemon_args
from .report import ReportArtifact, ArtifactKind, ExportedArtifact, ReportPackager, TaskOutcome
from .workspace import BuildWorkspace
