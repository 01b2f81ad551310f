from .settings import WorkspaceSettings
from .path import find_build_directory
