import os
from typing import Mapping, NamedTuple

from .config.settings import (
    WorkspaceSettings,
    SETTING_CI_MARKER,
    SETTING_CODE_QUALITY_ENABLED,
    DEFAULT_CI_MARKER,
)


class BuildEnvironment(NamedTuple):
    """Facts about the current build execution that steer which steps run.

    Attributes:
        is_ci: The build runs on a continuous-integration server
        code_quality_requested: Code quality checks were explicitly enabled for this run
    """
    is_ci: bool
    code_quality_requested: bool = False

    @property
    def code_quality_enabled(self) -> bool:
        """Code quality checks run on developer machines, and on CI only when requested."""
        return not self.is_ci or self.code_quality_requested

    @classmethod
    def detect(cls, settings: WorkspaceSettings | None = None, environ: Mapping[str, str] | None = None,
               enable_code_quality: bool = False) -> 'BuildEnvironment':
        """Detect the environment from process environment variables and settings.

        CI is detected by the presence of the marker variable (CI unless overridden by the
        ci.marker setting); its value is not inspected.

        Args:
            settings: Workspace settings, or None for defaults
            environ: Environment variables, defaults to os.environ
            enable_code_quality: Force code quality checks on regardless of settings
        """
        if environ is None:
            environ = os.environ

        marker = DEFAULT_CI_MARKER
        requested = enable_code_quality
        if settings is not None:
            marker = str(settings.get(SETTING_CI_MARKER, DEFAULT_CI_MARKER))
            requested = requested or settings.get_flag(SETTING_CODE_QUALITY_ENABLED)

        return cls(is_ci=marker in environ, code_quality_requested=requested)
