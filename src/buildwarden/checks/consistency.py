import logging
import os
from pathlib import Path
from typing import Sequence

from ..config.settings import (
    WorkspaceSettings,
    SETTING_CONSISTENCY_FILES,
    SETTING_CONSISTENCY_PROPERTY,
    DEFAULT_CONSISTENCY_FILES,
    DEFAULT_CONSISTENCY_PROPERTY,
)
from ..errors import ConfigurationMismatch
from ..properties import PropertyFile

logger = logging.getLogger(__name__)


def check_property_consistency(property_files: Sequence[str | os.PathLike], key: str) -> str | None:
    """Verify that every property file assigns the same value to key.

    An absent key counts as a value of its own: files that all lack the key agree, while a file
    that lacks it disagrees with a file that defines it.

    Args:
        property_files: Property files to compare
        key: Property key that must be identical across the files

    Returns:
        The agreed value, or None when no file defines the key

    Raises:
        ConfigurationMismatch: More than one distinct value was observed
        FileNotFoundError: A property file does not exist
    """
    paths = [Path(p) for p in property_files]
    observed = [PropertyFile.load(path).get(key) for path in paths]

    # dict preserves first-seen order, a set would not
    distinct = list(dict.fromkeys(observed))
    if len(distinct) > 1:
        raise ConfigurationMismatch(paths, key, distinct)

    value = distinct[0] if distinct else None
    logger.info("Property %s is consistent across %d files: %r", key, len(paths), value)
    return value


def check_daemon_args(build_dir: Path, settings: WorkspaceSettings | None = None) -> str | None:
    """Verify that the build directory and its parent build use the same daemon JVM arguments.

    Gradle spawns a separate daemon for an included build whose org.gradle.jvmargs differ from
    the root build's, which doubles memory use on CI and in IDEs.

    Args:
        build_dir: The included build directory; its gradle.properties is compared with the one
                   of its parent directory unless consistency.files says otherwise
        settings: Workspace settings, or None for defaults

    Returns:
        The agreed value, or None when neither file defines it

    Raises:
        ConfigurationMismatch: The files disagree
    """
    key = DEFAULT_CONSISTENCY_PROPERTY
    files: Sequence[str] = DEFAULT_CONSISTENCY_FILES
    if settings is not None:
        key = settings.get(SETTING_CONSISTENCY_PROPERTY, DEFAULT_CONSISTENCY_PROPERTY)
        files = settings.get(SETTING_CONSISTENCY_FILES, DEFAULT_CONSISTENCY_FILES)

    return check_property_consistency([build_dir / f for f in files], key)
