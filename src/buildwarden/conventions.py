"""Language conventions applied to the subprojects of an included build.

A subproject gets the Groovy conventions when it has Groovy sources and the Kotlin conventions
when it has Kotlin sources; both may apply at once.
"""
from dataclasses import dataclass, field
from pathlib import Path

BUILD_SCRIPTS = ('build.gradle', 'build.gradle.kts')
IDE_MODULE_PREFIX = 'buildSrc-'


@dataclass(frozen=True)
class GroovyConventions:
    encoding: str = 'utf-8'
    fork: bool = True
    compiler_args: tuple[str, ...] = ('-Xlint:-options', '-Xlint:-path')


@dataclass(frozen=True)
class KotlinConventions:
    free_compiler_args: tuple[str, ...] = ('-Xjsr305=strict',)
    ktlint: bool = True


@dataclass(frozen=True)
class ProjectConventions:
    """Conventions detected for one subproject."""
    name: str
    groovy: GroovyConventions | None = None
    kotlin: KotlinConventions | None = None
    languages: tuple[str, ...] = field(default=())

    @property
    def ide_module_name(self) -> str:
        return f"{IDE_MODULE_PREFIX}{self.name}"


def _has_sources(project_dir: Path, language: str) -> bool:
    return any((project_dir / 'src' / source_set / language).is_dir() for source_set in ('main', 'test'))


def detect_conventions(project_dir: Path) -> ProjectConventions:
    """Detect which language conventions apply to a project directory."""
    groovy = GroovyConventions() if _has_sources(project_dir, 'groovy') else None
    kotlin = KotlinConventions() if _has_sources(project_dir, 'kotlin') else None
    languages = tuple(name for name, conventions in (('groovy', groovy), ('kotlin', kotlin))
                      if conventions is not None)
    return ProjectConventions(project_dir.name, groovy, kotlin, languages)


def list_subprojects(build_dir: Path) -> list[Path]:
    """List the immediate child directories of build_dir that carry a build script.

    Hidden directories and the build output directory are never subprojects.
    """
    subprojects = []
    for child in sorted(build_dir.iterdir(), key=lambda p: p.name):
        if not child.is_dir() or child.name.startswith('.') or child.name == 'build':
            continue
        if any((child / script).is_file() for script in BUILD_SCRIPTS):
            subprojects.append(child)
    return subprojects
