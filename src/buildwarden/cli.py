import argparse
import logging
import os
import sys
import textwrap
from functools import wraps
from pathlib import Path

from . import BuildWorkspace, BuildWardenError, PropertyFile
from .config.path import find_build_directory
from .report.publisher import TaskOutcome, load_task_outcomes
from .utils.profiling import profile_main

BUILD_DIR_ENV = 'BUILDWARDEN_BUILD_DIR'


def needs_workspace(func):
    """Decorator for commands that need the build workspace.

    The decorated function will receive (workspace, output, args).
    The wrapper function takes (load_workspace_fn, output, args) and calls load_workspace_fn.
    """
    @wraps(func)
    def wrapper(load_workspace_fn, output, args):
        return func(load_workspace_fn(), output, args)
    return wrapper


def no_workspace(func):
    """Decorator for commands that don't need the build workspace.

    The decorated function will receive (output, args).
    """
    @wraps(func)
    def wrapper(load_workspace_fn, output, args):
        return func(output, args)
    return wrapper


def _report_entry(value: str) -> TaskOutcome:
    project, separator, path = value.partition(':')
    if not separator or not project or not path:
        raise argparse.ArgumentTypeError(f"expected PROJECT:PATH, got {value!r}")
    return TaskOutcome(project, Path(path))


@profile_main
def buildwarden_main(argv: list[str] | None = None):
    parser = argparse.ArgumentParser(
        prog='buildwarden',
        description='Keep an included Gradle build consistent with its parent build and export failed task '
                    'reports for CI artifact upload.',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent('''
            Examples:
              buildwarden check-daemon-args
              buildwarden publish-reports --outcomes build/task-outcomes.json
            ''').strip()
    )
    parser.add_argument(
        '--build-dir',
        metavar='PATH',
        help='Path to the included build directory (typically buildSrc). If not provided, uses BUILDWARDEN_BUILD_DIR '
             'environment variable, searches upward from current directory for a .buildwarden directory, or uses '
             'the current directory.')
    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Enable verbose output for detailed information during operations')
    parser.add_argument(
        '--log-file',
        metavar='PATH',
        help='Path to log file for operation logging. If not provided, uses logging.path from workspace settings or no '
             'logging.')
    parser.add_argument(
        '--log-level',
        metavar='LEVEL',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
        help='Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL). Defaults to INFO when --log-file is provided.')
    parser.add_argument(
        '--enable-code-quality',
        action='store_true',
        help='Enable code quality checks even when running on CI')
    subparsers = parser.add_subparsers(
        dest='command',
        title='Commands',
        description='Available build steps',
        help='Use "buildwarden COMMAND --help" for command-specific help',
        required=True
    )

    parser_check = subparsers.add_parser(
        'check-daemon-args',
        help='Verify both builds configure the same daemon JVM arguments',
        description='Compares org.gradle.jvmargs in the gradle.properties of the build directory and of its parent '
                    'directory. Different values cause two Gradle daemons to be spawned on CI and in IDEs. '
                    'Succeeds silently when the values agree (including when neither file sets the property).')
    parser_check.set_defaults(method=_check_daemon_args)

    parser_publish = subparsers.add_parser(
        'publish-reports',
        help='Export reports of failed tasks for CI artifact upload',
        description='Packages the report of every failed reporting task into the shared report destination: report '
                    'directories are zipped as report-PROJECT-DIR.zip and report files are copied as '
                    'report-PROJECT-PARENT-FILE. Does nothing unless running on CI.',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent('''
            Examples:
              buildwarden publish-reports core:core/build/reports/tests/test
              buildwarden publish-reports --outcomes build/task-outcomes.json

            The outcomes file is a JSON list of objects with "project", "report",
            and optionally "task" and "failed" (default true).
            ''').strip())
    parser_publish.add_argument(
        'reports',
        nargs='*',
        metavar='PROJECT:PATH',
        type=_report_entry,
        help='Report of a failed task, given as the owning project name and the report path')
    parser_publish.add_argument(
        '--outcomes',
        metavar='FILE',
        help='JSON file listing task outcomes; reports of failed tasks are published')
    parser_publish.set_defaults(method=_publish_reports)

    parser_conventions = subparsers.add_parser(
        'conventions',
        help='Show the language conventions applied to subprojects',
        description='Detects Groovy and Kotlin sources in each subproject and shows the compiler conventions that '
                    'apply, together with whether code quality checks are enabled for this run.')
    parser_conventions.add_argument(
        'projects',
        nargs='*',
        metavar='PROJECT_DIR',
        help='Project directories to inspect (default: every subproject of the build directory)')
    parser_conventions.set_defaults(method=_conventions)

    parser_inspect = subparsers.add_parser(
        'inspect-properties',
        help='Show properties as Gradle reads them',
        description='Parses property files with the same rules Gradle uses and prints each key and value.')
    parser_inspect.add_argument(
        'files',
        nargs='+',
        metavar='FILE',
        help='Property files to parse')
    parser_inspect.add_argument(
        '--key',
        metavar='KEY',
        help='Only show this key')
    parser_inspect.set_defaults(method=_inspect_properties)

    args = parser.parse_args(argv)

    if args.log_file:
        log_level = args.log_level if args.log_level is not None else 'INFO'
        logging.basicConfig(
            filename=args.log_file,
            level=getattr(logging, log_level),
            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )

    build_dir = args.build_dir
    if build_dir is None:
        build_dir = os.environ.get(BUILD_DIR_ENV)

    def load_workspace():
        if build_dir is None:
            working_directory = Path.cwd()
            workspace = BuildWorkspace(find_build_directory(working_directory) or working_directory,
                                       enable_code_quality=args.enable_code_quality)
        else:
            workspace = BuildWorkspace(build_dir, enable_code_quality=args.enable_code_quality)

        if not args.log_file:
            workspace.configure_logging_from_settings()
        return workspace

    try:
        args.method(load_workspace, sys.stdout, args)
    except BuildWardenError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except ExceptionGroup as group:
        for e in group.exceptions:
            print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


@needs_workspace
def _check_daemon_args(workspace: BuildWorkspace, output, args):
    value = workspace.check_daemon_args()
    if args.verbose:
        print(f"Daemon JVM arguments are consistent: {value if value is not None else '(not set)'}", file=output)


@needs_workspace
def _publish_reports(workspace: BuildWorkspace, output, args):
    outcomes = list(args.reports)
    if args.outcomes:
        outcomes.extend(load_task_outcomes(args.outcomes))

    if not workspace.environment.is_ci:
        if args.verbose:
            print("Not running on CI, no reports published", file=output)
        return

    for exported in workspace.publish_failed_reports(outcomes):
        if args.verbose:
            print(f"{exported.path}\t{exported.fingerprint}", file=output)
        else:
            print(exported.path, file=output)


@needs_workspace
def _conventions(workspace: BuildWorkspace, output, args):
    project_dirs = [Path(p) for p in args.projects] if args.projects else None

    for conventions in workspace.conventions(project_dirs):
        languages = ', '.join(conventions.languages) if conventions.languages else 'java'
        print(f"{conventions.name}: {languages} (IDE module {conventions.ide_module_name})", file=output)
        if conventions.groovy is not None:
            print(f"  groovy: encoding={conventions.groovy.encoding} fork={conventions.groovy.fork} "
                  f"args={' '.join(conventions.groovy.compiler_args)}", file=output)
        if conventions.kotlin is not None:
            print(f"  kotlin: args={' '.join(conventions.kotlin.free_compiler_args)} "
                  f"ktlint={conventions.kotlin.ktlint}", file=output)

    status = 'enabled' if workspace.environment.code_quality_enabled else 'disabled'
    print(f"Code quality checks: {status}", file=output)


@no_workspace
def _inspect_properties(output, args):
    for file in args.files:
        properties = PropertyFile.load(file)
        if len(args.files) > 1:
            print(f"# {file}", file=output)
        if args.key is not None:
            value = properties.get(args.key)
            print(f"{args.key}={value if value is not None else ''}", file=output)
        else:
            for key, value in properties.items():
                print(f"{key}={value}", file=output)


if __name__ == '__main__':
    buildwarden_main()
