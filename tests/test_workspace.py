import logging
import tempfile
import unittest
from pathlib import Path

from buildwarden import BuildWorkspace, ConfigurationMismatch, TaskOutcome

from .test_utils import create_build_layout, create_report_tree

KEY = 'org.gradle.jvmargs'


class BuildWorkspaceTest(unittest.TestCase):

    def setUp(self):
        self._tmpdir = tempfile.TemporaryDirectory()
        self.root = Path(self._tmpdir.name)

    def tearDown(self):
        self._tmpdir.cleanup()

    def _write_settings(self, build_dir: Path, text: str):
        (build_dir / '.buildwarden').mkdir(exist_ok=True)
        (build_dir / '.buildwarden' / 'settings.toml').write_text(text)

    def test_missing_build_directory(self):
        with self.assertRaises(FileNotFoundError):
            BuildWorkspace(self.root / 'buildSrc', environ={})

    def test_build_directory_is_file(self):
        (self.root / 'buildSrc').write_text('')
        with self.assertRaises(NotADirectoryError):
            BuildWorkspace(self.root / 'buildSrc', environ={})

    def test_check_daemon_args(self):
        build_dir = create_build_layout(self.root, f'{KEY}=-Xmx2g\n', f'{KEY}=-Xmx2g\n')
        self.assertEqual('-Xmx2g', BuildWorkspace(build_dir, environ={}).check_daemon_args())

    def test_check_daemon_args_mismatch(self):
        build_dir = create_build_layout(self.root, f'{KEY}=-Xmx2g\n', f'{KEY}=-Xmx4g\n')
        with self.assertRaises(ConfigurationMismatch):
            BuildWorkspace(build_dir, environ={}).check_daemon_args()

    def test_report_destination_default_and_setting(self):
        build_dir = create_build_layout(self.root, '', '')
        self.assertEqual(build_dir / 'build', BuildWorkspace(build_dir, environ={}).report_destination)

        self._write_settings(build_dir, '[reports]\ndestination = "../build/ci-reports"\n')
        self.assertEqual(build_dir / '../build/ci-reports', BuildWorkspace(build_dir, environ={}).report_destination)

    def test_publish_failed_reports_on_ci(self):
        build_dir = create_build_layout(self.root, '', '')
        report_dir = build_dir / 'plugins' / 'build' / 'reports' / 'tests' / 'test'
        create_report_tree(report_dir)
        workspace = BuildWorkspace(build_dir, environ={'CI': 'true'})

        exported = workspace.publish_failed_reports([TaskOutcome('plugins', report_dir, 'test')])

        self.assertEqual([build_dir / 'build' / 'report-plugins-test.zip'], [e.path for e in exported])

    def test_publish_failed_reports_locally(self):
        build_dir = create_build_layout(self.root, '', '')
        report_dir = build_dir / 'plugins' / 'build' / 'reports' / 'tests' / 'test'
        create_report_tree(report_dir)
        workspace = BuildWorkspace(build_dir, environ={})

        self.assertEqual([], workspace.publish_failed_reports([TaskOutcome('plugins', report_dir, 'test')]))
        self.assertFalse((build_dir / 'build' / 'report-plugins-test.zip').exists())

    def test_conventions_for_all_subprojects(self):
        build_dir = create_build_layout(self.root, '', '')
        (build_dir / 'plugins' / 'src' / 'main' / 'kotlin').mkdir(parents=True)
        (build_dir / 'plugins' / 'build.gradle.kts').write_text('')
        (build_dir / 'testing' / 'src' / 'main' / 'groovy').mkdir(parents=True)
        (build_dir / 'testing' / 'build.gradle.kts').write_text('')

        conventions = BuildWorkspace(build_dir, environ={}).conventions()

        self.assertEqual([('plugins', ('kotlin',)), ('testing', ('groovy',))],
                         [(c.name, c.languages) for c in conventions])

    def test_configure_logging_from_settings(self):
        build_dir = create_build_layout(self.root, '', '')
        self._write_settings(build_dir, '[logging]\npath = "buildwarden.log"\n')
        workspace = BuildWorkspace(build_dir, environ={})

        saved_handlers = logging.root.handlers[:]
        saved_level = logging.root.level
        try:
            logging.root.setLevel(logging.INFO)
            self.assertTrue(workspace.configure_logging_from_settings())
            self.assertEqual(logging.INFO, logging.root.level)
            logging.getLogger('buildwarden.test').info("configured")
            for handler in logging.root.handlers:
                handler.flush()
            self.assertIn('configured', (build_dir / 'buildwarden.log').read_text())
        finally:
            for handler in logging.root.handlers[:]:
                logging.root.removeHandler(handler)
                handler.close()
            for handler in saved_handlers:
                logging.root.addHandler(handler)
            logging.root.setLevel(saved_level)

    def test_configure_logging_without_setting(self):
        build_dir = create_build_layout(self.root, '', '')
        self.assertFalse(BuildWorkspace(build_dir, environ={}).configure_logging_from_settings())


if __name__ == '__main__':
    unittest.main()
