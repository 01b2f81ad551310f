"""Tests for ReportArtifact."""
import tempfile
import unittest
from pathlib import Path

from buildwarden.report.artifact import ArtifactKind, ReportArtifact


class ReportArtifactTest(unittest.TestCase):

    def test_from_path_detects_directory(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            report_dir = Path(tmpdir) / 'build' / 'reports' / 'tests' / 'test'
            report_dir.mkdir(parents=True)

            artifact = ReportArtifact.from_path('core', report_dir)

            self.assertEqual(ArtifactKind.DIRECTORY, artifact.kind)
            self.assertEqual('core', artifact.project_name)
            self.assertEqual(report_dir, artifact.path)

    def test_from_path_detects_file(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            report_file = Path(tmpdir) / 'report.html'
            report_file.write_text('<html/>')

            artifact = ReportArtifact.from_path('core', str(report_file))

            self.assertEqual(ArtifactKind.FILE, artifact.kind)
            self.assertEqual(report_file, artifact.path)

    def test_directory_export_name(self):
        artifact = ReportArtifact(Path('core/build/reports/tests/test'), 'core', ArtifactKind.DIRECTORY)
        self.assertEqual('report-core-test.zip', artifact.export_name)

    def test_file_export_name_includes_parent_directory(self):
        artifact = ReportArtifact(Path('build/reports/tests/index.html'), 'core', ArtifactKind.FILE)
        self.assertEqual('report-core-tests-index.html', artifact.export_name)

    def test_file_export_names_do_not_collide_across_tasks(self):
        checkstyle = ReportArtifact(Path('build/reports/checkstyle/main.html'), 'core', ArtifactKind.FILE)
        codenarc = ReportArtifact(Path('build/reports/codenarc/main.html'), 'core', ArtifactKind.FILE)
        other_project = ReportArtifact(Path('build/reports/checkstyle/main.html'), 'cli', ArtifactKind.FILE)

        names = {checkstyle.export_name, codenarc.export_name, other_project.export_name}
        self.assertEqual(3, len(names))

    def test_kind_is_string_enum(self):
        self.assertEqual('directory', ArtifactKind.DIRECTORY)
        self.assertEqual('file', str(ArtifactKind.FILE))


if __name__ == '__main__':
    unittest.main()
