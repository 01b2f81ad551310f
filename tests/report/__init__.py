"""Tests for report module.

Test Files and Coverage:
========================

| Test File                  | Test Classes                 | Tested Constructs                          | Tested Functionalities              |
|----------------------------|------------------------------|--------------------------------------------|-------------------------------------|
| test_artifact.py           | ReportArtifactTest           | ReportArtifact, ArtifactKind               | Kind detection, export names        |
| test_packager.py           | ReportPackagerTest           | ReportPackager, compute_fingerprint        | Zip contents, symlinks, failures    |
| test_publisher.py          | PublishFailedReportsTest     | publish_failed_reports()                   | CI gating, skips, failure grouping  |
|                            | LoadTaskOutcomesTest         | load_task_outcomes()                       | JSON formats, defaults, validation  |
"""
