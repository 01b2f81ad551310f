"""Tests for properties module.

Test Files and Coverage:
========================

| Test File                  | Test Classes                 | Tested Constructs                          | Tested Functionalities              |
|----------------------------|------------------------------|--------------------------------------------|-------------------------------------|
| test_property_file.py      | PropertyFileParseTest        | PropertyFile.parse()                       | Separators, comments, continuations |
|                            | PropertyFileLoadTest         | PropertyFile.load()                        | Encoding, line endings, errors      |
"""
