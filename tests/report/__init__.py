"""Tests for report module.

Test Files and Coverage:
========================

| Test File                | Test Classes         | Tested Constructs                 | Tested Functionalities                   |
|--------------------------|----------------------|-----------------------------------|------------------------------------------|
| test_classification.py   | ClassifyTest         | classify(), ClassificationResult  | Partitions, status, ordering             |
| test_result_store.py     | ValidateResultTest   | ValidateResult                    | JSON field names, round trip             |
|                          | ResultStoreTest      | ResultStore                       | Write, overwrite, persist failure        |
| test_console.py          | ConsoleReporterTest  | ConsoleReporter                   | Phase lines, listings, color handling    |
"""
