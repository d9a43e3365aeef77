"""Report module for duplicate classification and reporting.

This package contains:
- classification: ValidateStatus, ClassificationResult and the baseline classifier
- store: ValidateResult and ResultStore for persisting results as JSON
- console: ConsoleReporter for human-readable progress and listings
"""
