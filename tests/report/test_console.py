import io
import unittest

from dtsdup.report.classification import ValidateStatus
from dtsdup.report.console import LIST_PREFIX, RED, RESET, ConsoleReporter
from dtsdup.report.store import ValidateResult


class ConsoleReporterTest(unittest.TestCase):

    def test_phase_lines(self):
        stream = io.StringIO()
        reporter = ConsoleReporter(stream)

        reporter.begin("Extracting Module IDs")
        reporter.succeed()
        reporter.begin("Testing for Duplicate module definitions")
        reporter.finish_duplicate_phase(ValidateStatus.ERROR)

        self.assertEqual([
            "Extracting Module IDs ...",
            "[OK] Extracting Module IDs",
            "Testing for Duplicate module definitions ...",
            "[FAIL] New Duplicate Modules Detected",
        ], stream.getvalue().splitlines())

    def test_listings(self):
        stream = io.StringIO()
        result = ValidateResult(ValidateStatus.ERROR, 'typings', '/preq',
                                new_duplicate_modules=('DS/New',),
                                known_duplicate_modules=('DS/Known',),
                                redundant_duplicate_modules=())

        ConsoleReporter(stream).print_result(result)

        self.assertEqual([
            "New Duplicate Modules",
            f"{LIST_PREFIX}DS/New",
            "Known Duplicate Modules",
            f"{LIST_PREFIX}DS/Known",
        ], stream.getvalue().splitlines())

    def test_no_color_for_plain_streams(self):
        stream = io.StringIO()
        ConsoleReporter(stream).fail("broken")
        self.assertNotIn('\033[', stream.getvalue())

    def test_forced_color(self):
        stream = io.StringIO()
        ConsoleReporter(stream, color=True).fail("broken")
        self.assertEqual(f"{RED}[FAIL] broken{RESET}\n", stream.getvalue())

    def test_warning_phase(self):
        stream = io.StringIO()
        ConsoleReporter(stream).finish_duplicate_phase(ValidateStatus.WARNING)
        self.assertEqual("[WARN] Known Duplicate Modules Exist\n", stream.getvalue())
