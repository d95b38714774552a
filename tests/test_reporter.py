import unittest

from stylewalker.findings import AnalysisResult, Finding, Severity
from stylewalker.reporter import format_finding, format_result, format_summary, to_payload
from stylewalker.syntax import Location


def _finding(line, column, rule_id, message="m", severity=Severity.WARNING):
    return Finding(rule_id=rule_id, message=message, location=Location(line, column), severity=severity)


class ReporterTests(unittest.TestCase):
    def test_line_format(self):
        finding = _finding(3, 7, "NoVarDeclaration", "Variable 'x' is not block-scoped.")
        self.assertEqual(format_finding(finding), "3:7 [warning] NoVarDeclaration: Variable 'x' is not block-scoped.")

    def test_output_is_sorted_by_line_column_and_rule_id(self):
        result = AnalysisResult.from_findings(
            [
                _finding(10, 1, "B"),
                _finding(2, 5, "Z"),
                _finding(2, 5, "A", severity=Severity.ERROR),
                _finding(2, 1, "Q"),
                _finding(1, 9, "M"),
            ]
        )
        lines = format_result(result).splitlines()

        self.assertEqual(
            lines[:-1],
            [
                "1:9 [warning] M: m",
                "2:1 [warning] Q: m",
                "2:5 [error] A: m",
                "2:5 [warning] Z: m",
                "10:1 [warning] B: m",
            ],
        )
        self.assertEqual(lines[-1], "1 error, 4 warnings")

    def test_ties_keep_traversal_order(self):
        first = _finding(4, 2, "NamingConvention", "first")
        second = _finding(4, 2, "NamingConvention", "second")
        lines = format_result(AnalysisResult.from_findings([first, second])).splitlines()
        self.assertEqual(lines[0].rsplit(": ", 1)[1], "first")
        self.assertEqual(lines[1].rsplit(": ", 1)[1], "second")

    def test_format_does_not_depend_on_input_order(self):
        items = [_finding(5, 1, "A"), _finding(1, 1, "B"), _finding(3, 3, "C")]
        forward = format_result(AnalysisResult.from_findings(items))
        backward = format_result(AnalysisResult.from_findings(list(reversed(items))))
        self.assertEqual(forward, backward)

    def test_empty_result(self):
        self.assertEqual(format_result(AnalysisResult.from_findings([])), "0 errors, 0 warnings")

    def test_summary_pluralization(self):
        result = AnalysisResult.from_findings([_finding(1, 1, "A"), _finding(1, 1, "B", severity=Severity.ERROR)])
        self.assertEqual(format_summary(result), "1 error, 1 warning")

    def test_payload(self):
        result = AnalysisResult.from_findings([_finding(2, 1, "B"), _finding(1, 4, "A", "msg", Severity.ERROR)])
        payload = to_payload(result)

        self.assertEqual(payload["summary"], {"warning": 1, "error": 1, "total": 2})
        self.assertEqual(
            payload["findings"][0],
            {"line": 1, "column": 4, "severity": "error", "rule_id": "A", "message": "msg"},
        )
        self.assertEqual(payload["findings"][1]["rule_id"], "B")


if __name__ == "__main__":
    unittest.main()
