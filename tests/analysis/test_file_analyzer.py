"""Tests for per-file analysis."""

import pytest

from sourcescope.analysis.detectors import Detector, SecurityDetector, default_detectors
from sourcescope.analysis.file_analyzer import FileAnalyzer, count_lines, structure_counts
from sourcescope.analysis.lint import LintAdapter, LintMessage
from sourcescope.models import IssueType, Severity
from sourcescope.scanning import ParseFailure, ParserAdapter


class _StaticLinter:
    def lint_text(self, source, file_path):
        return [LintMessage("no-undef", Severity.ERROR, "'x' is not defined.", 3, 10)]

    def close(self):
        pass


class _FailingParser:
    def parse(self, source, file_path):
        return ParseFailure(message="Unexpected token", line=2, column=5)


class _BrokenDetector(Detector):
    name = "broken"

    def visit_program(self, node, context):
        raise RuntimeError("detector bug")


class _BrokenComplexity:
    def calculate(self, root):
        raise RuntimeError("complexity bug")


@pytest.fixture
def analyzer():
    return FileAnalyzer(parser=ParserAdapter(), detectors=default_detectors())


class TestHelpers:
    def test_count_lines(self):
        assert count_lines("") == 1
        assert count_lines("a\nb") == 2
        assert count_lines("a\nb\n") == 3

    def test_structure_counts(self, parse):
        tree = parse(
            "import a from 'a';\n"
            "import { b } from 'b';\n"
            "function f() {}\n"
            "const g = () => 1;\n"
            "const h = function () {};\n"
            "class A {}\n"
        )
        assert structure_counts(tree.root_node) == (3, 1, 2)


class TestFileAnalyzer:
    """Read, parse, lint, detect and measure one file."""

    def test_clean_file_metrics(self, analyzer, make_project):
        source = "export function add(a: number, b: number) {\n  return a + b;\n}\n"
        root = make_project({"src/lib/math.ts": source})
        result = analyzer.analyze(root / "src" / "lib" / "math.ts", root)
        assert result.file_path == "src/lib/math.ts"
        assert result.issues == ()
        assert result.metrics.lines_of_code == 4
        assert result.metrics.complexity == 1
        assert result.metrics.functions == 1
        assert result.metrics.classes == 0
        assert result.metrics.imports == 0

    def test_issue_order_follows_detector_order(self, make_project):
        root = make_project(
            {"a.js": "function f() {\n  debugger;\n  return x === NaN;\n}\neval(code);\n"}
        )
        analyzer = FileAnalyzer(
            parser=ParserAdapter(),
            detectors=default_detectors(),
            lint=LintAdapter(_StaticLinter()),
        )
        result = analyzer.analyze(root / "a.js", root)
        assert [issue.type for issue in result.issues] == [
            IssueType.LINT,
            IssueType.SYNTAX,
            IssueType.LOGIC,
            IssueType.SECURITY,
        ]
        assert [issue.code for issue in result.issues] == [
            "no-undef",
            "DEBUGGER_STATEMENT",
            "NAN_COMPARISON",
            "DANGEROUS_EVAL",
        ]
        assert all(issue.file_path == "a.js" for issue in result.issues)

    def test_unreadable_file_becomes_io_error(self, analyzer, make_project):
        root = make_project({})
        result = analyzer.analyze(root / "vanished.js", root)
        assert len(result.issues) == 1
        issue = result.issues[0]
        assert issue.code == "IO_ERROR"
        assert issue.type == IssueType.IO
        assert issue.severity == Severity.ERROR
        assert (issue.line, issue.column) == (0, 0)
        assert result.metrics.lines_of_code == 0
        assert result.metrics.complexity is None

    def test_parse_failure_becomes_parse_error(self, make_project):
        root = make_project({"bad.js": "line one\nline two\n"})
        analyzer = FileAnalyzer(parser=_FailingParser(), detectors=default_detectors())
        result = analyzer.analyze(root / "bad.js", root)
        assert [issue.code for issue in result.issues] == ["PARSE_ERROR"]
        assert result.issues[0].message == "Unexpected token"
        assert (result.issues[0].line, result.issues[0].column) == (2, 5)
        assert result.metrics.lines_of_code == 3
        assert result.metrics.complexity is None
        assert result.metrics.functions is None

    def test_unparseable_file_becomes_single_parse_error(self, analyzer, make_project):
        root = make_project({"bad.js": "function (((( {{{{ ]]]] @@@ def f():\n  return\n"})
        result = analyzer.analyze(root / "bad.js", root)
        assert [issue.code for issue in result.issues] == ["PARSE_ERROR"]
        issue = result.issues[0]
        assert issue.type == IssueType.SYNTAX
        assert issue.severity == Severity.ERROR
        assert issue.line == 1
        assert result.metrics.lines_of_code == 3
        assert result.metrics.complexity is None
        assert result.metrics.imports is None

    def test_invalid_utf8_is_replaced(self, analyzer, make_project):
        root = make_project({})
        (root / "latin1.js").write_bytes(b"const s = \"caf\xe9\";\nexport { s };\n")
        result = analyzer.analyze(root / "latin1.js", root)
        assert result.metrics.lines_of_code == 3
        assert result.metrics.complexity is not None

    def test_failing_detector_is_isolated(self, make_project):
        root = make_project({"a.js": "eval(x);\n"})
        analyzer = FileAnalyzer(
            parser=ParserAdapter(), detectors=[_BrokenDetector(), SecurityDetector()]
        )
        result = analyzer.analyze(root / "a.js", root)
        assert [issue.code for issue in result.issues] == ["DANGEROUS_EVAL"]

    def test_failing_complexity_counts_zero(self, make_project):
        root = make_project({"a.js": "if (a) { b(); }\n"})
        analyzer = FileAnalyzer(
            parser=ParserAdapter(), detectors=[], complexity=_BrokenComplexity()
        )
        result = analyzer.analyze(root / "a.js", root)
        assert result.metrics.complexity == 0
        assert result.metrics.lines_of_code == 2

    def test_vue_component(self, analyzer, make_project):
        root = make_project(
            {
                "App.vue": (
                    "<template>\n"
                    "  <div v-html=\"html\"></div>\n"
                    "</template>\n"
                    "<script>\n"
                    "export default {\n"
                    "  mounted() {\n"
                    "    eval(this.code);\n"
                    "  },\n"
                    "};\n"
                    "</script>\n"
                )
            }
        )
        result = analyzer.analyze(root / "App.vue", root)
        evals = [issue for issue in result.issues if issue.code == "DANGEROUS_EVAL"]
        assert len(evals) == 1
        assert evals[0].line == 7
