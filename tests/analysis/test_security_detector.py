"""Tests for SecurityDetector."""

import pytest

from sourcescope.analysis.detectors import SecurityDetector
from sourcescope.analysis.detectors.security import is_redos_prone
from sourcescope.models import IssueType, Severity


@pytest.fixture
def run(detect):
    detector = SecurityDetector()
    return lambda code, filename="snippet.ts": detect(detector, code, filename)


def _codes(issues):
    return [issue.code for issue in issues]


class TestEval:
    def test_eval_call(self, run):
        issues = run("eval(payload);\n")
        assert _codes(issues) == ["DANGEROUS_EVAL"]
        assert issues[0].severity == Severity.ERROR
        assert issues[0].type == IssueType.SECURITY

    def test_method_named_eval_is_not_global_eval(self, run):
        assert _codes(run("sandbox.eval(payload);\n")) == []


class TestSqlInjection:
    """Query calls built from request-like data."""

    def test_request_params_in_query(self, run):
        code = "db.query('SELECT * FROM users WHERE id = ' + req.params.id);\n"
        assert _codes(run(code)) == ["SQL_INJECTION"]

    def test_user_identifier_in_query(self, run):
        assert _codes(run("execute(sql, [username]);\n")) == ["SQL_INJECTION"]

    def test_constant_query_is_safe(self, run):
        assert _codes(run("db.query('SELECT 1');\n")) == []

    def test_receiver_chain_is_inspected(self, run):
        assert _codes(run("req.body.db.raw(sql);\n")) == ["SQL_INJECTION"]


class TestCommandInjection:
    """Process spawning with request-like data."""

    def test_exec_with_request_body(self, run):
        assert _codes(run("exec('ls ' + req.body.dir);\n")) == ["COMMAND_INJECTION"]

    def test_exec_sync_method_case_insensitive(self, run):
        assert _codes(run("child.execSync(req.query.cmd);\n")) == ["COMMAND_INJECTION"]

    def test_bare_user_identifier_argument(self, run):
        assert _codes(run("spawn(token);\n")) == ["COMMAND_INJECTION"]

    def test_constant_command_is_safe(self, run):
        assert _codes(run("exec('git status');\n")) == []


class TestHardcodedSecret:
    """Secret-looking names bound to long string literals."""

    def test_password_literal(self, run):
        issues = run("const password = 'hunter2hunter2';\n")
        assert _codes(issues) == ["HARDCODED_SECRET"]
        assert (issues[0].line, issues[0].column) == (1, 7)

    def test_api_key_literal(self, run):
        assert _codes(run("const apiKey = \"sk_live_1234567890\";\n")) == ["HARDCODED_SECRET"]

    def test_short_placeholder(self, run):
        assert _codes(run("const password = 'changeme';\n")) == []

    def test_environment_lookup(self, run):
        assert _codes(run("const secret = process.env.SECRET;\n")) == []

    def test_unrelated_name(self, run):
        assert _codes(run("const greeting = 'hello there friend';\n")) == []


class TestRedos:
    """RegExp constructors with nested or repeated quantifiers."""

    def test_nested_quantifier(self, run):
        issues = run("const re = new RegExp('(a+)+$');\n")
        assert _codes(issues) == ["REDOS_VULNERABILITY"]
        assert issues[0].severity == Severity.WARNING

    def test_simple_pattern(self, run):
        assert _codes(run("const re = new RegExp('^abc$');\n")) == []

    def test_non_literal_pattern(self, run):
        assert _codes(run("const re = new RegExp(source);\n")) == []

    def test_pattern_helper(self):
        assert is_redos_prone("(x+x+)+y")
        assert is_redos_prone("a{2}{3}")
        assert not is_redos_prone("^[a-z]$")


class TestXss:
    """Writes to innerHTML."""

    def test_inner_html_assignment(self, run):
        issues = run("el.innerHTML = html;\n")
        assert _codes(issues) == ["XSS_RISK"]
        assert issues[0].severity == Severity.WARNING

    def test_inner_html_append(self, run):
        assert _codes(run("el.innerHTML += html;\n")) == ["XSS_RISK"]

    def test_text_content_is_safe(self, run):
        assert _codes(run("el.textContent = html;\n")) == []
