"""Framework-aware linting through the ESLint executable.

A :class:`LintProfile` is picked per framework and written once to a
temporary config file: a flat ``eslint.config.mjs`` for ESLint 9 and later,
a legacy eslintrc for older releases. :class:`EslintLinter` then lints each
file's text over stdin. When ESLint is not installed (or linting is disabled) the
:class:`NullLinter` stands in and every file simply gets zero lint issues.

Linters are owned by a :class:`LinterRegistry` that the engine creates and
closes; there is no module-level cache.
"""

from __future__ import annotations

import json
import os
import re
import shutil
import subprocess
import tempfile
import threading
from dataclasses import dataclass, field
from typing import Any, Optional, Protocol

from ..config import AnalysisConfig, DEFAULT_CONFIG
from ..exceptions import LintError
from ..logging_config import get_logger
from ..models import CodeIssue, IssueType, Severity

logger = get_logger(__name__)

FALLBACK_RULE = "LINT_ERROR"

# First major release where flat config is the default
FLAT_CONFIG_MAJOR = 9

LINTED_FILES = ("**/*.{js,jsx,mjs,cjs,ts,tsx,mts,cts,vue,svelte}",)

# eslintrc preset -> (package, flat config expression, expression is an array)
FLAT_PRESETS: dict[str, tuple[str, str, bool]] = {
    "eslint:recommended": ("@eslint/js", "configs.recommended", False),
    "plugin:react/recommended": ("eslint-plugin-react", "configs.flat.recommended", False),
    "plugin:vue/vue3-recommended": ("eslint-plugin-vue", 'configs["flat/recommended"]', True),
    "plugin:@typescript-eslint/recommended": ("typescript-eslint", "configs.recommended", True),
    "plugin:svelte/recommended": ("eslint-plugin-svelte", 'configs["flat/recommended"]', True),
}


@dataclass(frozen=True)
class LintProfile:
    """Rule set plus syntax dialect options for one framework family."""

    name: str
    extends: tuple[str, ...]
    plugins: tuple[str, ...] = ()
    ecma_version: int = 2021
    jsx: bool = False

    def to_eslintrc(self) -> dict[str, Any]:
        parser_options: dict[str, Any] = {
            "ecmaVersion": self.ecma_version,
            "sourceType": "module",
        }
        if self.jsx:
            parser_options["ecmaFeatures"] = {"jsx": True}
        return {
            "root": True,
            "env": {"es2021": True, "node": True},
            "parserOptions": parser_options,
            "extends": list(self.extends),
            "plugins": list(self.plugins),
        }

    def to_flat_config(self, resolve_from: str) -> str:
        """Render an ``eslint.config.mjs`` module for this profile.

        Presets and ``globals`` are required relative to ``resolve_from``
        (the ESLint install), since the config file itself lives in a
        temporary directory with no ``node_modules``.
        """
        parser_options: dict[str, Any] = {}
        if self.jsx:
            parser_options["ecmaFeatures"] = {"jsx": True}
        language_options = {
            "ecmaVersion": self.ecma_version,
            "sourceType": "module",
            "parserOptions": parser_options,
        }

        entries = []
        for preset in self.extends:
            package, expression, is_array = FLAT_PRESETS[preset]
            entry = f"require({json.dumps(package)}).{expression}"
            entries.append(f"  ...{entry}," if is_array else f"  {entry},")
        entries.append(
            "  {\n"
            f"    files: {json.dumps(list(LINTED_FILES))},\n"
            f"    languageOptions: Object.assign({json.dumps(language_options)}, {{\n"
            "      globals: globals ? { ...globals.es2021, ...globals.node } : {},\n"
            "    }),\n"
            "  },"
        )
        return (
            'import { createRequire } from "node:module";\n'
            f"const require = createRequire({json.dumps(resolve_from)});\n"
            "function optional(name) {\n"
            "  try {\n"
            "    return require(name);\n"
            "  } catch {\n"
            "    return undefined;\n"
            "  }\n"
            "}\n"
            'const globals = optional("globals");\n'
            "export default [\n" + "\n".join(entries) + "\n];\n"
        )


DEFAULT_PROFILE = LintProfile(name="default", extends=("eslint:recommended",))

_REACT = LintProfile(
    name="react",
    extends=("eslint:recommended", "plugin:react/recommended"),
    plugins=("react", "react-hooks"),
    jsx=True,
)
_VUE = LintProfile(name="vue", extends=("plugin:vue/vue3-recommended",), plugins=("vue",))
_TYPESCRIPT = LintProfile(
    name="typescript",
    extends=("plugin:@typescript-eslint/recommended",),
    plugins=("@typescript-eslint",),
    ecma_version=2022,
)
_SVELTE = LintProfile(name="svelte", extends=("plugin:svelte/recommended",), plugins=("svelte",))

PROFILES: dict[str, LintProfile] = {
    "react": _REACT,
    "next": _REACT,
    "reactnative": _REACT,
    "expo": _REACT,
    "vue": _VUE,
    "nuxt": _VUE,
    "angular": _TYPESCRIPT,
    "nest": _TYPESCRIPT,
    "svelte": _SVELTE,
}


def profile_for(framework: str) -> LintProfile:
    return PROFILES.get(framework, DEFAULT_PROFILE)


def map_severity(level: Any) -> Severity:
    """ESLint severity: 2 -> error, 1 -> warning, anything else -> info."""
    if level == 2:
        return Severity.ERROR
    if level == 1:
        return Severity.WARNING
    return Severity.INFO


@dataclass(frozen=True)
class LintMessage:
    """One linter diagnostic, already mapped to our severity scale."""

    rule_id: Optional[str]
    severity: Severity
    message: str
    line: int = 0
    column: int = 0

    def to_issue(self, file_path: str) -> CodeIssue:
        return CodeIssue(
            type=IssueType.LINT,
            severity=self.severity,
            message=self.message,
            code=self.rule_id or FALLBACK_RULE,
            file_path=file_path,
            line=self.line,
            column=self.column,
        )


class Linter(Protocol):
    """Anything that lints a file's text."""

    def lint_text(self, source: str, file_path: str) -> list[LintMessage]: ...

    def close(self) -> None: ...


class NullLinter:
    """Linter that never reports anything."""

    def lint_text(self, source: str, file_path: str) -> list[LintMessage]:
        return []

    def close(self) -> None:
        pass


def parse_eslint_output(raw: str, file_path: str) -> list[LintMessage]:
    """Parse ``eslint --format json`` output.

    Raises:
        LintError: If the output is not the expected JSON shape
    """
    try:
        results = json.loads(raw)
    except json.JSONDecodeError as e:
        raise LintError(file_path, f"invalid JSON from eslint: {e}")
    if not isinstance(results, list):
        raise LintError(file_path, "unexpected eslint output shape")

    messages = []
    for result in results:
        for msg in result.get("messages", []):
            messages.append(
                LintMessage(
                    rule_id=msg.get("ruleId"),
                    severity=map_severity(msg.get("severity")),
                    message=msg.get("message", ""),
                    line=msg.get("line") or 0,
                    column=msg.get("column") or 0,
                )
            )
    return messages


def eslint_major_version(command: str, timeout: int = 30) -> Optional[int]:
    """Major version reported by ``eslint --version``, or None if unknown."""
    try:
        result = subprocess.run(
            [command, "--version"],
            stdin=subprocess.DEVNULL,
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except (subprocess.TimeoutExpired, OSError) as e:
        logger.debug(f"Could not query {command} version: {e}")
        return None

    match = re.search(r"(\d+)\.\d+", result.stdout)
    return int(match.group(1)) if match else None


class EslintLinter:
    """Runs the ``eslint`` executable with a fixed profile.

    Args:
        profile: Rule set to lint with
        command: ESLint executable
        timeout: Per-file timeout in seconds
        flat_config: Force flat (True) or eslintrc (False) mode. By default
            the mode follows the installed ESLint major version; an unknown
            version is treated as current.
    """

    def __init__(
        self,
        profile: LintProfile,
        command: str = "eslint",
        timeout: int = 30,
        flat_config: Optional[bool] = None,
    ):
        self.profile = profile
        self.command = command
        self.timeout = timeout
        if flat_config is None:
            major = eslint_major_version(command, timeout)
            flat_config = major is None or major >= FLAT_CONFIG_MAJOR
        self.flat_config = flat_config

        # Working directory for every eslint call; relative stdin filenames
        # resolve inside it, which keeps them under the flat config base path
        self._workdir = tempfile.mkdtemp(prefix="sourcescope-eslint-")
        if flat_config:
            self._config_path = os.path.join(self._workdir, "eslint.config.mjs")
            resolve_from = os.path.realpath(shutil.which(command) or command)
            with open(self._config_path, "w", encoding="utf-8") as f:
                f.write(profile.to_flat_config(resolve_from))
        else:
            self._config_path = os.path.join(self._workdir, ".eslintrc.json")
            with open(self._config_path, "w", encoding="utf-8") as f:
                json.dump(profile.to_eslintrc(), f)
        mode = "flat" if flat_config else "eslintrc"
        logger.info(f"ESLint initialized with {profile.name} profile ({mode} config)")

    def command_line(self, file_path: str) -> list[str]:
        cmd = [self.command]
        if not self.flat_config:
            cmd.append("--no-eslintrc")
        cmd += ["--config", self._config_path, "--format", "json"]
        cmd += ["--stdin", "--stdin-filename", file_path]
        return cmd

    def lint_text(self, source: str, file_path: str) -> list[LintMessage]:
        """Lint ``source`` as if it were ``file_path``.

        Raises:
            LintError: On timeout, crash or unreadable output
        """
        env = None
        if not self.flat_config:
            env = dict(os.environ, ESLINT_USE_FLAT_CONFIG="false")
        try:
            result = subprocess.run(
                self.command_line(file_path),
                input=source,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                cwd=self._workdir,
                env=env,
            )
        except subprocess.TimeoutExpired:
            raise LintError(file_path, f"timed out after {self.timeout}s")
        except OSError as e:
            raise LintError(file_path, str(e))

        # 0 = clean, 1 = lint problems found, anything else = eslint itself failed
        if result.returncode not in (0, 1):
            raise LintError(file_path, result.stderr.strip() or "eslint failed", result.returncode)
        return parse_eslint_output(result.stdout, file_path)

    def close(self) -> None:
        shutil.rmtree(self._workdir, ignore_errors=True)


@dataclass
class LinterRegistry:
    """Constructs and caches one linter per framework for the lifetime of a run.

    Attributes:
        config: Controls whether ESLint runs and how it is invoked
    """

    config: AnalysisConfig = field(default_factory=lambda: DEFAULT_CONFIG)
    _linters: dict[str, Linter] = field(default_factory=dict, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def get(self, framework: str) -> Linter:
        with self._lock:
            linter = self._linters.get(framework)
            if linter is None:
                linter = self._create(framework)
                self._linters[framework] = linter
            return linter

    def _create(self, framework: str) -> Linter:
        if not self.config.lint_enabled:
            logger.debug("Linting disabled")
            return NullLinter()
        if shutil.which(self.config.eslint_command) is None:
            logger.warning(
                f"ESLint executable '{self.config.eslint_command}' not found; skipping lint pass"
            )
            return NullLinter()
        return EslintLinter(
            profile_for(framework),
            command=self.config.eslint_command,
            timeout=self.config.lint_timeout_seconds,
        )

    def close(self) -> None:
        with self._lock:
            for linter in self._linters.values():
                linter.close()
            self._linters.clear()


class LintAdapter:
    """Maps a linter's diagnostics to issues, absorbing any linter failure."""

    def __init__(self, linter: Linter):
        self.linter = linter

    def lint(self, source: str, file_path: str) -> list[CodeIssue]:
        try:
            messages = self.linter.lint_text(source, file_path)
        except Exception as e:
            logger.warning(f"Lint failed for {file_path}: {e}")
            return []
        return [message.to_issue(file_path) for message in messages]
