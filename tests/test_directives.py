"""Tests for the Nestfile directive validator.

Test the shape checks of env, logs, validate, depends, and the other
directive kinds, plus multiline script blocks.
"""

from nestlint.errors.codes import ErrorCode
from nestlint.errors.diagnostics import Diagnostic
from nestlint.structure.classifier import classify_line
from nestlint.structure.directives import (
    DirectiveValidator,
    has_balanced_substitutions,
    make_directive,
)


def _validate(text: str) -> list[Diagnostic]:
    line = classify_line(text, 1)
    return DirectiveValidator([text]).validate(line, make_directive(line))


def _codes(text: str) -> list[ErrorCode | None]:
    return [d.code for d in _validate(text)]


def _check_script(lines: list[str]) -> tuple[int, list[Diagnostic]]:
    line = classify_line(lines[0], 1)
    return DirectiveValidator(lines).check_script(line, 0)


# =============================================================================
# Directive Nodes
# =============================================================================


class TestMakeDirective:
    """Test Directive node construction."""

    def test_modifier_parts(self) -> None:
        """Base, dotted, and bracket parts are split out."""
        directive = make_directive(classify_line("    script[hide]: make", 4))

        assert directive.name == "script[hide]"
        assert directive.base == "script"
        assert directive.modifier == "hide"
        assert directive.dotted is None
        assert directive.line == 4

    def test_dotted_part(self) -> None:
        """Dotted modifiers are split out."""
        directive = make_directive(classify_line("    logs.json: out.log", 1))

        assert directive.base == "logs"
        assert directive.dotted == "json"


# =============================================================================
# Keyword Checks
# =============================================================================


class TestKeywords:
    """Test keyword and separator checks."""

    def test_unknown_directive(self) -> None:
        """Unknown keywords are errors naming the token."""
        diagnostics = _validate("    colour: blue")

        assert [d.code for d in diagnostics] == [ErrorCode.E0103]
        assert diagnostics[0].message == 'unknown directive "colour"'
        assert diagnostics[0].column == 4
        assert diagnostics[0].end_column == 10

    def test_missing_separator(self) -> None:
        """Known keywords need a separator."""
        assert _codes("    desc") == [ErrorCode.E0206]

    def test_standalone_directives(self) -> None:
        """else and privileged may stand alone."""
        assert _codes("    privileged") == []
        assert _codes("    else") == []

    def test_unsupported_bracket_modifier(self) -> None:
        """Only script directives and depends take bracket modifiers."""
        assert _codes("    desc[x]: hello") == [ErrorCode.W0008]
        assert _codes("    depends[parallel]: a, b") == []

    def test_unsupported_dotted_modifier(self) -> None:
        """Only logs and validate take dotted modifiers."""
        assert _codes("    script.json: make") == [ErrorCode.W0008]


# =============================================================================
# Value Shapes
# =============================================================================


class TestEnv:
    """Test env directive values."""

    def test_valid_values(self) -> None:
        """Assignments and env files are accepted."""
        assert _codes("    env: FOO=bar") == []
        assert _codes("    env: FOO=${BAR:-default}") == []
        assert _codes("    env: .env") == []
        assert _codes("    env: config/prod.env") == []

    def test_invalid_values(self) -> None:
        """Other values are errors with help text."""
        diagnostics = _validate("    env: FOO")

        assert [d.code for d in diagnostics] == [ErrorCode.E0201]
        assert diagnostics[0].help_text is not None
        assert _codes("    env: FOO=${BAR") == [ErrorCode.E0201]
        assert _codes("    env:") == [ErrorCode.E0201]


class TestLogs:
    """Test logs directive values."""

    def test_valid_values(self) -> None:
        """Sinks are given as a modifier or first word."""
        assert _codes("    logs.json: out.log") == []
        assert _codes("    logs: txt out.log") == []

    def test_invalid_values(self) -> None:
        """Unknown sinks and missing paths are errors."""
        assert _codes("    logs: xml out.log") == [ErrorCode.E0202]
        assert _codes("    logs.json:") == [ErrorCode.E0202]


class TestValidate:
    """Test validate directive values."""

    def test_valid_values(self) -> None:
        """Matches, in, and dotted forms are accepted."""
        assert _codes(r"    validate: version matches ^v\d+") == []
        assert _codes("    validate: env in dev,prod") == []
        assert _codes(r"    validate.version: ^\d+$") == []

    def test_invalid_value(self) -> None:
        """A bare target is an error."""
        assert _codes("    validate: version") == [ErrorCode.E0203]


class TestOtherValues:
    """Test depends, privileged, conditionals, cwd, and watch."""

    def test_depends(self) -> None:
        """Dependency lists follow the dependency grammar."""
        assert _codes('    depends: build, dev:lint(target="x")') == []
        assert _codes("    depends: build(") == [ErrorCode.E0206]
        assert _codes("    depends:") == [ErrorCode.E0206]

    def test_privileged(self) -> None:
        """Privileged takes a boolean word."""
        assert _codes("    privileged: yes") == []
        assert _codes("    privileged: maybe") == [ErrorCode.E0206]

    def test_conditionals(self) -> None:
        """if and elif need a condition and else takes none."""
        assert _codes('    if: "{{env}}" == "prod"') == []
        assert _codes("    if:") == [ErrorCode.E0206]
        assert _codes("    elif:") == [ErrorCode.E0206]
        assert _codes("    else:") == []
        assert _codes("    else: x") == [ErrorCode.E0206]

    def test_required_values(self) -> None:
        """cwd and watch need a value."""
        assert _codes("    cwd:") == [ErrorCode.E0206]
        assert _codes("    watch:") == [ErrorCode.E0206]
        assert _codes("    watch: src/**/*.py") == []


class TestSubstitutions:
    """Test command substitution balance."""

    def test_balanced(self) -> None:
        """Nested substitutions balance."""
        assert has_balanced_substitutions("echo $(date $(whoami))")
        assert _codes("    script: echo $(date)") == []

    def test_unbalanced(self) -> None:
        """An unclosed substitution is a warning."""
        assert not has_balanced_substitutions("echo $(date")
        assert _codes("    script: echo $(date") == [ErrorCode.W0004]


# =============================================================================
# Multiline Blocks
# =============================================================================


class TestMultilineBlocks:
    """Test script block detection."""

    def test_block_is_skipped(self) -> None:
        """Block lines are consumed up to the next shallower line."""
        lines = ["    script: |", "        echo one", "", "        echo two", "next:"]
        next_index, diagnostics = _check_script(lines)

        assert diagnostics == []
        assert next_index == 4

    def test_empty_block(self) -> None:
        """A block without content is an error."""
        next_index, diagnostics = _check_script(["    script: |", "", "deploy:"])

        assert [d.code for d in diagnostics] == [ErrorCode.E0204]
        assert diagnostics[0].message == "multiline script block is empty"
        assert next_index == 2

    def test_missing_marker(self) -> None:
        """Deeper plain content after a single-line script is an error."""
        lines = [
            "    script: echo one",
            "        echo two",
            "        echo three",
            "    desc: x",
        ]
        next_index, diagnostics = _check_script(lines)

        assert [d.code for d in diagnostics] == [ErrorCode.E0205]
        assert next_index == 3

    def test_single_line_script(self) -> None:
        """A single-line script followed by a directive is fine."""
        next_index, diagnostics = _check_script(["    script: make", "    desc: x"])

        assert diagnostics == []
        assert next_index == 1
