"""Tests for the value grammar.

Test parameter default literals, dependency lists, and the parser cache.
"""

import pytest
from lark.exceptions import LarkError

from nestlint.ast.nodes import Dependency
from nestlint.grammar.parser import ParserFactory, parse_dependencies, parse_literal
from nestlint.structure.parameters import default_value_type


class TestLiterals:
    """Test default value literals."""

    def test_strings(self) -> None:
        """Both quote styles are accepted."""
        assert parse_literal('"x86_64"') == "x86_64"
        assert parse_literal("'debug'") == "debug"

    def test_numbers_and_booleans(self) -> None:
        """Numbers become floats and booleans become bools."""
        assert parse_literal("8080") == 8080.0
        assert parse_literal("-1.5") == -1.5
        assert parse_literal("true") is True
        assert parse_literal("false") is False

    def test_arrays(self) -> None:
        """Arrays hold quoted and bare items."""
        assert parse_literal('[a, "b c", d]') == ["a", "b c", "d"]
        assert parse_literal("[]") == []

    def test_bare_word_is_not_a_literal(self) -> None:
        """Unquoted text outside an array fails to parse."""
        with pytest.raises(LarkError):
            parse_literal("hello")

    def test_default_value_types(self) -> None:
        """Defaults map to parameter types."""
        assert default_value_type('"x"') == "str"
        assert default_value_type("hello") == "str"
        assert default_value_type("3") == "num"
        assert default_value_type("false") == "bool"
        assert default_value_type("[a]") == "arr"


class TestDependencies:
    """Test depends values."""

    def test_plain_and_nested_paths(self) -> None:
        """Paths keep their segments joined by colons."""
        assert parse_dependencies("build, dev:lint") == [
            Dependency(command_path="build"),
            Dependency(command_path="dev:lint"),
        ]

    def test_dotted_path(self) -> None:
        """Dots separate segments too."""
        assert parse_dependencies("dev.lint")[0].command_path == "dev:lint"

    def test_arguments(self) -> None:
        """Arguments are collected into a dict."""
        dependencies = parse_dependencies('deploy(target="prod", dry_run=true)')

        assert dependencies == [
            Dependency(
                command_path="deploy",
                args={"target": "prod", "dry_run": "true"},
            ),
        ]

    def test_empty_arguments(self) -> None:
        """Empty parentheses give no arguments."""
        assert parse_dependencies("build()")[0].args == {}

    def test_malformed(self) -> None:
        """Unbalanced parentheses fail to parse."""
        with pytest.raises(LarkError):
            parse_dependencies("build(")
        with pytest.raises(LarkError):
            parse_dependencies("build,,lint")


class TestParserFactory:
    """Test parser caching."""

    def test_parser_is_cached(self) -> None:
        """Repeated calls return the same parser."""
        assert ParserFactory.create() is ParserFactory.create()

    def test_clear_cache(self) -> None:
        """Clearing the cache builds a new parser."""
        first = ParserFactory.create()
        ParserFactory.clear_cache()

        assert ParserFactory.create() is not first
