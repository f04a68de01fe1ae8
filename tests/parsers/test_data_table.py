"""Tests for where-block location and iteration recovery."""

from spockscan.models import BlockSpan
from spockscan.parsers.data_table import (
    choose_separator,
    find_data_block,
    parse_iterations,
    parse_list_expression,
    read_literal,
    split_row,
    strip_trailing_comment,
)


def _iterations(body, method_name="feature", sink=None):
    """Parse iterations from a where-block body given as text lines."""
    lines = [f'def "{method_name}"() {{', "    where:"]
    lines += [f"    {line}" for line in body.strip("\n").split("\n")]
    lines.append("}")
    block = find_data_block(lines, 0)
    if sink is None:
        return parse_iterations(lines, block, method_name)
    return parse_iterations(lines, block, method_name, sink)


class TestFindDataBlock:
    """Tests for find_data_block."""

    def test_block_spans_label_to_closing_line(self):
        """The block runs from the where: label to the next lone }."""
        lines = [
            'def "f"() {',
            "    expect:",
            "    a > 0",
            "    where:",
            "    a << [1]",
            "}",
        ]

        assert find_data_block(lines, 0) == BlockSpan(3, 5)

    def test_none_without_where(self):
        """A method without a where-block gives None."""
        lines = ['def "f"() {', "    expect:", "    true", "}", "where:"]

        assert find_data_block(lines, 0) is None

    def test_unterminated_block_runs_to_eof(self):
        """Without a closing line the block ends at end of file."""
        lines = ['def "f"() {', "    where:", "    a << [1]"]

        assert find_data_block(lines, 0) == BlockSpan(1, 3)


class TestSeparators:
    """Tests for separator selection and row splitting."""

    def test_doubled_counted_separately(self):
        """a | b || c ties || and |, and || wins on priority."""
        assert choose_separator("a | b || c") == "||"

    def test_most_frequent_wins(self):
        """The separator with most occurrences is chosen."""
        assert choose_separator("a ; b ; 'x|y'") == ";"

    def test_no_separator(self):
        """Rows without separators give None."""
        assert choose_separator("abc") is None

    def test_split_row_mixed(self):
        """Doubled and single forms split together."""
        assert split_row("1 | 3 || 3") == ["1", "3", "3"]

    def test_split_row_semicolons(self):
        """Semicolon tables split like pipe tables."""
        assert split_row("x ;; y") == ["x", "y"]

    def test_split_row_comma_fallback(self):
        """Rows without a table separator fall back to commas."""
        assert split_row("1, [2, 3]") == ["1", "[2, 3]"]

    def test_strip_trailing_comment(self):
        """Comments outside strings are removed."""
        assert strip_trailing_comment("1 | 2 // note") == "1 | 2"
        assert strip_trailing_comment("'http://x' | 2") == "'http://x' | 2"


class TestLiterals:
    """Tests for read_literal and parse_list_expression."""

    def test_positional_record(self):
        """Positional record arguments map to name and age."""
        assert read_literal('new Person("Fred", 40)') == {"name": "Fred", "age": 40}

    def test_named_record(self):
        """Named record arguments keep their keys."""
        assert read_literal("new Person(age: 3, name: 'Ann')") == {"age": 3, "name": "Ann"}

    def test_record_with_other_arity_kept_raw(self):
        """Constructors with another arity stay as text."""
        assert read_literal("new Point(1, 2, 3)") == "new Point(1, 2, 3)"

    def test_nested_list(self):
        """Nested list literals become lists."""
        assert read_literal("[1, 'a']") == [1, "a"]

    def test_inclusive_range(self):
        """(1..3) includes its upper bound."""
        assert parse_list_expression("(1..3)") == [1, 2, 3]

    def test_exclusive_range(self):
        """1..<3 excludes its upper bound."""
        assert parse_list_expression("1..<3") == [1, 2]

    def test_unreadable_expression(self):
        """Method calls are not readable."""
        assert parse_list_expression("sql.rows('select 1')") is None


class TestParseIterations:
    """Tests for parse_iterations."""

    def test_simple_table(self):
        """A header and one row give one iteration."""
        iterations = _iterations("a | b\n1 | 2")

        assert len(iterations) == 1
        assert iterations[0].data_values == {"a": 1, "b": 2}
        assert iterations[0].index == 0
        assert iterations[0].original_method_name == "feature"

    def test_dominant_separator_with_incidental_pipe(self):
        """A semicolon table keeps a literal | inside its cells."""
        iterations = _iterations("a ; b ; c\n1 ; 2 ; 'x|y'")

        assert iterations[0].data_values == {"a": 1, "b": 2, "c": "x|y"}

    def test_placeholder_column_excluded(self):
        """The _ column never appears in data values."""
        iterations = _iterations("a | _\n1 | 99\n2 | 98")

        assert [it.data_values for it in iterations] == [{"a": 1}, {"a": 2}]

    def test_typed_cells(self):
        """Cells are coerced to their literal types."""
        iterations = _iterations('n | f | b | s | z\n1 | 1.5 | true | "x" | null')

        assert iterations[0].data_values == {
            "n": 1,
            "f": 1.5,
            "b": True,
            "s": "x",
            "z": None,
        }

    def test_placeholder_display_name(self):
        """Display names substitute the row's values."""
        iterations = _iterations("a | b\n1 | 2", method_name="#a beats #b")

        assert iterations[0].display_name == "1 beats 2"

    def test_source_range_points_at_row(self):
        """Each iteration points at its own row line."""
        iterations = _iterations("a | b\n1 | 2\n3 | 4")

        assert [it.source_range.start_line for it in iterations] == [3, 4]

    def test_comments_and_blank_lines_skipped(self):
        """Comment and blank lines are not rows."""
        iterations = _iterations("a | b\n// first\n\n1 | 2 // trailing")

        assert [it.data_values for it in iterations] == [{"a": 1, "b": 2}]

    def test_multiline_pipe(self):
        """A list literal spanning lines is joined before reading."""
        iterations = _iterations("name << [\n    'a',\n    'b'\n]")

        assert [it.data_values for it in iterations] == [{"name": "a"}, {"name": "b"}]

    def test_record_pipe(self):
        """Record constructors in a pipe become mappings."""
        iterations = _iterations('person << [new Person("Fred", 40)]')

        assert iterations[0].data_values == {"person": {"name": "Fred", "age": 40}}
        assert iterations[0].display_name == "feature [person: [name: Fred, age: 40]]"

    def test_range_pipe(self):
        """Ranges expand to one iteration per value."""
        iterations = _iterations("n << (1..3)")

        assert [it.data_values["n"] for it in iterations] == [1, 2, 3]

    def test_multi_variable_pipe(self):
        """[a, b] << [[..], [..]] assigns each row to the variables."""
        iterations = _iterations("[a, b, _] << [[1, 2, 0], [3, 4, 0]]")

        assert [it.data_values for it in iterations] == [{"a": 1, "b": 2}, {"a": 3, "b": 4}]

    def test_pipe_then_table_indices_sequential(self):
        """Indices continue across notations in file order."""
        iterations = _iterations("x << [1, 2]\na | b\n5 | 6")

        assert [it.index for it in iterations] == [0, 1, 2]
        assert iterations[2].data_values == {"a": 5, "b": 6}

    def test_derived_variable_ignored(self):
        """Derived assignments are neither header nor row."""
        iterations = _iterations("a | b\n1 | 2\nc = a + b")

        assert [it.data_values for it in iterations] == [{"a": 1, "b": 2}]

    def test_rows_limited_to_block_body(self):
        """Only lines inside the block span are read."""
        lines = ["where:", "a | b", "1 | 2", "3 | 4"]

        iterations = parse_iterations(lines, BlockSpan(0, 3), "f")

        assert [it.data_values for it in iterations] == [{"a": 1, "b": 2}]

    def test_unreadable_pipe_reported(self, sink):
        """A pipe the parser cannot read is reported and skipped."""
        iterations = _iterations("row << sql.rows('select *')", sink=sink)

        assert iterations == []
        assert "pipe.unreadable" in sink.names()
        assert sink.events[-1] == ("iterations.parsed", {"method": "feature", "count": 0})
