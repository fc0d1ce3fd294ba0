"""Tests for fixed-width table rendering."""

from mailrelay.pipeline.markup import extract_text, parse_html
from mailrelay.pipeline.tables import column_widths, convert_tables, extract_rows, render_table


class TestRenderTable:
    """Tests for rendering rows into a fenced block."""

    def test_header_separator_and_padding(self):
        block = render_table([["a", "bb"], ["ccc", "d"]])
        assert block == "```\na   | bb\n----+---\nccc | d \n```"

    def test_single_row_has_no_separator(self):
        assert render_table([["x"]]) == "```\nx\n```"

    def test_no_rows_renders_nothing(self):
        assert render_table([]) == ""

    def test_wide_cells_are_truncated_with_ellipsis(self):
        block = render_table([["x" * 30], ["y"]])
        lines = block.split("\n")
        assert lines[1] == "x" * 22 + "..."
        assert lines[2] == "-" * 25
        assert lines[3] == "y" + " " * 24

    def test_custom_cap(self):
        block = render_table([["abcdefgh"]], max_width=5)
        assert block == "```\nab...\n```"


def test_column_widths_are_capped():
    assert column_widths([["a", "bb"], ["ccc", "d"]]) == [3, 2]
    assert column_widths([["x" * 40]], max_width=10) == [10]


class TestConvertTables:
    """Tests for replacing tables in the tree."""

    def test_table_becomes_fenced_text(self):
        soup = parse_html(
            "<p>Before</p><table><tr><th>Name</th><th>Qty</th></tr>"
            "<tr><td>Apple</td><td>3</td></tr></table>"
        )
        assert convert_tables(soup) == 1
        assert "```\nName  | Qty\n------+----\nApple | 3  \n```" in extract_text(soup)
        assert soup.find("table") is None

    def test_empty_table_vanishes(self):
        soup = parse_html("<table><tr><td> </td></tr></table>x")
        assert convert_tables(soup) == 0
        assert extract_text(soup) == "x"

    def test_cell_whitespace_is_collapsed(self):
        soup = parse_html("<table><tr><td>  a \n b </td><td></td></tr><tr><td></td><td></td></tr></table>")
        assert extract_rows(soup.find("table")) == [["a b", ""]]

    def test_cells_and_rows_without_end_tags(self):
        soup = parse_html("<table><tr><td>a<td>bb<tr><td>ccc<td>d</table>")
        assert extract_rows(soup.find("table")) == [["a", "bb"], ["ccc", "d"]]
        convert_tables(soup)
        assert extract_text(soup) == "\n```\na   | bb\n----+---\nccc | d \n```\n"

    def test_nested_table_is_flattened_into_outer_cell(self):
        soup = parse_html(
            "<table><tr><td>outer</td><td><table><tr><td>inner</td></tr></table></td></tr></table>"
        )
        assert convert_tables(soup) == 1
        assert extract_text(soup) == "\n```\nouter | inner\n```\n"
