"""Unit tests for the stylesheet document model."""

from rhythmguard.stylesheet import Stylesheet


class TestStylesheetParse:
    """Tests for declaration scanning."""

    def test_declarations_in_order(self):
        """Test declarations are found in document order."""
        sheet = Stylesheet.parse(".a { margin: 13px; padding: 4px 8px }")

        assert [(d.prop, d.value) for d in sheet.walk_decls()] == [
            ("margin", "13px"),
            ("padding", "4px 8px"),
        ]

    def test_value_offsets(self):
        """Test value_start and value_end point into the source."""
        text = ".a {\n  margin:   13px ;\n}"
        decl = next(Stylesheet.parse(text).walk_decls())

        assert text[decl.value_start : decl.value_end] == "13px"

    def test_important_is_stripped(self):
        """Test !important is recorded and removed from the value."""
        decl = next(Stylesheet.parse("a { gap: 10px !important; }").walk_decls())

        assert decl.value == "10px"
        assert decl.important is True

    def test_selectors_and_at_rules_are_not_declarations(self):
        """Test pseudo-class selectors and at-rule preludes are skipped."""
        text = "@media (min-width: 600px) { a:hover { margin: 4px; } }"
        decls = list(Stylesheet.parse(text).walk_decls())

        assert [(d.prop, d.value) for d in decls] == [("margin", "4px")]

    def test_semicolons_inside_values(self):
        """Test semicolons in parentheses and strings do not split values."""
        text = 'a { background: url(data:image/png;base64,AA==); content: "x;y"; gap: 4px }'
        decls = list(Stylesheet.parse(text).walk_decls())

        assert [d.prop for d in decls] == ["background", "content", "gap"]
        assert decls[0].value == "url(data:image/png;base64,AA==)"

    def test_comments_are_ignored(self):
        """Test comments between declarations are skipped."""
        text = "a { /* margin: 13px; */ padding: 4px; }"
        decls = list(Stylesheet.parse(text).walk_decls())

        assert [(d.prop, d.value) for d in decls] == [("padding", "4px")]

    def test_custom_properties(self):
        """Test custom property declarations are kept."""
        decl = next(Stylesheet.parse(":root { --space-3: 12px; }").walk_decls())

        assert decl.is_custom_property
        assert decl.value == "12px"

    def test_nested_blocks(self):
        """Test declarations inside nested rules are found."""
        text = ".card { margin: 4px; &:hover { margin: 6px; } }"
        values = [d.value for d in Stylesheet.parse(text).walk_decls()]

        assert values == ["4px", "6px"]

    def test_line_comment_with_apostrophe(self):
        """Test a quote inside a // comment does not open a string."""
        text = "// don't touch\n.a { margin: 13px; }\n.b { padding: 13px; }\n"
        sheet = Stylesheet.parse(text)

        assert [(d.prop, d.value) for d in sheet.walk_decls()] == [
            ("margin", "13px"),
            ("padding", "13px"),
        ]
        assert sheet.to_string() == text

    def test_line_comments_inside_blocks(self):
        """Test // comments before and after declarations are skipped."""
        text = ".a {\n  // gap: 13px;\n  margin: 4px; // it's fine\n  padding: 8px // trailing\n}"
        decls = list(Stylesheet.parse(text).walk_decls())

        assert [(d.prop, d.value) for d in decls] == [("margin", "4px"), ("padding", "8px")]
        assert text[decls[1].value_start : decls[1].value_end] == "8px"

    def test_double_slash_in_url_and_strings(self):
        """Test // inside url() and strings is part of the value."""
        text = "a { background: url(https://x.test/a.png); content: \"//\"; margin: 4px; }"
        decls = list(Stylesheet.parse(text).walk_decls())

        assert [(d.prop, d.value) for d in decls] == [
            ("background", "url(https://x.test/a.png)"),
            ("content", '"//"'),
            ("margin", "4px"),
        ]


class TestLineColumn:
    """Tests for offset to line/column conversion."""

    def test_first_line(self):
        """Test offsets on the first line."""
        assert Stylesheet.parse("a{}").line_column(0) == (1, 1)

    def test_later_line(self):
        """Test offsets after newlines."""
        text = "a {\n  margin: 13px;\n}"
        sheet = Stylesheet.parse(text)

        assert sheet.line_column(text.index("13px")) == (2, 11)


class TestToString:
    """Tests for splicing edits back into the source."""

    def test_untouched_source_is_identical(self):
        """Test no edits means byte-identical output."""
        text = "a {  margin : 13px  ;/* keep */ }"

        assert Stylesheet.parse(text).to_string() == text

    def test_edited_values_are_spliced(self):
        """Test committed node edits replace only the value text."""
        text = "a { margin: 13px 5px !important; padding: 3px; }"
        sheet = Stylesheet.parse(text)
        margin, padding = sheet.declarations

        margin.parsed.nodes[0].value = "12px"
        margin.commit()
        padding.parsed.nodes[0].value = "4px"
        padding.commit()

        assert sheet.to_string() == "a { margin: 12px 5px !important; padding: 4px; }"

    def test_commit_without_change_is_clean(self):
        """Test committing an unchanged tree does not mark the value dirty."""
        decl = Stylesheet.parse("a { gap: 4px; }").declarations[0]
        _ = decl.parsed
        decl.commit()

        assert decl.dirty is False
