"""Tests for markdown report helpers."""

from meetdigest.output.markdown import extract_title, format_report, slugify


class TestExtractTitle:
    def test_first_h1(self):
        assert extract_title("# Budget Review\n\n**Summary**\n\n# Second") == "Budget Review"

    def test_ignores_h2(self):
        assert extract_title("## Not a title\ntext") is None

    def test_no_heading(self):
        assert extract_title("just text") is None

    def test_empty_h1(self):
        assert extract_title("# \nbody") is None


class TestSlugify:
    def test_basic(self):
        assert slugify("Q3 Budget Planning Review") == "q3-budget-planning-review"

    def test_strips_special_chars(self):
        assert slugify("Hello, World! @#$") == "hello-world"

    def test_truncates_to_max_length(self):
        result = slugify("a " * 100, max_length=10)
        assert len(result) <= 10

    def test_empty_input(self):
        assert slugify("") == ""

    def test_colons_removed(self):
        assert slugify("Meeting: Budget Review") == "meeting-budget-review"


class TestFormatReport:
    def test_single_trailing_newline(self):
        assert format_report("  # Title\n\nbody\n\n\n") == "# Title\n\nbody\n"
