import unittest
from types import SimpleNamespace

from planhub.core.text_format import short_project_description, truncate_at_line_end


class ShortProjectDescriptionTests(unittest.TestCase):
    def test_returns_shortened_description(self):
        project = SimpleNamespace(description=("Abcd " * 5 + "\n") * 11)
        expected = (("Abcd " * 5 + "\n") * 10)[:-1] + "..."
        self.assertEqual(short_project_description(project), expected)

    def test_description_within_budget_is_unchanged(self):
        description = ("Abcd " * 5 + "\n") * 3
        project = SimpleNamespace(description=description)
        self.assertEqual(short_project_description(project), description.strip())

    def test_blank_description(self):
        self.assertEqual(short_project_description(SimpleNamespace(description=None)), "")
        self.assertEqual(short_project_description(SimpleNamespace(description="  \n ")), "")

    def test_custom_length_keeps_whole_lines(self):
        project = SimpleNamespace(description="first line\nsecond line\nthird line")
        self.assertEqual(short_project_description(project, length=13), "first line\nsecond line...")


class TruncateAtLineEndTests(unittest.TestCase):
    def test_exact_length_is_not_truncated(self):
        self.assertEqual(truncate_at_line_end("abcdef", 6), "abcdef")

    def test_cut_on_line_boundary(self):
        self.assertEqual(truncate_at_line_end("abc\ndef", 3), "abc...")

    def test_carriage_return_ends_a_line(self):
        self.assertEqual(truncate_at_line_end("ab cd\r\nef", 2), "ab cd...")


if __name__ == "__main__":
    unittest.main()
