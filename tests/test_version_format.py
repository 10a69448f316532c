import unittest
from types import SimpleNamespace

from planhub import models
from planhub.core.access import ANONYMOUS_CONTEXT, RequestContext
from planhub.core.version_format import (
    format_version_name,
    link_to_version,
    version_options_for_select,
)


class VersionFormatTests(unittest.TestCase):
    def setUp(self):
        self.project = models.Project(id=1, name="Test Project", identifier="test-project")
        self.version = models.Version(id=7, name="1.0", sharing="none", project=self.project)
        self.member = SimpleNamespace(id=3, login="pm", email="pm@example.com", is_admin=False, is_anonymous=False)
        self.project.members.append(models.Member(user_id=3))

    def test_format_version_name(self):
        self.assertEqual(format_version_name(self.version), "Test Project - 1.0")

    def test_format_version_name_within_project(self):
        self.assertEqual(format_version_name(self.version, self.project), "1.0")

    def test_format_system_version_name(self):
        system_version = models.Version(id=8, name="Shared", sharing="system", project=self.project)
        self.assertEqual(format_version_name(system_version), "Test Project - Shared")

    def test_no_link_without_permission(self):
        self.assertEqual(link_to_version(self.version, ANONYMOUS_CONTEXT), "Test Project - 1.0")

    def test_no_link_for_logged_in_non_member(self):
        stranger = SimpleNamespace(id=9, login="x", email="x@example.com", is_admin=False, is_anonymous=False)
        self.assertEqual(link_to_version(self.version, RequestContext(user=stranger)), "Test Project - 1.0")

    def test_link_for_member(self):
        self.assertEqual(
            link_to_version(self.version, RequestContext(user=self.member)),
            '<a href="/versions/7">Test Project - 1.0</a>',
        )

    def test_link_for_member_within_project(self):
        context = RequestContext(user=self.member, project=self.project)
        self.assertEqual(link_to_version(self.version, context), '<a href="/versions/7">1.0</a>')

    def test_link_with_before_text_and_html_options(self):
        context = RequestContext(user=self.member, project=self.project)
        self.assertEqual(
            link_to_version(self.version, context, before_text="Target: ", html_options={"class": "version"}),
            '<a href="/versions/7" class="version">Target: 1.0</a>',
        )

    def test_link_escapes_names(self):
        self.version.name = "<b>1.0</b>"
        self.assertEqual(
            link_to_version(self.version, ANONYMOUS_CONTEXT),
            "Test Project - &lt;b&gt;1.0&lt;/b&gt;",
        )

    def test_invalid_version_does_not_generate_a_link(self):
        self.assertEqual(link_to_version(object, ANONYMOUS_CONTEXT), "")
        self.assertEqual(link_to_version(None, RequestContext(user=self.member)), "")


class VersionOptionsForSelectTests(unittest.TestCase):
    def setUp(self):
        self.project = models.Project(id=1, name="Test Project")
        self.version = models.Version(id=7, name="1.0", project=self.project)

    def test_generates_nothing_without_a_version(self):
        self.assertEqual(version_options_for_select([]), "")

    def test_generates_an_option_tag(self):
        self.assertEqual(
            version_options_for_select([], self.version),
            '<option selected="selected" value="7">1.0</option>',
        )

    def test_selected_version_is_not_duplicated(self):
        other = models.Version(id=8, name="2.0", project=self.project)
        self.assertEqual(
            version_options_for_select([self.version, other], self.version),
            '<option selected="selected" value="7">1.0</option>\n<option value="8">2.0</option>',
        )

    def test_versions_of_several_projects_are_grouped(self):
        other_project = models.Project(id=2, name="Other")
        shared = models.Version(id=9, name="Shared", sharing="system", project=other_project)
        self.assertEqual(
            version_options_for_select([self.version, shared]),
            '<optgroup label="Test Project"><option value="7">1.0</option></optgroup>'
            '<optgroup label="Other"><option value="9">Shared</option></optgroup>',
        )


if __name__ == "__main__":
    unittest.main()
