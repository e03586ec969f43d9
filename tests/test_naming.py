"""Tests for the default naming collaborator."""

import pytest

from recordkit.naming import DefaultNaming, ModelName, humanize, pluralize, underscore


class TestInflections:
    @pytest.mark.parametrize(
        "name,expected",
        [
            ("BlogPost", "blog_post"),
            ("firstName", "first_name"),
            ("HTTPRequest", "http_request"),
            ("already_snake", "already_snake"),
            ("kebab-case", "kebab_case"),
        ],
    )
    def test_underscore(self, name, expected):
        assert underscore(name) == expected

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("first_name", "First name"),
            ("firstName", "First name"),
            ("author_id", "Author"),
            ("id", "Id"),
            ("name", "Name"),
        ],
    )
    def test_humanize(self, name, expected):
        assert humanize(name) == expected

    @pytest.mark.parametrize(
        "word,expected",
        [("post", "posts"), ("box", "boxes"), ("category", "categories"), ("day", "days")],
    )
    def test_pluralize(self, word, expected):
        assert pluralize(word) == expected


class TestModelName:
    def test_from_name(self):
        name = ModelName.from_name("BlogPost")

        assert name.name == "BlogPost"
        assert name.singular == "blog_post"
        assert name.plural == "blog_posts"
        assert name.human == "Blog post"
        assert name.route_key == "blog_posts"
        assert name.param_key == "blog_post"
        assert str(name) == "BlogPost"

    def test_dotted_name(self):
        assert ModelName.from_name("billing.Invoice").singular == "invoice"


class TestDefaultNaming:
    def test_humanizes(self):
        naming = DefaultNaming("Person")
        assert naming.human_attribute_name("first_name") == "First name"

    def test_labels_win(self):
        naming = DefaultNaming("Person", labels={"dob": "Date of birth"})
        assert naming.human_attribute_name("dob") == "Date of birth"

    def test_default_option(self):
        naming = DefaultNaming("Person")
        assert naming.human_attribute_name("dob", default="Birthday") == "Birthday"

    def test_model_name(self):
        assert DefaultNaming("Person").model_name().plural == "persons"
