import re

import pytest

from folio.core.text import join_delimited
from folio.core.text import parse_delimited
from folio.core.text import slugify_title


class TestSlugifyTitle:
    def test_punctuation_and_spaces_collapse(self):
        assert slugify_title("Hello, World! 2024") == "hello-world-2024"

    @pytest.mark.parametrize(
        "title",
        [
            "  --Leading and trailing--  ",
            "Swift & SwiftUI: a love story",
            "Ünïcödé   títle",
            "multiple   spaces___and---dashes",
        ],
    )
    def test_output_shape(self, title):
        slug = slugify_title(title)
        assert re.fullmatch(r"[a-z0-9-]*", slug)
        assert not slug.startswith("-")
        assert not slug.endswith("-")
        assert "--" not in slug

    def test_idempotent(self):
        slug = slugify_title("My First Post!")
        assert slugify_title(slug) == slug

    @pytest.mark.parametrize("title", ["", "!!!", "   ", None])
    def test_symbol_only_titles_yield_empty(self, title):
        assert slugify_title(title) == ""


class TestDelimited:
    def test_parse_trims_and_drops_empties(self):
        assert parse_delimited("Swift, SwiftUI,  CoreData ,, ") == [
            "Swift",
            "SwiftUI",
            "CoreData",
        ]

    def test_parse_empty(self):
        assert parse_delimited("") == []
        assert parse_delimited(None) == []

    def test_join_then_parse_is_stable(self):
        items = parse_delimited("Swift, SwiftUI,  CoreData ,, ")
        assert parse_delimited(join_delimited(items)) == items

    def test_join_uses_comma_space(self):
        assert join_delimited(["a", "b"]) == "a, b"
        assert join_delimited([]) == ""
