from __future__ import annotations

import pytest

from fontseek.families import (
    FamilyChain,
    categorize,
    css_family,
    is_icon_font,
    parse_families,
    parse_font_faces,
    strip_quotes,
)
from fontseek.models import FamilyCategory


def test_parse_strips_quotes_and_whitespace() -> None:
    tokens = parse_families(' "Helvetica Neue" , \'Inter\',Arial,  sans-serif ')
    assert [t.name for t in tokens] == ["Helvetica Neue", "Inter", "Arial", "sans-serif"]


def test_parse_drops_empty_and_var_tokens() -> None:
    tokens = parse_families("var(--brand), , Georgia")
    assert [t.name for t in tokens] == ["Georgia"]
    assert parse_families(None) == []


@pytest.mark.parametrize(
    ("name", "category"),
    [
        ("-apple-system", FamilyCategory.ALIAS),
        ("BlinkMacSystemFont", FamilyCategory.ALIAS),
        ("system-ui", FamilyCategory.GENERIC),
        ("SANS-SERIF", FamilyCategory.GENERIC),
        ("ui-monospace", FamilyCategory.GENERIC),
        ("Roboto", FamilyCategory.NAMED),
        ("serif display", FamilyCategory.NAMED),
    ],
)
def test_categorize_is_exclusive(name: str, category: FamilyCategory) -> None:
    assert categorize(name) is category


def test_chain_dedupes_case_insensitively_first_wins() -> None:
    chain = FamilyChain(parse_families('Inter, Arial, "inter", sans-serif'))
    chain.extend(parse_families("ARIAL, Georgia"))
    assert chain.names() == ["Inter", "Arial", "sans-serif", "Georgia"]
    assert "INTER" in chain
    assert '"georgia"' in chain
    assert chain.first(FamilyCategory.GENERIC).name == "sans-serif"
    assert chain.first(FamilyCategory.ALIAS) is None


def test_css_family_quotes_only_named_fonts() -> None:
    assert css_family("Segoe UI") == '"Segoe UI"'
    assert css_family("'Segoe UI'") == '"Segoe UI"'
    assert css_family("sans-serif") == "sans-serif"
    assert css_family("-apple-system") == "-apple-system"
    assert css_family('My "Odd" Font') == '"My \\"Odd\\" Font"'


def test_strip_quotes_and_icon_fonts() -> None:
    assert strip_quotes("  'Fira Code' ") == "Fira Code"
    assert is_icon_font("Font Awesome 6 Free")
    assert is_icon_font("Material Icons")
    assert not is_icon_font("Inter")


def test_parse_font_faces_reads_descriptors() -> None:
    css = """
    @font-face { font-family: "Inter"; src: url(inter.woff2); font-weight: 100 900; font-style: normal; }
    body { font-family: Inter, sans-serif; }
    @FONT-FACE { font-family: 'Brand Serif'; src: url(b.woff2) }
    @font-face { src: url(nameless.woff2) }
    """
    faces = parse_font_faces(css, "https://example.com/site.css")
    assert [f.family for f in faces] == ["Inter", "Brand Serif"]
    assert faces[0].weight == "100 900"
    assert faces[1].weight == "normal"
    assert faces[0].source == "https://example.com/site.css"
    assert all(f.status == "declared" for f in faces)
