"""Tests for citation formatting."""

import logging

import pytest

from labpubs.formatting.citation import (
    FormattedCitation,
    format_author,
    format_authors,
    format_citation,
    format_initials,
    format_item,
    format_venue,
    preprint_server,
)
from labpubs.sources.models import NamedCreator, PersonCreator, parse_item


def _person(first, last, role="author"):
    return PersonCreator(creatorType=role, firstName=first, lastName=last)


def _item(item_type="journalArticle", year=2023, creators=None, **data):
    if creators is None:
        creators = [{"creatorType": "author", "firstName": "Jane Ann", "lastName": "Doe"}]
    fields = {
        "key": "K1",
        "itemType": item_type,
        "title": "Seeing the genome",
        "creators": creators,
        **data,
    }
    return parse_item({"data": fields, "csljson": {"issued": {"date-parts": [[year]]}}})


# ── Authors ──────────────────────────────────────────────────────────


def test_initials_from_first_name():
    assert format_initials("Jane Ann") == "JA"


def test_initials_ignore_lowercase_and_punctuation():
    assert format_initials("Jean-Luc") == "JL"
    assert format_initials("de la") == ""


def test_person_author():
    assert format_author(_person("Jane Ann", "Doe")) == "JA Doe"


def test_organisation_author_verbatim():
    org = NamedCreator(creatorType="author", name="HuBMAP Consortium")
    assert format_author(org) == "HuBMAP Consortium"


def test_two_authors_joined_with_and():
    result = format_authors([_person("Jane", "Doe"), _person("Max", "Roe")])
    assert result == "J Doe and M Roe"
    assert "," not in result


@pytest.mark.parametrize("count", [0, 1, 3, 5])
def test_other_counts_joined_with_comma(count):
    creators = [_person(f"A{i}", f"Last{i}") for i in range(count)]
    result = format_authors(creators)
    assert " and " not in result
    assert result.count(", ") == max(count - 1, 0)


def test_only_author_role_rendered():
    creators = [
        _person("Jane", "Doe"),
        _person("Eddie", "Editor", role="editor"),
        _person("Max", "Roe"),
    ]
    assert format_authors(creators) == "J Doe and M Roe"


# ── Venue ────────────────────────────────────────────────────────────


def test_journal_full_venue():
    item = _item(publicationTitle="Nature", volume="600", issue="2", pages="100-110")
    assert format_venue(item) == "Nature 600(2):100-110"


def test_journal_pages_without_volume_or_issue():
    item = _item(publicationTitle="Bioinformatics", pages="e42")
    assert format_venue(item) == "Bioinformatics e42"


def test_journal_volume_only():
    item = _item(publicationTitle="Nature Methods", volume="21", pages="1-9")
    assert format_venue(item) == "Nature Methods 21:1-9"


def test_journal_without_title_is_empty():
    item = _item(volume="600", issue="2")
    assert format_venue(item) == ""


def test_thesis():
    assert format_venue(_item("thesis", university="Harvard")) == "Thesis"


@pytest.mark.parametrize(
    "url, expected",
    [
        ("https://arxiv.org/abs/2401.00001", "arXiv"),
        ("https://www.biorxiv.org/content/10.1101/2024.01.01", "bioRxiv"),
        ("https://www.medrxiv.org/content/10.1101/2024.02.02", "medRxiv"),
        ("https://osf.io/preprints/abcd", "OSF Preprints"),
        ("https://papers.ssrn.com/sol3/papers.cfm?abstract_id=1", "SSRN"),
        ("https://example.org/paper", "Preprint"),
        (None, "Preprint"),
    ],
)
def test_preprint_server_from_url(url, expected):
    assert preprint_server(url) == expected


def test_biorxiv_preprint_ignores_other_fields():
    item = _item("preprint", url="https://www.biorxiv.org/x", repository="Cold Spring Harbor")
    assert format_venue(item) == "bioRxiv"


def test_conference_paper():
    item = _item("conferencePaper", proceedingsTitle="IEEE VIS 2023")
    assert format_venue(item) == "IEEE VIS 2023"


def test_book_section():
    item = _item("bookSection", bookTitle="Methods in Genomics")
    assert format_venue(item) == "Methods in Genomics (Book)"


def test_report_with_and_without_pages():
    assert format_venue(_item("report", institution="NIH", pages="12")) == "NIH 12"
    assert format_venue(_item("report", institution="NIH")) == "NIH"


def test_unknown_type_logs_and_returns_empty(caplog):
    item = _item("blogPost")
    with caplog.at_level(logging.WARNING, logger="labpubs.formatting.citation"):
        assert format_venue(item) == ""
    assert "blogPost" in caplog.text


# ── Citation ─────────────────────────────────────────────────────────


def test_full_citation():
    item = _item(
        publicationTitle="Nature", volume="600", issue="2", pages="100-110",
        creators=[
            {"creatorType": "author", "firstName": "Jane Ann", "lastName": "Doe"},
            {"creatorType": "author", "name": "HuBMAP Consortium"},
        ],
    )
    assert format_citation(item) == (
        'JA Doe and HuBMAP Consortium, "Seeing the genome", Nature 600(2):100-110 (2023).'
    )


def test_rich_citation_adds_emphasis():
    item = _item(publicationTitle="Nature", volume="600", issue="2", pages="100-110")
    assert format_citation(item, rich=True) == (
        "JA Doe, **Seeing the genome**, *Nature* **600**(2):100-110 (2023)."
    )


def test_unknown_type_citation_does_not_raise():
    item = _item("blogPost", year=2020)
    assert format_citation(item) == 'JA Doe, "Seeing the genome",  (2020).'


def test_format_item_projection():
    item = _item("thesis", year=2018)
    assert format_item(item) == FormattedCitation(
        title="Seeing the genome", authors="JA Doe", venue="Thesis", year=2018
    )
