"""Tests for page composition: ordering, layout, slots and the TOC."""

from __future__ import annotations

import typing as typ

import pytest
from bs4 import BeautifulSoup

from travelblog_pages import _constants
from travelblog_pages.sections.composer import PageComposer
from travelblog_pages.sections.diagnostics import EventKind, RecordingSink
from travelblog_pages.sections.models import (
    RenderContext,
    Section,
    TemplateDescriptor,
)
from travelblog_pages.sections.renderer import SectionRenderer

if typ.TYPE_CHECKING:
    from bs4 import Tag

CONTEXT = RenderContext()


@pytest.fixture
def sink() -> RecordingSink:
    """Return a fresh recording sink."""
    return RecordingSink()


@pytest.fixture
def composer(sink: RecordingSink) -> PageComposer:
    """Return a composer whose events are recorded."""
    return PageComposer(SectionRenderer(diagnostics=sink))


def _rich(
    section_id: str, content: str, position: int = 0, **kwargs: object
) -> Section:
    return Section(
        id=section_id,
        template_id=_constants.RICH_TEXT_TEMPLATE_ID,
        position=position,
        data={"content": content},
        **kwargs,  # type: ignore[arg-type]
    )


def _container(html: str) -> Tag:
    soup = BeautifulSoup(html, "html.parser")
    container = soup.find(attrs={_constants.CONTENT_CONTAINER_ATTR: True})
    assert container is not None, "expected a content container"
    return container


def test_legacy_page_places_heroes_outside_the_panel(composer: PageComposer) -> None:
    """Heroes render full width and content sections share one panel."""
    sections = [
        _rich("body", "<p>Lemons everywhere.</p>", position=1),
        Section(
            id="hero",
            template_id=_constants.HERO_TEMPLATE_ID,
            position=0,
            data={"title": "Amalfi Coast"},
        ),
    ]
    page = composer.compose(sections, CONTEXT)
    assert page.layout.name == "legacy", "expected the legacy layout"
    assert [slot.section.id for slot in page.hero_slots] == ["hero"], (
        "expected the hero to be rendered as a hero slot"
    )
    assert [slot.section.id for slot in page.content_slots] == ["body"], (
        "expected only the body in the content panel"
    )
    soup = BeautifulSoup(page.html, "html.parser")
    assert soup.find(class_="post-page__hero").h1.get_text() == "Amalfi Coast", (
        "expected the hero title"
    )
    assert _container(page.html).find(class_="hero") is None, (
        "expected the hero to stay outside the content panel"
    )


def test_sections_are_ordered_by_position_stably(composer: PageComposer) -> None:
    """Position decides the order and ties keep their input order."""
    sections = [
        _rich("c", "<p>C</p>", position=2),
        _rich("a", "<p>A</p>", position=1),
        _rich("b", "<p>B</p>", position=1),
    ]
    page = composer.compose(sections, CONTEXT)
    assert [slot.section.id for slot in page.content_slots] == ["a", "b", "c"], (
        "expected a stable sort on position"
    )


def test_slot_indexes_skip_empty_sections(
    composer: PageComposer, sink: RecordingSink
) -> None:
    """Sections that render nothing leave no gap in the slot indexes."""
    sections = [
        _rich("first", "<p>One</p>", position=0),
        Section(
            id="faq",
            template_id="faq-section",
            position=1,
            data={"faqs": []},
        ),
        _rich("last", "<p>Two</p>", position=2),
    ]
    page = composer.compose(sections, CONTEXT)
    assert [(slot.index, slot.section.id) for slot in page.content_slots] == [
        (0, "first"),
        (1, "last"),
    ], "expected contiguous slot indexes"
    slots = _container(page.html).find_all(class_="post-page__slot")
    assert [slot["data-slot"] for slot in slots] == ["0", "1"], (
        "expected the rendered slots to carry contiguous indexes"
    )
    assert sink.of_kind(EventKind.SECTION_FILTERED), "expected the FAQ to be filtered"


def test_html_layout_keeps_container_and_prepends_toc(composer: PageComposer) -> None:
    """HTML-style posts get the shared container with the TOC first."""
    sections = [
        Section(
            id="hero",
            template_id=_constants.LEGACY_HTML_HERO_TEMPLATE_ID,
            data={"title": "Lake Como"},
        ),
        _rich(
            "body",
            "<h2>Getting There</h2><p>Fly to Milan.</p><h2>Getting There</h2>",
            position=1,
        ),
    ]
    page = composer.compose(sections, CONTEXT)
    assert page.use_html_layout, "expected the HTML layout"
    container = _container(page.html)
    first = container.find(recursive=False)
    assert first is not None, "expected the container to have children"
    assert first.name == "nav", f"expected the TOC first, got {first.name}"
    assert "table-of-contents" in first["class"], "expected the generated TOC"
    links = [link["href"] for link in first.find_all("a")]
    assert links == ["#getting-there", "#getting-there-1"], f"unexpected links {links}"
    ids = [heading["id"] for heading in container.find_all("h2")]
    assert ids == ["getting-there", "getting-there-1"], (
        f"expected anchors to be written onto the headings, got {ids}"
    )


def test_headings_merge_declared_and_dom_entries(composer: PageComposer) -> None:
    """Declared headings come first and DOM repeats of them are dropped."""
    sections = [
        _rich(
            "body",
            "<h2>Best Time to Visit</h2><h3 id='ferries'>Ferries</h3>",
            position=0,
        ),
        Section(
            id="faq",
            template_id=_constants.FAQ_TEMPLATE_ID,
            position=1,
            title="Amalfi FAQ",
            data={
                "headingLevel": 2,
                "faqs": [
                    {
                        "question": "Is the coast walkable?",
                        "answer": "The Path of the Gods links Bomerano and Nocelle.",
                    }
                ],
            },
        ),
    ]
    page = composer.compose(sections, CONTEXT)
    assert [(heading.id, heading.level) for heading in page.headings] == [
        ("amalfi-faq", 2),
        ("best-time-to-visit", 2),
        ("ferries", 3),
    ], f"unexpected headings {page.headings}"


def test_toc_ignores_authored_table_of_contents(composer: PageComposer) -> None:
    """Headings inside an authored TOC section are not listed again."""
    sections = [
        Section(
            id="toc",
            template_id=_constants.TABLE_OF_CONTENTS_TEMPLATE_ID,
            data={"items": [{"title": "Getting There", "id": "getting-there"}]},
        ),
        _rich("body", "<h2>Getting There</h2>", position=1),
    ]
    page = composer.compose(sections, CONTEXT)
    assert [heading.title for heading in page.headings] == ["Getting There"], (
        f"expected only the body heading, got {page.headings}"
    )


def test_page_without_headings_has_no_toc(composer: PageComposer) -> None:
    """No headings means no generated navigation."""
    page = composer.compose([_rich("body", "<p>Just text.</p>")], CONTEXT)
    assert page.headings == [], "expected no headings"
    assert BeautifulSoup(page.html, "html.parser").find(
        class_="table-of-contents"
    ) is None, "expected no TOC element"


def test_empty_legacy_page_has_no_panel(composer: PageComposer) -> None:
    """The legacy panel only appears when a content section rendered."""
    sections = [
        Section(id="hero", template_id=_constants.HERO_TEMPLATE_ID, data={"title": "x"})
    ]
    page = composer.compose(sections, CONTEXT)
    soup = BeautifulSoup(page.html, "html.parser")
    assert soup.find(class_="post-page__panel") is None, "expected no content panel"


def test_duplicate_why_different_is_dropped(
    composer: PageComposer, sink: RecordingSink
) -> None:
    """Only the first 'why different' section of a post renders."""
    sections = [
        Section(
            id="why-1",
            template_id="unregistered-why",
            position=0,
            data={"reasons": [{"title": "Cliffs"}]},
            template=TemplateDescriptor("why", "WhyDestinationDifferent"),
        ),
        _rich(
            "why-2",
            "<p>Because lemons.</p>",
            position=1,
            title="Why Amalfi Is Different",
        ),
        _rich("body", "<p>Body</p>", position=2),
    ]
    page = composer.compose(sections, CONTEXT)
    assert [slot.section.id for slot in page.content_slots] == ["why-1", "body"], (
        "expected the second 'why different' section to be dropped"
    )
    dropped = sink.of_kind(EventKind.DUPLICATE_DROPPED)
    assert [event.section_id for event in dropped] == ["why-2"], (
        "expected the dropped section to be reported"
    )


def test_compose_reports_layout_and_dom_headings(
    composer: PageComposer, sink: RecordingSink
) -> None:
    """Composition emits the layout decision and the final heading count."""
    composer.compose([_rich("body", "<h2>Tips</h2>")], CONTEXT)
    assert sink.of_kind(EventKind.LAYOUT_DECIDED), "expected a layout event"
    dom_events = [
        event
        for event in sink.of_kind(EventKind.HEADINGS_EXTRACTED)
        if event.details.get("source") == "dom"
    ]
    assert [event.details["count"] for event in dom_events] == [1], (
        "expected one DOM heading event"
    )


def test_html_layout_without_content_has_no_container(
    composer: PageComposer,
) -> None:
    """An HTML-style post whose content all renders nothing keeps only its hero."""
    sections = [
        Section(
            id="hero",
            template_id=_constants.LEGACY_HTML_HERO_TEMPLATE_ID,
            data={"title": "Lake Como"},
        ),
        Section(
            id="faq",
            template_id=_constants.FAQ_TEMPLATE_ID,
            position=1,
            data={"faqs": []},
        ),
    ]
    page = composer.compose(sections, CONTEXT)
    assert page.use_html_layout, "expected the HTML layout"
    assert page.content_slots == [], "expected no content slots"
    soup = BeautifulSoup(page.html, "html.parser")
    assert soup.find(attrs={_constants.CONTENT_CONTAINER_ATTR: True}) is None, (
        "expected no empty content container"
    )
    assert soup.find(class_="post-page__hero") is not None, "expected the hero"
