"""Tests for heading extraction and the live table-of-contents observer."""

from __future__ import annotations

import pytest
from bs4 import BeautifulSoup

from travelblog_pages.sections.diagnostics import EventKind, RecordingSink
from travelblog_pages.sections.headings import (
    SoupHeadingSource,
    TocObserver,
    assign_heading_ids,
    declared_heading,
    extract_headings,
    extract_html_headings,
    merge_headings,
    observe,
    slugify,
)
from travelblog_pages.sections.models import Heading, HeadingRef, Section


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("Best Time to Visit", "best-time-to-visit"),
        ("Where to Stay in Como?", "where-to-stay-in-como"),
        ("  Day-by-day   plan ", "day-by-day-plan"),
        ("Café & Gelato", "café-gelato"),
        ("!!!", "section"),
    ],
)
def test_slugify(text: str, expected: str) -> None:
    """Slugs are lowercase, punctuation-free and hyphenated."""
    assert slugify(text) == expected, f"unexpected slug for {text!r}"


def test_slugify_truncates_and_is_idempotent() -> None:
    """Long titles are cut to fifty characters and stay stable."""
    slug = slugify("A very long heading " * 10)
    assert len(slug) <= 50, f"expected at most 50 characters, got {len(slug)}"
    assert slugify(slug) == slug, "expected slugify to be idempotent"


def test_extract_html_headings_keeps_ids_and_order() -> None:
    """Existing ids are kept and headings stay in document order."""
    markup = (
        "<h1>Ignored</h1><h2>Getting <em>There</em></h2>"
        "<h3 id='ferries'>By Ferry</h3><h4 class=\"x\" id=bus>Bus &amp; Coach</h4>"
        "<h2>   </h2>"
    )
    assert extract_html_headings(markup) == [
        Heading("getting-there", "Getting There", 2),
        Heading("ferries", "By Ferry", 3),
        Heading("bus", "Bus & Coach", 4),
    ], "unexpected headings extracted from markup"


@pytest.mark.parametrize(
    ("data", "expected"),
    [
        ({"title": "Amalfi FAQ", "headingLevel": 2}, Heading("amalfi-faq", "Amalfi FAQ", 2)),
        ({"title": "Tips", "heading_level": "3"}, Heading("tips", "Tips", 3)),
        ({"title": "Tips"}, None),
        ({"title": "Tips", "headingLevel": 1}, None),
        ({"title": "", "headingLevel": 2}, None),
        ({"title": "Tips", "headingLevel": "big"}, None),
    ],
)
def test_declared_heading(data: dict[str, object], expected: Heading | None) -> None:
    """Only titles with a level between 2 and 6 become headings."""
    assert declared_heading(data) == expected, f"unexpected heading for {data}"


def test_merge_headings_drops_repeated_triples() -> None:
    """Headings repeated with the same id, title and level appear once."""
    first = Heading("tips", "Tips", 2)
    merged = merge_headings([first], [first, Heading("tips", "Tips", 3)])
    assert merged == [first, Heading("tips", "Tips", 3)], (
        "expected only exact duplicates to be dropped"
    )


def test_extract_headings_reads_declared_and_embedded_headings() -> None:
    """Active sections contribute declared and embedded headings."""
    sink = RecordingSink()
    sections = [
        Section(
            id="body",
            template_id="rich-text-editor",
            data={"content": "<h2>Getting There</h2><h3>By Bus</h3>"},
        ),
        Section(
            id="faq",
            template_id="faq-section",
            title="Amalfi FAQ",
            data={"headingLevel": 2},
        ),
        Section(
            id="hidden",
            template_id="rich-text-editor",
            is_active=False,
            data={"content": "<h2>Draft</h2>"},
        ),
    ]
    headings = extract_headings(sections, diagnostics=sink)
    assert [heading.id for heading in headings] == [
        "getting-there",
        "by-bus",
        "amalfi-faq",
    ], f"unexpected heading ids {headings}"
    event = sink.of_kind(EventKind.HEADINGS_EXTRACTED)[0]
    assert event.details == {"count": 3, "source": "static"}, (
        f"unexpected event details {event.details}"
    )


def test_assign_heading_ids_suffixes_repeats() -> None:
    """Repeated titles get occurrence suffixes and ids are written back."""
    written: list[str] = []
    refs = [
        HeadingRef(2, "Tips", write_id=written.append),
        HeadingRef(2, "Tips", id="custom"),
        HeadingRef(3, "Tips", write_id=written.append),
        HeadingRef(2, "", write_id=written.append),
    ]
    headings = assign_heading_ids(refs)
    assert [heading.id for heading in headings] == ["tips", "custom", "tips-2"], (
        f"unexpected ids {headings}"
    )
    assert written == ["tips", "tips-2"], f"unexpected written ids {written}"
    assert refs[2].id == "tips-2", "expected the ref to remember its new id"


def test_assign_heading_ids_skips_taken_suffixes() -> None:
    """A generated suffix never reuses an id another heading already has."""
    written: list[str] = []
    refs = [
        HeadingRef(2, "Tips", write_id=written.append),
        HeadingRef(2, "Tips 1", write_id=written.append),
        HeadingRef(2, "Tips", write_id=written.append),
    ]
    ids = [heading.id for heading in assign_heading_ids(refs)]
    assert ids == ["tips", "tips-1", "tips-2"], f"unexpected ids {ids}"
    assert written == ids, f"unexpected written ids {written}"


def test_assign_heading_ids_avoids_existing_ids() -> None:
    """Ids already present later in the document are not handed out again."""
    refs = [
        HeadingRef(2, "Ferries"),
        HeadingRef(2, "Ferries"),
        HeadingRef(3, "Timetable", id="ferries-1"),
    ]
    ids = [heading.id for heading in assign_heading_ids(refs)]
    assert ids == ["ferries", "ferries-2", "ferries-1"], f"unexpected ids {ids}"
    assert len(set(ids)) == len(ids), "expected every id to be unique"


def test_soup_source_skips_ignored_headings() -> None:
    """Headings inside ``data-toc-ignore`` regions are not part of the TOC."""
    source = SoupHeadingSource.from_markup(
        '<nav data-toc-ignore="true"><h2>Contents</h2></nav>'
        '<h2 data-toc-ignore="true">Sidebar</h2><h2>Getting There</h2>'
    )
    assert [ref.title for ref in source.scan()] == ["Getting There"], (
        "expected ignored headings to be skipped"
    )


def test_observer_writes_ids_to_the_document() -> None:
    """Starting the observer assigns anchors to mounted headings."""
    source = SoupHeadingSource.from_markup("<h2>Tips</h2><h2>Tips</h2>")
    observer = TocObserver(source)
    headings = observer.start()
    assert [heading.id for heading in headings] == ["tips", "tips-1"], (
        f"unexpected ids {headings}"
    )
    soup = BeautifulSoup(source.html, "html.parser")
    assert [tag["id"] for tag in soup.find_all("h2")] == ["tips", "tips-1"], (
        "expected the ids to be written onto the elements"
    )
    observer.stop()


def test_observer_follows_late_content() -> None:
    """Content mounted after start is picked up and published."""
    updates: list[list[Heading]] = []
    source = SoupHeadingSource.from_markup("<h2>Getting There</h2>")
    sections = [
        Section(
            id="faq", template_id="faq-section", title="FAQ", data={"headingLevel": 2}
        )
    ]
    with observe(source, sections, on_update=updates.append) as observer:
        source.mount("<h3>By Ferry</h3>")
        assert [heading.id for heading in observer.headings] == [
            "faq",
            "getting-there",
            "by-ferry",
        ], f"unexpected headings {observer.headings}"
    assert len(updates) == 2, f"expected two published updates, got {len(updates)}"


def test_observer_does_not_publish_unchanged_lists() -> None:
    """A rescan that finds the same headings publishes nothing."""
    updates: list[list[Heading]] = []
    source = SoupHeadingSource.from_markup("<h2>Getting There</h2>")
    with observe(source, on_update=updates.append):
        source.notify()
        source.mount("<p>No headings here</p>")
    assert len(updates) == 1, f"expected a single update, got {len(updates)}"


def test_observe_unsubscribes_when_block_raises() -> None:
    """The subscription is released on every exit path."""
    source = SoupHeadingSource.from_markup("<h2>Getting There</h2>")
    with pytest.raises(RuntimeError, match="boom"), observe(source):
        assert source.subscriber_count == 1, "expected an active subscription"
        msg = "boom"
        raise RuntimeError(msg)
    assert source.subscriber_count == 0, "expected the subscription to be released"


def test_stop_is_idempotent() -> None:
    """Stopping twice is harmless and ends notifications."""
    source = SoupHeadingSource.from_markup("<h2>One</h2>")
    observer = TocObserver(source)
    observer.start()
    observer.stop()
    observer.stop()
    assert not observer.active, "expected the observer to be inactive"
    source.mount("<h2>Two</h2>")
    assert [heading.id for heading in observer.headings] == ["one"], (
        "expected no refresh after stop"
    )


def test_changes_during_refresh_trigger_another_pass() -> None:
    """A change reported mid-scan is applied in a follow-up pass."""
    source = SoupHeadingSource.from_markup("<h2>One</h2>")
    mounted = False

    def on_update(headings: list[Heading]) -> None:
        nonlocal mounted
        if not mounted:
            mounted = True
            source.mount("<h2>Two</h2>")

    with observe(source, on_update=on_update) as observer:
        assert [heading.id for heading in observer.headings] == ["one", "two"], (
            f"expected the nested mount to be picked up, got {observer.headings}"
        )
        assert observer.passes == 2, f"expected two passes, got {observer.passes}"
