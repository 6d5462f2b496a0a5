"""Extract and keep a table of contents in sync with rendered sections.

Headings come from three places: ``title``/``headingLevel`` metadata that a
section declares, heading tags embedded in a section's raw HTML, and the
headings actually present in mounted output. The pure helpers here slugify,
merge and de-duplicate those lists. Mounted output is reached through the
:class:`HeadingSource` port, so the synchronisation logic in
:class:`TocObserver` never depends on a particular document model.
:class:`SoupHeadingSource` is the BeautifulSoup adapter used when composing
pages.

Examples
--------
>>> extract_html_headings("<h2>Best Time to Visit</h2><h3 id='custom'>Tips</h3>")
[Heading(id='best-time-to-visit', title='Best Time to Visit', level=2), Heading(id='custom', title='Tips', level=3)]
>>> slugify(slugify("Where to Stay in Como?"))
'where-to-stay-in-como'
"""

from __future__ import annotations

import collections
import collections.abc as cabc
import contextlib
import html
import re
import typing as typ

from bs4 import BeautifulSoup

from travelblog_pages._constants import TOC_IGNORE_ATTR

from .diagnostics import DiagnosticEvent, DiagnosticSink, EventKind, null_sink
from .models import Heading, HeadingRef

if typ.TYPE_CHECKING:
    from bs4 import Tag

    from .models import Section

SLUG_MAX_LENGTH = 50
HEADING_LEVELS = range(2, 7)
HEADING_TAGS = [f"h{level}" for level in HEADING_LEVELS]
CONTENT_FIELDS = ("content", "html")

HEADING_PATTERN = re.compile(
    r"<h([2-6])(\s[^>]*)?>(.*?)</h\1\s*>", re.IGNORECASE | re.DOTALL
)
ID_ATTR_PATTERN = re.compile(
    r"""(?:^|\s)id\s*=\s*(?:"([^"]*)"|'([^']*)'|([^\s"'>]+))""", re.IGNORECASE
)
TAG_PATTERN = re.compile(r"<[^>]+>")
_STRIP_PATTERN = re.compile(r"[^\w\s-]")
_WHITESPACE_PATTERN = re.compile(r"\s+")


def slugify(text: str, max_length: int = SLUG_MAX_LENGTH) -> str:
    """Return an anchor id for ``text``.

    The text is lowercased, characters other than word characters, whitespace
    and hyphens are removed, whitespace runs become single hyphens, and the
    result is truncated to ``max_length``. Running the function on its own
    output returns the same value.
    """
    cleaned = _STRIP_PATTERN.sub("", text.strip().lower())
    slug = _WHITESPACE_PATTERN.sub("-", cleaned.strip())[:max_length]
    return slug or "section"


def _clean_title(markup: str) -> str:
    text = html.unescape(TAG_PATTERN.sub("", markup))
    return " ".join(text.split())


def extract_html_headings(markup: str) -> list[Heading]:
    """Return the level 2-6 headings found in raw HTML ``markup``.

    Existing ``id`` attributes are kept; other headings get a slug of their
    text. Headings without text are ignored.
    """
    headings: list[Heading] = []
    for match in HEADING_PATTERN.finditer(markup or ""):
        level = int(match.group(1))
        title = _clean_title(match.group(3))
        if not title:
            continue
        id_match = ID_ATTR_PATTERN.search(match.group(2) or "")
        existing = ""
        if id_match:
            existing = next(
                (group for group in id_match.groups() if group is not None), ""
            ).strip()
        headings.append(
            Heading(id=existing or slugify(title), title=title, level=level)
        )
    return headings


def declared_heading(data: typ.Mapping[str, typ.Any]) -> Heading | None:
    """Return the heading a section declares through ``title``/``headingLevel``."""
    title = " ".join(str(data.get("title") or "").split())
    raw_level = data.get("headingLevel", data.get("heading_level"))
    if not title or raw_level is None:
        return None
    try:
        level = int(raw_level)
    except (TypeError, ValueError):
        return None
    if level not in HEADING_LEVELS:
        return None
    return Heading(id=slugify(title), title=title, level=level)


def declared_headings(sections: cabc.Iterable[Section]) -> list[Heading]:
    """Return the declared headings of the active ``sections`` in order."""
    headings: list[Heading] = []
    for section in sections:
        if not section.is_active:
            continue
        heading = declared_heading(section.payload())
        if heading is not None:
            headings.append(heading)
    return headings


def merge_headings(*groups: cabc.Iterable[Heading]) -> list[Heading]:
    """Concatenate heading lists, dropping repeated ``(id, title, level)`` triples."""
    seen: set[Heading] = set()
    merged: list[Heading] = []
    for group in groups:
        for heading in group:
            if heading in seen:
                continue
            seen.add(heading)
            merged.append(heading)
    return merged


def extract_headings(
    sections: cabc.Iterable[Section], *, diagnostics: DiagnosticSink = null_sink
) -> list[Heading]:
    """Statically extract the table of contents of ``sections``.

    Parameters
    ----------
    sections : Iterable[Section]
        Sections in display order; inactive ones are ignored.
    diagnostics : DiagnosticSink, optional
        Receives one ``HEADINGS_EXTRACTED`` event.

    Returns
    -------
    list[Heading]
        Declared and embedded headings, de-duplicated in first-seen order.
    """
    collected: list[Heading] = []
    for section in sections:
        if not section.is_active:
            continue
        payload = section.payload()
        heading = declared_heading(payload)
        if heading is not None:
            collected.append(heading)
        for field in CONTENT_FIELDS:
            value = payload.get(field)
            if isinstance(value, str):
                collected.extend(extract_html_headings(value))
    headings = merge_headings(collected)
    diagnostics(
        DiagnosticEvent(
            EventKind.HEADINGS_EXTRACTED,
            f"extracted {len(headings)} headings",
            details={"count": len(headings), "source": "static"},
        )
    )
    return headings


def assign_heading_ids(refs: cabc.Iterable[HeadingRef]) -> list[Heading]:
    """Return headings for ``refs``, writing generated ids back to the source.

    Headings that already carry an id keep it. The others get the slug of
    their title, suffixed with the zero-based occurrence index of that slug
    among all headings in document order (``tips``, ``tips-1``, ``tips-2``).
    A suffix already taken by another heading is skipped, so generated ids
    never repeat an id present anywhere in ``refs``.
    """
    titled = [ref for ref in refs if ref.title]
    used = {ref.id for ref in titled if ref.id}
    occurrences: collections.Counter[str] = collections.Counter()
    headings: list[Heading] = []
    for ref in titled:
        base = slugify(ref.title)
        index = occurrences[base]
        occurrences[base] += 1
        heading_id = ref.id
        if not heading_id:
            heading_id = base if index == 0 else f"{base}-{index}"
            while heading_id in used:
                index += 1
                heading_id = f"{base}-{index}"
            used.add(heading_id)
            if ref.write_id is not None:
                ref.write_id(heading_id)
            ref.id = heading_id
        headings.append(Heading(id=heading_id, title=ref.title, level=ref.level))
    return headings


class HeadingSource(typ.Protocol):
    """Port onto mounted output that can be scanned and watched."""

    def scan(self) -> list[HeadingRef]: ...

    def on_change(
        self, callback: cabc.Callable[[], None]
    ) -> cabc.Callable[[], None]: ...


class SoupHeadingSource:
    """BeautifulSoup adapter for :class:`HeadingSource`.

    ``root`` is the content container element. Content mounted through
    :meth:`mount` or :meth:`replace` notifies subscribers; writing heading ids
    does not.
    """

    def __init__(self, root: Tag) -> None:
        self.root = root
        self._subscribers: list[cabc.Callable[[], None]] = []

    @classmethod
    def from_markup(cls, markup: str) -> SoupHeadingSource:
        """Return a source rooted at a fresh ``<div>`` holding ``markup``."""
        soup = BeautifulSoup("<div></div>", "html.parser")
        source = cls(soup.div)
        source._append(markup)
        return source

    @property
    def html(self) -> str:
        return str(self.root)

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def scan(self) -> list[HeadingRef]:
        refs: list[HeadingRef] = []
        for element in self.root.find_all(HEADING_TAGS):
            if element.has_attr(TOC_IGNORE_ATTR) or element.find_parent(
                attrs={TOC_IGNORE_ATTR: True}
            ):
                continue
            title = " ".join(element.get_text(" ").split())
            existing = str(element.get("id") or "").strip()
            refs.append(
                HeadingRef(
                    level=int(element.name[1]),
                    title=title,
                    id=existing or None,
                    write_id=_id_writer(element),
                )
            )
        return refs

    def on_change(
        self, callback: cabc.Callable[[], None]
    ) -> cabc.Callable[[], None]:
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            with contextlib.suppress(ValueError):
                self._subscribers.remove(callback)

        return unsubscribe

    def mount(self, markup: str) -> None:
        """Append ``markup`` to the container and notify subscribers."""
        self._append(markup)
        self.notify()

    def replace(self, markup: str) -> None:
        """Replace the container's children with ``markup`` and notify."""
        self.root.clear()
        self._append(markup)
        self.notify()

    def notify(self) -> None:
        """Tell subscribers that the container's descendants changed."""
        for callback in list(self._subscribers):
            callback()

    def _append(self, markup: str) -> None:
        fragment = BeautifulSoup(markup, "html.parser")
        for child in list(fragment.contents):
            self.root.append(child.extract())


def _id_writer(element: Tag) -> cabc.Callable[[str], None]:
    def write(value: str) -> None:
        element["id"] = value

    return write


class TocObserver:
    """Keep a heading list in sync with a :class:`HeadingSource`.

    Each refresh rescans the source, assigns missing ids and merges the
    result after the declared headings of ``sections``. A change reported
    while a refresh is running marks the observer dirty and triggers one more
    pass, bounded by ``max_passes``.
    """

    def __init__(
        self,
        source: HeadingSource,
        sections: cabc.Iterable[Section] = (),
        *,
        on_update: cabc.Callable[[list[Heading]], None] | None = None,
        max_passes: int = 5,
    ) -> None:
        self.source = source
        self.sections = tuple(sections)
        self.on_update = on_update
        self.max_passes = max_passes
        self.headings: list[Heading] = []
        self.passes = 0
        self._unsubscribe: cabc.Callable[[], None] | None = None
        self._running = False
        self._dirty = False

    @property
    def active(self) -> bool:
        return self._unsubscribe is not None

    def start(self) -> list[Heading]:
        """Subscribe to the source and run the first scan."""
        if self._unsubscribe is None:
            self._unsubscribe = self.source.on_change(self.refresh)
        return self.refresh()

    def stop(self) -> None:
        """Unsubscribe from the source; safe to call more than once."""
        unsubscribe, self._unsubscribe = self._unsubscribe, None
        if unsubscribe is not None:
            unsubscribe()

    def refresh(self) -> list[Heading]:
        """Rescan the source and publish the heading list when it changed."""
        if self._running:
            self._dirty = True
            return self.headings
        self._running = True
        try:
            for _ in range(self.max_passes):
                self._dirty = False
                self.passes += 1
                found = assign_heading_ids(self.source.scan())
                headings = merge_headings(declared_headings(self.sections), found)
                if headings != self.headings:
                    self.headings = headings
                    if self.on_update is not None:
                        self.on_update(list(headings))
                if not self._dirty:
                    break
        finally:
            self._running = False
        return self.headings

    def __enter__(self) -> TocObserver:
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()


@contextlib.contextmanager
def observe(
    source: HeadingSource,
    sections: cabc.Iterable[Section] = (),
    *,
    on_update: cabc.Callable[[list[Heading]], None] | None = None,
) -> cabc.Iterator[TocObserver]:
    """Observe ``source`` for the duration of the ``with`` block.

    The observer is always unsubscribed on exit, including when the block
    raises.

    Examples
    --------
    >>> source = SoupHeadingSource.from_markup("<h2>Getting There</h2>")
    >>> with observe(source) as observer:
    ...     source.mount("<h2>Where to Eat</h2>")
    ...     [heading.id for heading in observer.headings]
    ['getting-there', 'where-to-eat']
    >>> source.subscriber_count
    0
    """
    observer = TocObserver(source, sections, on_update=on_update)
    try:
        observer.start()
        yield observer
    finally:
        observer.stop()


__all__ = [
    "HeadingSource",
    "SoupHeadingSource",
    "TocObserver",
    "assign_heading_ids",
    "declared_heading",
    "declared_headings",
    "extract_headings",
    "extract_html_headings",
    "merge_headings",
    "observe",
    "slugify",
]
