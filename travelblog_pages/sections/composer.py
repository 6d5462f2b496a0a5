"""Compose a post's sections into one page of markup.

The composer orders sections, picks the page layout, renders hero sections
full-bleed and every other active section into a single content container,
then scans the mounted container for headings and inserts the table of
contents as its first child.

Examples
--------
>>> from travelblog_pages.sections.models import RenderContext, Section
>>> page = PageComposer().compose(
...     [Section(id="a", template_id="table-of-contents", data={"items": []})],
...     RenderContext(),
... )
>>> page.layout.name
'html'
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import typing as typ

from bs4 import BeautifulSoup
from markupsafe import Markup

from travelblog_pages._constants import CONTENT_CONTAINER_ATTR

from .diagnostics import EventKind
from .headings import SoupHeadingSource, observe
from .layout import LayoutDecision, classify
from .models import HERO_KINDS, SectionKind
from .renderer import SectionRenderer

if typ.TYPE_CHECKING:
    from .models import Heading, RenderContext, Section


@dc.dataclass(slots=True)
class SectionSlot:
    """A rendered section and its position among the rendered siblings."""

    index: int
    section: Section
    html: Markup


@dc.dataclass(slots=True)
class PageMarkup:
    """Result of :meth:`PageComposer.compose`."""

    html: Markup
    layout: LayoutDecision
    headings: list[Heading]
    hero_slots: list[SectionSlot]
    content_slots: list[SectionSlot]

    @property
    def use_html_layout(self) -> bool:
        return self.layout.use_html_layout


class PageComposer:
    """Arrange rendered sections in the layout chosen for the post."""

    def __init__(self, renderer: SectionRenderer | None = None) -> None:
        self.renderer = renderer or SectionRenderer()
        self.registry = self.renderer.registry

    def compose(
        self, sections: cabc.Sequence[Section], context: RenderContext
    ) -> PageMarkup:
        """Render ``sections`` into a full page body.

        Parameters
        ----------
        sections : Sequence[Section]
            The post's sections in storage order.
        context : RenderContext
            Post metadata, language and render mode.

        Returns
        -------
        PageMarkup
            Page HTML, the layout decision, the table of contents and the
            rendered slots. Sections that render nothing leave no slot behind.
        """
        ordered = sorted(sections, key=lambda section: section.position)
        decision = classify(
            ordered, self.registry, diagnostics=self.renderer.diagnostics
        )
        heroes = [section for section in ordered if self._is_hero(section)]
        content = self._drop_duplicate_why_different(
            [
                section
                for section in ordered
                if section.is_active and not self._is_hero(section)
            ]
        )
        hero_slots = self._render_slots(heroes, context)
        content_slots = self._render_slots(content, context)

        template = (
            "page/html_layout" if decision.use_html_layout else "page/legacy_layout"
        )
        markup = self.renderer.partial(
            template,
            hero_slots=hero_slots,
            content_slots=content_slots,
            context=context,
            container_attr=CONTENT_CONTAINER_ATTR,
        )
        soup = BeautifulSoup(markup, "html.parser")
        headings = self._mount_table_of_contents(
            soup, [slot.section for slot in content_slots]
        )
        self.renderer.emit(
            EventKind.HEADINGS_EXTRACTED,
            f"table of contents has {len(headings)} entries",
            count=len(headings),
            source="dom",
        )
        return PageMarkup(
            html=Markup(str(soup)),
            layout=decision,
            headings=headings,
            hero_slots=hero_slots,
            content_slots=content_slots,
        )

    def _is_hero(self, section: Section) -> bool:
        return self.registry.kind_of(section) in HERO_KINDS

    def _is_why_different(self, section: Section) -> bool:
        if self.registry.kind_of(section) is SectionKind.WHY_DIFFERENT:
            return True
        title = (section.title or "").lower()
        return "why" in title and "different" in title

    def _drop_duplicate_why_different(
        self, sections: list[Section]
    ) -> list[Section]:
        kept: list[Section] = []
        seen = False
        for section in sections:
            if self._is_why_different(section):
                if seen:
                    self.renderer.emit(
                        EventKind.DUPLICATE_DROPPED,
                        "duplicate 'why different' section",
                        section,
                    )
                    continue
                seen = True
            kept.append(section)
        return kept

    def _render_slots(
        self, sections: cabc.Iterable[Section], context: RenderContext
    ) -> list[SectionSlot]:
        slots: list[SectionSlot] = []
        for section in sections:
            html = self.renderer.render_section(section, context)
            if html is None:
                continue
            slots.append(SectionSlot(index=len(slots), section=section, html=html))
        return slots

    def _mount_table_of_contents(
        self, soup: BeautifulSoup, rendered: list[Section]
    ) -> list[Heading]:
        container = soup.find(attrs={CONTENT_CONTAINER_ATTR: True})
        if container is None:
            return []
        with observe(SoupHeadingSource(container), rendered) as observer:
            headings = list(observer.headings)
        if headings:
            toc = BeautifulSoup(
                self.renderer.partial("page/toc", headings=headings), "html.parser"
            )
            for node in reversed(list(toc.contents)):
                container.insert(0, node.extract())
        return headings


__all__ = ["PageComposer", "PageMarkup", "SectionSlot"]
