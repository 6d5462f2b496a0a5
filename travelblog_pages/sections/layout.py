"""Choose one page layout for a whole post."""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import typing as typ

from travelblog_pages._constants import HTML_LAYOUT_TEMPLATE_IDS

from .diagnostics import DiagnosticEvent, DiagnosticSink, EventKind, null_sink
from .models import HTML_LAYOUT_KINDS

if typ.TYPE_CHECKING:
    from .models import Section
    from .registry import TemplateRegistry


@dc.dataclass(frozen=True, slots=True)
class LayoutDecision:
    """Outcome of :func:`classify`.

    ``trigger_section_id`` and ``trigger_template_id`` name the first section
    that selected the HTML layout; both are ``None`` for the legacy layout.
    """

    use_html_layout: bool
    trigger_section_id: str | None = None
    trigger_template_id: str | None = None

    @property
    def name(self) -> str:
        return "html" if self.use_html_layout else "legacy"


def classify(
    sections: cabc.Sequence[Section],
    registry: TemplateRegistry,
    *,
    diagnostics: DiagnosticSink = null_sink,
) -> LayoutDecision:
    """Decide between the HTML-style and legacy layouts.

    Every section counts, active or not. The page uses the HTML layout as
    soon as one section resolves to an HTML-style kind or carries one of the
    literal HTML hero identifiers. The alternate hero id resolves to the skip
    kind, so it only selects the layout through its raw identifier.

    Parameters
    ----------
    sections : Sequence[Section]
        The post's full, unfiltered section list.
    registry : TemplateRegistry
        Registry used to resolve each section's template identifier.
    diagnostics : DiagnosticSink, optional
        Receives one ``LAYOUT_DECIDED`` event.

    Returns
    -------
    LayoutDecision
        The chosen layout and the section that triggered it.
    """
    decision = LayoutDecision(use_html_layout=False)
    for section in sections:
        if section.template_id in HTML_LAYOUT_TEMPLATE_IDS or (
            registry.kind_of(section) in HTML_LAYOUT_KINDS
        ):
            decision = LayoutDecision(
                use_html_layout=True,
                trigger_section_id=section.id,
                trigger_template_id=section.template_id,
            )
            break
    diagnostics(
        DiagnosticEvent(
            EventKind.LAYOUT_DECIDED,
            f"using {decision.name} layout",
            section_id=decision.trigger_section_id,
            template_id=decision.trigger_template_id,
            details={"layout": decision.name, "section_count": len(sections)},
        )
    )
    return decision


__all__ = ["LayoutDecision", "classify"]
