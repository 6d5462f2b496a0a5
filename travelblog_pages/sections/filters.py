"""Predicates that keep untouched template boilerplate away from readers.

Both content predicates are deliberately conservative: they only report a
payload as generic when nothing about it has been customised by an editor.
One real FAQ entry, one edited highlight, or a rewritten description is enough
for the section to be shown.

Examples
--------
>>> is_generic_faq_content([])
True
>>> is_generic_faq_content(
...     [{"question": "Is the ferry running in winter?", "answer": "Yes, on a reduced timetable."}]
... )
False
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import typing as typ

from .models import SectionKind

DEFAULT_FAQ_PLACEHOLDER_PHRASES: tuple[str, ...] = (
    "What's the question?",
    "Provide a helpful answer...",
    "Your question here",
    "Your answer here",
    "Question",
    "Answer",
)
DEFAULT_STARTER_PACK_DESCRIPTIONS: tuple[str, ...] = (
    "Everything you need to know at a glance",
)


@dc.dataclass(frozen=True, slots=True)
class PlaceholderHighlight:
    """A hard-coded highlight card shipped with the starter-pack template."""

    title: str
    value: str
    description: str

    def matches(self, item: typ.Mapping[str, typ.Any]) -> bool:
        """Return ``True`` when ``item`` repeats this placeholder verbatim."""
        return (
            _fold(item.get("title")) == _fold(self.title)
            and _fold(item.get("value")) == _fold(self.value)
            and _fold(item.get("description")) == _fold(self.description)
        )


DEFAULT_PLACEHOLDER_HIGHLIGHTS: tuple[PlaceholderHighlight, ...] = (
    PlaceholderHighlight("Perfect Duration", "6-8 days", "Coast and culture combined"),
    PlaceholderHighlight("Budget Range", "€75-220", "Per day, coastal luxury"),
    PlaceholderHighlight("Must-See Spots", "13+ towns", "Dramatic coastal gems"),
    PlaceholderHighlight("Vibe Check", "Coastal perfection", "Where Italy meets the sea"),
)


@dc.dataclass(frozen=True, slots=True)
class FaqFilterConfig:
    """Thresholds and phrases used by :func:`is_generic_faq_content`."""

    min_question_length: int = 10
    min_answer_length: int = 20
    placeholder_phrases: tuple[str, ...] = DEFAULT_FAQ_PLACEHOLDER_PHRASES


@dc.dataclass(frozen=True, slots=True)
class StarterPackFilterConfig:
    """Boilerplate used by :func:`is_generic_starter_pack_content`."""

    placeholder_descriptions: tuple[str, ...] = DEFAULT_STARTER_PACK_DESCRIPTIONS
    placeholder_highlights: tuple[PlaceholderHighlight, ...] = (
        DEFAULT_PLACEHOLDER_HIGHLIGHTS
    )


@dc.dataclass(frozen=True, slots=True)
class FilterConfig:
    """Every knob the section filters read."""

    faq: FaqFilterConfig = dc.field(default_factory=FaqFilterConfig)
    starter_pack: StarterPackFilterConfig = dc.field(
        default_factory=StarterPackFilterConfig
    )
    suppressed_kinds: frozenset[SectionKind] = frozenset(
        {SectionKind.RELATED_ARTICLES, SectionKind.INTERNAL_LINKS}
    )


DEFAULT_FILTERS = FilterConfig()


def _fold(value: object) -> str:
    """Return ``value`` as stripped, case-folded text."""
    if value is None:
        return ""
    return str(value).strip().casefold()


def _as_list(value: object) -> list[typ.Any]:
    if isinstance(value, list | tuple):
        return list(value)
    return []


def normalize_faqs(raw: object) -> list[dict[str, typ.Any]]:
    """Return FAQ entries with ``id``, ``question`` and ``answer`` keys.

    Older rows store the pair as ``title`` and ``content``; entries without an
    id are numbered by their index. Non-mapping entries are ignored.
    """
    faqs: list[dict[str, typ.Any]] = []
    for index, entry in enumerate(_as_list(raw)):
        if not isinstance(entry, cabc.Mapping):
            continue
        faqs.append(
            {
                "id": entry.get("id") or index,
                "question": str(entry.get("question") or entry.get("title") or ""),
                "answer": str(entry.get("answer") or entry.get("content") or ""),
            }
        )
    return faqs


def is_generic_faq_content(
    faqs: cabc.Sequence[typ.Mapping[str, typ.Any]],
    config: FaqFilterConfig | None = None,
) -> bool:
    """Return ``True`` when a FAQ list is unmistakably template boilerplate.

    Parameters
    ----------
    faqs : Sequence[Mapping[str, Any]]
        Normalized entries with ``question`` and ``answer`` keys.
    config : FaqFilterConfig, optional
        Thresholds and placeholder phrases; defaults apply when omitted.

    Returns
    -------
    bool
        ``True`` if the list is empty, if every entry holds nothing but
        placeholder phrases, or if every entry is both a short question and
        a short answer.
    """
    settings = config or FaqFilterConfig()
    if not faqs:
        return True
    phrases = {_fold(phrase) for phrase in settings.placeholder_phrases}

    def is_placeholder(entry: typ.Mapping[str, typ.Any]) -> bool:
        # Blank fields count as untouched, real text in either field keeps it.
        texts = (_fold(entry.get("question")), _fold(entry.get("answer")))
        return any(texts) and all(not text or text in phrases for text in texts)

    def is_too_short(entry: typ.Mapping[str, typ.Any]) -> bool:
        question = str(entry.get("question") or "").strip()
        answer = str(entry.get("answer") or "").strip()
        return (
            len(question) < settings.min_question_length
            and len(answer) < settings.min_answer_length
        )

    return all(is_placeholder(entry) for entry in faqs) or all(
        is_too_short(entry) for entry in faqs
    )


def is_generic_starter_pack_content(
    payload: typ.Mapping[str, typ.Any],
    config: StarterPackFilterConfig | None = None,
) -> bool:
    """Return ``True`` when a starter pack still shows its shipped defaults.

    A blank description counts as boilerplate. The highlight list is read
    from ``highlights`` and falls back to ``items``.
    """
    settings = config or StarterPackFilterConfig()
    description = _fold(payload.get("description"))
    boilerplate = {_fold(text) for text in settings.placeholder_descriptions}
    if description and description not in boilerplate:
        return False
    items = _as_list(payload.get("highlights")) or _as_list(payload.get("items"))
    return all(
        isinstance(item, cabc.Mapping)
        and any(
            placeholder.matches(item)
            for placeholder in settings.placeholder_highlights
        )
        for item in items
    )


def is_suppressed_kind(
    kind: SectionKind | None, config: FilterConfig | None = None
) -> bool:
    """Return ``True`` when ``kind`` is retired and must never render."""
    settings = config or DEFAULT_FILTERS
    return kind is not None and kind in settings.suppressed_kinds


__all__ = [
    "DEFAULT_FILTERS",
    "DEFAULT_PLACEHOLDER_HIGHLIGHTS",
    "FaqFilterConfig",
    "FilterConfig",
    "PlaceholderHighlight",
    "StarterPackFilterConfig",
    "is_generic_faq_content",
    "is_generic_starter_pack_content",
    "is_suppressed_kind",
    "normalize_faqs",
]
