"""Load renderer configuration YAML into typed dataclasses."""

from __future__ import annotations

import typing as typ

from travelblog_pages.sections.filters import (
    DEFAULT_FAQ_PLACEHOLDER_PHRASES,
    DEFAULT_PLACEHOLDER_HIGHLIGHTS,
    DEFAULT_STARTER_PACK_DESCRIPTIONS,
    FaqFilterConfig,
    FilterConfig,
    PlaceholderHighlight,
    StarterPackFilterConfig,
)
from travelblog_pages.sections.models import (
    RenderMode,
    SectionKind,
    TemplateDescriptor,
)
from travelblog_pages.sections.registry import AliasTable, RegistryError

from .helpers import _optional_str, _parse_int, _read_yaml, _string_tuple
from .models import ConfigError, RendererConfig

if typ.TYPE_CHECKING:
    from pathlib import Path

DEFAULT_SUPPRESSED_KINDS = (
    SectionKind.RELATED_ARTICLES,
    SectionKind.INTERNAL_LINKS,
)


def load_renderer_config(path: Path | None = None) -> RendererConfig:
    """Load the YAML file describing render mode, filters and alias tables.

    Parameters
    ----------
    path : Path, optional
        Filesystem path to the renderer configuration (for example,
        ``config/renderer.yaml``). When ``None`` the built-in defaults are
        returned.

    Returns
    -------
    RendererConfig
        Parsed configuration. Keys missing from the file keep their defaults.

    Raises
    ------
    FileNotFoundError
        If ``path`` does not exist.
    ConfigError
        If a section of the file has the wrong shape, names an unknown render
        mode or section kind, or declares an invalid alias table.

    Examples
    --------
    >>> from pathlib import Path
    >>> config = load_renderer_config(Path("config/renderer.yaml"))  # doctest: +SKIP
    >>> config.filters.faq.min_question_length  # doctest: +SKIP
    10
    """
    if path is None:
        return RendererConfig()
    raw = _read_yaml(path, label="Renderer configuration")
    renderer = _section(raw, "renderer")
    filters = _section(raw, "filters")
    templates = _section(raw, "templates")

    return RendererConfig(
        mode=parse_mode(renderer.get("mode")),
        filters=FilterConfig(
            faq=_build_faq_filter(_section(filters, "faq")),
            starter_pack=_build_starter_pack_filter(_section(filters, "starter_pack")),
            suppressed_kinds=_build_suppressed_kinds(renderer.get("suppressed_kinds")),
        ),
        alias_tables=_build_alias_tables(templates.get("aliases")),
    )


def parse_mode(value: object) -> RenderMode:
    """Return the render mode named by ``value``; ``None`` means production."""
    if value is None:
        return RenderMode.PRODUCTION
    try:
        return RenderMode(str(value).strip().lower())
    except ValueError:
        choices = ", ".join(mode.value for mode in RenderMode)
        msg = f"Unknown render mode '{value}'; expected one of: {choices}."
        raise ConfigError(msg) from None


def _section(raw: typ.Mapping[str, typ.Any], key: str) -> dict[str, typ.Any]:
    match raw.get(key):
        case None:
            return {}
        case dict() as data:
            return data
        case _:
            msg = f"'{key}' must be a mapping."
            raise ConfigError(msg)


def _build_suppressed_kinds(value: object) -> frozenset[SectionKind]:
    if value is None:
        return frozenset(DEFAULT_SUPPRESSED_KINDS)
    kinds: set[SectionKind] = set()
    for name in _string_tuple(value, field="renderer.suppressed_kinds"):
        kind = SectionKind.parse(name)
        if kind is None:
            msg = f"Unknown section kind '{name}' in renderer.suppressed_kinds."
            raise ConfigError(msg)
        kinds.add(kind)
    return frozenset(kinds)


def _build_faq_filter(payload: typ.Mapping[str, typ.Any]) -> FaqFilterConfig:
    base = FaqFilterConfig()
    phrases = payload.get("placeholder_phrases")
    return FaqFilterConfig(
        min_question_length=_parse_int(
            payload.get("min_question_length"),
            field="filters.faq.min_question_length",
            default=base.min_question_length,
        ),
        min_answer_length=_parse_int(
            payload.get("min_answer_length"),
            field="filters.faq.min_answer_length",
            default=base.min_answer_length,
        ),
        placeholder_phrases=DEFAULT_FAQ_PLACEHOLDER_PHRASES
        if phrases is None
        else _string_tuple(phrases, field="filters.faq.placeholder_phrases"),
    )


def _build_starter_pack_filter(
    payload: typ.Mapping[str, typ.Any],
) -> StarterPackFilterConfig:
    descriptions = payload.get("placeholder_descriptions")
    highlights = payload.get("placeholder_highlights")
    return StarterPackFilterConfig(
        placeholder_descriptions=DEFAULT_STARTER_PACK_DESCRIPTIONS
        if descriptions is None
        else _string_tuple(
            descriptions, field="filters.starter_pack.placeholder_descriptions"
        ),
        placeholder_highlights=DEFAULT_PLACEHOLDER_HIGHLIGHTS
        if highlights is None
        else _build_placeholder_highlights(highlights),
    )


def _build_placeholder_highlights(
    value: object,
) -> tuple[PlaceholderHighlight, ...]:
    if not isinstance(value, list):
        msg = "'filters.starter_pack.placeholder_highlights' must be a list."
        raise ConfigError(msg)
    highlights: list[PlaceholderHighlight] = []
    for entry in value:
        match entry:
            case {"title": title, "value": val, "description": description}:
                highlights.append(
                    PlaceholderHighlight(str(title), str(val), str(description))
                )
            case _:
                msg = (
                    "Placeholder highlights require 'title', 'value' and "
                    "'description'."
                )
                raise ConfigError(msg)
    return tuple(highlights)


def _build_alias_tables(value: object) -> list[AliasTable]:
    match value:
        case None:
            return []
        case list() as tables:
            pass
        case _:
            msg = "'templates.aliases' must be a list of alias tables."
            raise ConfigError(msg)
    built: list[AliasTable] = []
    for index, table in enumerate(tables):
        match table:
            case {"entries": dict() as entries, **rest}:
                name = _optional_str(rest.get("name")) or f"config-{index + 1}"
            case _:
                msg = f"Alias table #{index + 1} requires an 'entries' mapping."
                raise ConfigError(msg)
        descriptors = {
            str(template_id): _build_descriptor(name, str(template_id), payload)
            for template_id, payload in entries.items()
        }
        try:
            built.append(AliasTable(name=name, entries=descriptors))
        except RegistryError as exc:
            raise ConfigError(str(exc)) from exc
    return built


def _build_descriptor(
    table: str, template_id: str, payload: object
) -> TemplateDescriptor:
    match payload:
        case str() as component:
            return TemplateDescriptor(name=template_id, component=component)
        case dict() as data:
            component = _optional_str(
                data.get("component") or data.get("component_name")
            )
            if component is None:
                msg = f"Alias '{template_id}' in table '{table}' has no component."
                raise ConfigError(msg)
            return TemplateDescriptor(
                name=_optional_str(data.get("name")) or template_id,
                component=component,
                category=_optional_str(data.get("category")) or "content",
            )
        case _:
            msg = f"Alias '{template_id}' in table '{table}' must be a mapping."
            raise ConfigError(msg)


__all__ = ["load_renderer_config", "parse_mode"]
