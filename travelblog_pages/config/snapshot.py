"""Load exported post snapshots (a post plus its section rows)."""

from __future__ import annotations

import typing as typ

from travelblog_pages.sections.models import (
    AuthorInfo,
    PostContext,
    Section,
    TemplateDescriptor,
)

from .helpers import _optional_str, _parse_bool, _parse_timestamp, _read_yaml
from .models import ConfigError, PostSnapshot

if typ.TYPE_CHECKING:
    from pathlib import Path


def load_post_snapshot(path: Path) -> PostSnapshot:
    """Load a post snapshot from a YAML or JSON file.

    Parameters
    ----------
    path : Path
        Snapshot file holding ``post``, ``language`` and ``sections``.

    Returns
    -------
    PostSnapshot
        The post metadata and its sections in file order.

    Raises
    ------
    FileNotFoundError
        If ``path`` does not exist.
    ConfigError
        If the document or one of its section records is malformed.
    """
    raw = _read_yaml(path, label="Post snapshot")
    return build_post_snapshot(raw)


def build_post_snapshot(raw: typ.Mapping[str, typ.Any]) -> PostSnapshot:
    """Build a :class:`PostSnapshot` from an already parsed mapping."""
    match raw.get("sections"):
        case None:
            sections_raw: list[typ.Any] = []
        case list() as items:
            sections_raw = items
        case _:
            msg = "'sections' must be a list of section records."
            raise ConfigError(msg)
    return PostSnapshot(
        post=_build_post(raw.get("post")),
        sections=[
            _build_section(index, payload) for index, payload in enumerate(sections_raw)
        ],
        language=_optional_str(raw.get("language")) or "en",
    )


def _build_post(payload: object) -> PostContext:
    match payload:
        case None:
            return PostContext()
        case dict() as data:
            pass
        case _:
            msg = "'post' must be a mapping."
            raise ConfigError(msg)
    return PostContext(
        title=_optional_str(data.get("title")) or "",
        excerpt=_optional_str(data.get("excerpt")) or "",
        slug=_optional_str(data.get("slug")) or "",
        author=_build_author(data.get("author")),
        published_at=_parse_timestamp(data.get("published_at")),
        updated_at=_parse_timestamp(data.get("updated_at")),
    )


def _build_author(payload: object) -> AuthorInfo | None:
    match payload:
        case None:
            return None
        case str() as name:
            return AuthorInfo(display_name=name.strip()) if name.strip() else None
        case {"display_name": name, **rest}:
            return AuthorInfo(
                display_name=str(name),
                bio=_optional_str(rest.get("bio")),
                avatar=_optional_str(rest.get("avatar")),
            )
        case _:
            msg = "'post.author' must be a name or a mapping with 'display_name'."
            raise ConfigError(msg)


def _build_section(index: int, payload: object) -> Section:
    if not isinstance(payload, dict):
        msg = f"Section #{index + 1} must be a mapping."
        raise ConfigError(msg)
    section_id = _optional_str(payload.get("id"))
    template_id = _optional_str(payload.get("template_id"))
    if section_id is None or template_id is None:
        msg = f"Section #{index + 1} requires 'id' and 'template_id'."
        raise ConfigError(msg)

    position = payload.get("position", index)
    if isinstance(position, bool) or not isinstance(position, int):
        msg = f"Section '{section_id}' has a non-integer position."
        raise ConfigError(msg)

    data = payload.get("data") or {}
    if not isinstance(data, dict):
        msg = f"Section '{section_id}' data must be a mapping."
        raise ConfigError(msg)

    return Section(
        id=section_id,
        template_id=template_id,
        position=position,
        is_active=_parse_bool(
            payload.get("is_active"), field=f"{section_id}.is_active", default=True
        ),
        title=_optional_str(payload.get("title")),
        data=data,
        template=_build_embedded_template(section_id, payload.get("template")),
    )


def _build_embedded_template(
    section_id: str, payload: object
) -> TemplateDescriptor | None:
    match payload:
        case None:
            return None
        case dict() as data:
            component = _optional_str(
                data.get("component_name") or data.get("component")
            )
            if component is None:
                return None
            return TemplateDescriptor(
                name=_optional_str(data.get("name")) or component,
                component=component,
                category=_optional_str(data.get("category")) or "content",
            )
        case _:
            msg = f"Section '{section_id}' template must be a mapping."
            raise ConfigError(msg)


__all__ = ["build_post_snapshot", "load_post_snapshot"]
