"""Cyclopts CLI entrypoint for rendering travel blog post pages.

The ``pages`` console script composes exported post snapshots into static
HTML, prints a post's table of contents, reports which layout a post uses,
and explains how a template identifier resolves. Every command reads the
optional ``config/renderer.yaml`` and accepts ``INPUT_*`` environment
variables in place of flags.

Examples
--------
Render a post in development mode so unresolved templates are visible:

>>> from travelblog_pages.cli import app
>>> app.run(
...     ["render", "--snapshot", "posts/amalfi-coast.yaml", "--mode", "development"]
... )  # doctest: +SKIP

Check which alias table supplies a template id:

>>> app.run(["resolve", "faq-section"])  # doctest: +SKIP
"""

from __future__ import annotations

import logging
import sys
import typing as typ
from pathlib import Path

import cyclopts
import msgspec.json
from cyclopts import App, Parameter

from .config import (
    PostSnapshot,
    RendererConfig,
    load_post_snapshot,
    load_renderer_config,
    parse_mode,
)
from .post_page import PostPageBuilder
from .sections import (
    LoggingSink,
    PageComposer,
    SectionRenderer,
    classify,
)

DEFAULT_CONFIG = Path("config/renderer.yaml")

app = App(name="pages", config=cyclopts.config.Env("INPUT_", command=False))  # type: ignore[unknown-argument]


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:  # pragma: no cover - fallback for different roots
            return str(path)
    return str(path)


def _configure_logging(*, verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _load_config(path: Path | None) -> RendererConfig:
    """Load ``path``, or the default config file when it exists."""
    if path is None and DEFAULT_CONFIG.exists():
        path = DEFAULT_CONFIG
    return load_renderer_config(path)


def _composer(config: RendererConfig) -> PageComposer:
    renderer = SectionRenderer(
        config.build_registry(),
        filters=config.filters,
        diagnostics=LoggingSink(),
    )
    return PageComposer(renderer)


@app.command(help="Compose a post snapshot into a static HTML page.")
def render(
    *,
    snapshot: typ.Annotated[
        Path, Parameter(help="Path to the post snapshot", env_var="INPUT_SNAPSHOT")
    ],
    config: typ.Annotated[
        Path | None,
        Parameter(help="Path to renderer config", env_var="INPUT_CONFIG"),
    ] = None,
    output: typ.Annotated[
        Path | None,
        Parameter(help="Override the output file", env_var="INPUT_OUTPUT"),
    ] = None,
    mode: typ.Annotated[
        str | None,
        Parameter(help="production or development", env_var="INPUT_MODE"),
    ] = None,
    site_name: typ.Annotated[
        str | None,
        Parameter(help="Suffix for the page title", env_var="INPUT_SITE_NAME"),
    ] = None,
    verbose: typ.Annotated[
        bool, Parameter(help="Log every pipeline event", env_var="INPUT_VERBOSE")
    ] = False,
) -> None:
    """Render one post page and write it to disk.

    Parameters
    ----------
    snapshot : Path
        YAML or JSON post snapshot (``post``, ``language``, ``sections``).
    config : Path or None, optional
        Renderer configuration; ``config/renderer.yaml`` is used when present.
    output : Path or None, optional
        Destination file; defaults to ``public/<slug>.html``.
    mode : str or None, optional
        Overrides the configured render mode.
    site_name : str or None, optional
        Appended to the document title.
    verbose : bool, optional
        Emit DEBUG-level diagnostics.

    Raises
    ------
    ConfigError
        If the configuration or the snapshot is malformed.
    """
    _configure_logging(verbose=verbose)
    renderer_config = _load_config(config)
    post = load_post_snapshot(snapshot)
    builder = PostPageBuilder(
        post,
        composer=_composer(renderer_config),
        mode=parse_mode(mode) if mode else renderer_config.mode,
        output=output,
        site_name=site_name,
    )
    written = builder.run()
    print(f"wrote {_format_path(written)}")


@app.command(help="Print the table of contents of a post as JSON.")
def toc(
    *,
    snapshot: typ.Annotated[
        Path, Parameter(help="Path to the post snapshot", env_var="INPUT_SNAPSHOT")
    ],
    config: typ.Annotated[
        Path | None,
        Parameter(help="Path to renderer config", env_var="INPUT_CONFIG"),
    ] = None,
) -> None:
    """Print the headings of the composed page as a JSON list."""
    _configure_logging(verbose=False)
    renderer_config = _load_config(config)
    post: PostSnapshot = load_post_snapshot(snapshot)
    page = _composer(renderer_config).compose(
        post.sections, post.context(renderer_config.mode)
    )
    print(msgspec.json.format(msgspec.json.encode(page.headings), indent=2).decode())


@app.command(name="classify", help="Print the layout (html or legacy) a post uses.")
def classify_post(
    *,
    snapshot: typ.Annotated[
        Path, Parameter(help="Path to the post snapshot", env_var="INPUT_SNAPSHOT")
    ],
    config: typ.Annotated[
        Path | None,
        Parameter(help="Path to renderer config", env_var="INPUT_CONFIG"),
    ] = None,
) -> None:
    """Print ``html`` or ``legacy`` for the snapshot's sections."""
    _configure_logging(verbose=False)
    registry = _load_config(config).build_registry()
    post = load_post_snapshot(snapshot)
    decision = classify(
        sorted(post.sections, key=lambda section: section.position), registry
    )
    print(decision.name)


@app.command(help="Show how a template id resolves.")
def resolve(
    template_id: str,
    /,
    *,
    config: typ.Annotated[
        Path | None,
        Parameter(help="Path to renderer config", env_var="INPUT_CONFIG"),
    ] = None,
) -> None:
    """Print the descriptor for ``template_id`` and the table that supplied it.

    Exits with status 1 when no alias table knows the identifier.
    """
    registry = _load_config(config).build_registry()
    descriptor = registry.resolve(template_id)
    if descriptor is None:
        print(f"unresolved: {template_id}", file=sys.stderr)
        raise SystemExit(1)
    kind = descriptor.kind
    print(
        f"{template_id}: {descriptor.component} "
        f"(name={descriptor.name}, category={descriptor.category}, "
        f"kind={kind.value if kind else 'unknown'}, "
        f"table={registry.source_of(template_id)})"
    )


def main() -> None:
    """Invoke the Cyclopts application that powers the `pages` console command.

    Examples
    --------
    >>> main()  # doctest: +SKIP
    """
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
