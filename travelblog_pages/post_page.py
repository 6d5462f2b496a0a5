"""Post page rendering pipeline.

This module turns a post snapshot into a standalone ``<slug>.html`` document.
``PostPageBuilder`` composes the post's sections with a
:class:`~travelblog_pages.sections.PageComposer`, wraps the resulting markup in
the ``post_page.jinja`` shell (title, language attribute and meta
description) and persists the HTML.

Typical usage mirrors the ``pages render`` command:

>>> from pathlib import Path
>>> from travelblog_pages.config import load_post_snapshot
>>> builder = PostPageBuilder(load_post_snapshot(Path("posts/amalfi-coast.yaml")))  # doctest: +SKIP
>>> output_path = builder.run()  # doctest: +SKIP
>>> print(output_path)  # doctest: +SKIP
public/amalfi-coast-guide.html

Templates are read from ``travelblog_pages/templates`` unless a custom
directory is provided. Output is UTF-8 and always ends with a newline.
"""

from __future__ import annotations

import datetime as dt
import typing as typ
from pathlib import Path

from jinja2 import Environment, FileSystemLoader

from ._constants import OUTPUT_FILENAME_TEMPLATE
from .sections import PageComposer, RenderMode

if typ.TYPE_CHECKING:
    from .config import PostSnapshot
    from .sections import PageMarkup

DEFAULT_OUTPUT_DIR = Path("public")


class PostPageBuilder:
    """Render a complete HTML page for one post."""

    def __init__(
        self,
        snapshot: PostSnapshot,
        *,
        composer: PageComposer | None = None,
        mode: RenderMode = RenderMode.PRODUCTION,
        output: Path | None = None,
        site_name: str | None = None,
        templates_dir: Path | None = None,
    ) -> None:
        """Initialize the builder and Jinja environment.

        Parameters
        ----------
        snapshot : PostSnapshot
            The post metadata and its section rows.
        composer : PageComposer, optional
            Composer used for the page body; defaults to one backed by the
            built-in template registry.
        mode : RenderMode, optional
            ``development`` shows diagnostic blocks inline.
        output : Path, optional
            Destination file. Defaults to ``public/<slug>.html``.
        site_name : str, optional
            Suffix appended to the document title.
        templates_dir : Path, optional
            Directory containing ``post_page.jinja``.
        """
        self.snapshot = snapshot
        self.composer = composer or PageComposer()
        self.mode = mode
        self.site_name = site_name
        slug = snapshot.post.slug or "post"
        self.output = output or DEFAULT_OUTPUT_DIR / OUTPUT_FILENAME_TEMPLATE.format(
            slug=slug
        )
        self.templates_dir = templates_dir or Path(__file__).parent / "templates"
        self.env = Environment(
            loader=FileSystemLoader(self.templates_dir),
            autoescape=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.template = self.env.get_template("post_page.jinja")

    def compose(self) -> PageMarkup:
        """Compose the post body without writing anything."""
        return self.composer.compose(
            self.snapshot.sections, self.snapshot.context(self.mode)
        )

    def render(self, page: PageMarkup | None = None) -> str:
        """Return the full HTML document for the post."""
        body = page or self.compose()
        html = self.template.render(
            post=self.snapshot.post,
            language=self.snapshot.language,
            page=body,
            site_name=self.site_name,
            generated_at=dt.datetime.now(dt.UTC),
        )
        if not html.endswith("\n"):
            html += "\n"
        return html

    def run(self) -> Path:
        """Render and write the post HTML, returning the output path."""
        self.output.parent.mkdir(parents=True, exist_ok=True)
        self.output.write_text(self.render(), encoding="utf-8")
        return self.output


__all__ = ["PostPageBuilder"]
