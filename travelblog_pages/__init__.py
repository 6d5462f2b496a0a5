"""Render travel blog posts from ordered, template-typed sections.

This package resolves section template ids, filters placeholder content,
chooses the page layout, and builds a table of contents for exported posts.
The ``pages`` console script wraps it for local builds and CI.

Exports
-------
- ``app``: Cyclopts application holding the ``pages`` subcommands.
- ``main``: Convenience function that invokes the Cyclopts app.

Examples
--------
>>> from travelblog_pages import main
>>> main()  # doctest: +SKIP
>>> from travelblog_pages import app
>>> app(["classify", "--snapshot", "posts/amalfi-coast.yaml"])  # doctest: +SKIP
legacy
"""

from __future__ import annotations

from .cli import app, main

__all__ = ["app", "main"]
