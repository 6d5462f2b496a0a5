"""Common literal values used across travelblog_pages.

These constants keep well-known template identifiers and filenames centralized
so the registry, layout classifier, templates, and tests can import the same
values without drifting. Intended for internal use within the package.

Examples
--------
>>> from travelblog_pages import _constants
>>> _constants.OUTPUT_FILENAME_TEMPLATE.format(slug="italian-lakes")
'italian-lakes.html'
>>> _constants.LEGACY_HTML_HERO_TEMPLATE_ID.startswith("12345678")
True
"""

LEGACY_HTML_HERO_TEMPLATE_ID = "12345678-1234-4321-8765-123456789abc"
SKIP_TEMPLATE_ID = "d7279f1d-831f-4fd0-9bde-662d8f60b1b0"
HTML_LAYOUT_TEMPLATE_IDS = frozenset({LEGACY_HTML_HERO_TEMPLATE_ID, SKIP_TEMPLATE_ID})
RELATED_ARTICLES_TEMPLATE_ID = "related-articles-123-456-789"

HERO_TEMPLATE_ID = "6f579a71-463c-43b4-b203-c2cb46c80d47"
FAQ_TEMPLATE_ID = "710f8880-c86d-4353-b16f-474c74debd31"
STARTER_PACK_TEMPLATE_ID = "b87245be-1b68-47d4-83a6-fac582a0847f"
TABLE_OF_CONTENTS_TEMPLATE_ID = "23456789-2345-4321-8765-123456789bcd"
RICH_TEXT_TEMPLATE_ID = "550e8400-e29b-41d4-a716-446655440000"

OUTPUT_FILENAME_TEMPLATE = "{slug}.html"
CONTENT_CONTAINER_ATTR = "data-content-container"
TOC_IGNORE_ATTR = "data-toc-ignore"
