"""Tests for the ``pages`` command functions and the logging sink."""

from __future__ import annotations

import logging
import typing as typ
from pathlib import Path

import msgspec.json as msgspec_json
import pytest
from bs4 import BeautifulSoup

from travelblog_pages import cli
from travelblog_pages.sections.diagnostics import (
    DiagnosticEvent,
    EventKind,
    LoggingSink,
)

if typ.TYPE_CHECKING:
    from pytest_mock import MockerFixture

REPO_ROOT = Path(__file__).resolve().parents[1]
SNAPSHOT = REPO_ROOT / "posts" / "amalfi-coast.yaml"
CONFIG = REPO_ROOT / "config" / "renderer.yaml"


@pytest.fixture(autouse=True)
def _isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run every command from an empty directory."""
    monkeypatch.chdir(tmp_path)


def test_render_writes_page(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """``render`` writes the page and reports the output path."""
    output = tmp_path / "site" / "amalfi.html"
    cli.render(snapshot=SNAPSHOT, config=CONFIG, output=output, site_name="Wanderlog")

    assert capsys.readouterr().out.strip() == "wrote site/amalfi.html", (
        "expected a cwd-relative output path"
    )
    soup = BeautifulSoup(output.read_text(encoding="utf-8"), "html.parser")
    assert soup.title.get_text() == "Amalfi Coast Travel Guide | Wanderlog", (
        "expected the site name in the title"
    )
    assert soup.body["data-layout"] == "legacy", "expected the legacy layout"
    assert soup.find(attrs={"data-section-id": "related"}) is None, (
        "expected related articles to be suppressed"
    )
    assert soup.find(attrs={"data-section-id": "starter"}) is None, (
        "expected the generic starter pack to be filtered"
    )


def test_render_defaults_to_public_slug(capsys: pytest.CaptureFixture[str]) -> None:
    """Without ``--output`` the page lands in ``public/<slug>.html``."""
    cli.render(snapshot=SNAPSHOT)
    assert capsys.readouterr().out.strip() == "wrote public/amalfi-coast-guide.html", (
        "expected the default output path"
    )
    assert Path("public/amalfi-coast-guide.html").exists(), "expected the page file"


def test_render_passes_mode_override(mocker: MockerFixture, tmp_path: Path) -> None:
    """``--mode`` overrides the configured render mode."""
    builder = mocker.patch.object(cli, "PostPageBuilder")
    builder.return_value.run.return_value = tmp_path / "x.html"
    cli.render(snapshot=SNAPSHOT, mode="development")
    assert builder.call_args.kwargs["mode"].value == "development", (
        "expected the CLI mode to reach the builder"
    )


def test_toc_prints_headings(capsys: pytest.CaptureFixture[str]) -> None:
    """``toc`` prints the composed page's headings as JSON."""
    cli.toc(snapshot=SNAPSHOT, config=CONFIG)
    headings = msgspec_json.decode(capsys.readouterr().out)
    assert [heading["id"] for heading in headings] == [
        "amalfi-faq",
        "best-time-to-visit",
        "ferries",
    ], f"unexpected headings {headings}"
    assert headings[2] == {"id": "ferries", "title": "Ferries", "level": 3}, (
        "expected each heading to carry its id, title and level"
    )


def test_classify_prints_layout(capsys: pytest.CaptureFixture[str]) -> None:
    """``classify`` prints the layout name."""
    cli.classify_post(snapshot=SNAPSHOT)
    assert capsys.readouterr().out.strip() == "legacy", "expected the legacy layout"


def test_resolve_reports_source_table(capsys: pytest.CaptureFixture[str]) -> None:
    """``resolve`` names the descriptor and the table that supplied it."""
    cli.resolve("faq-section")
    assert capsys.readouterr().out.strip() == (
        "faq-section: FAQSection (name=faq-section, category=content, "
        "kind=FAQSection, table=legacy-slugs)"
    ), "unexpected resolve output"


def test_resolve_reads_config_overrides(capsys: pytest.CaptureFixture[str]) -> None:
    """Alias tables from the configuration take part in resolution."""
    cli.resolve("local-tips", config=CONFIG)
    assert "table=site-overrides" in capsys.readouterr().out, (
        "expected the configured table to supply the id"
    )


def test_resolve_unknown_id_exits(capsys: pytest.CaptureFixture[str]) -> None:
    """Unknown ids exit with status 1 and a message on stderr."""
    with pytest.raises(SystemExit) as excinfo:
        cli.resolve("not-a-template")
    assert excinfo.value.code == 1, "expected exit status 1"
    assert "unresolved: not-a-template" in capsys.readouterr().err, (
        "expected the id on stderr"
    )


def test_default_config_file_is_used(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """``config/renderer.yaml`` in the working directory is picked up."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    (config_dir / "renderer.yaml").write_text(
        "templates:\n  aliases:\n    - name: local\n      entries:\n"
        "        promo: AIItineraryCTA\n",
        encoding="utf-8",
    )
    cli.resolve("promo")
    assert "table=local" in capsys.readouterr().out, (
        "expected the default config file to be loaded"
    )


@pytest.mark.parametrize(
    ("kind", "level"),
    [
        (EventKind.SECTION_FAILED, logging.ERROR),
        (EventKind.TEMPLATE_UNRESOLVED, logging.WARNING),
        (EventKind.KIND_UNKNOWN, logging.WARNING),
        (EventKind.SECTION_FILTERED, logging.DEBUG),
    ],
)
def test_logging_sink_levels(
    caplog: pytest.LogCaptureFixture, kind: EventKind, level: int
) -> None:
    """Events are logged at a level matching their severity."""
    caplog.set_level(logging.DEBUG, logger="travelblog_pages")
    LoggingSink()(
        DiagnosticEvent(kind, "something happened", section_id="s1", details={"a": 1})
    )
    [record] = caplog.records
    assert record.levelno == level, f"unexpected level for {kind}"
    assert record.getMessage() == (
        f"{kind.value}: something happened (section=s1 template=-)"
    ), "unexpected log message"
    assert record.details == {"a": 1}, "expected details on the record"
