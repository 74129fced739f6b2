"""Tests for HTML dashboard reporter."""

from __future__ import annotations

import json
import re
from pathlib import Path

import pytest

from benchboard.charts.render import render_suite
from benchboard.core.config import Settings
from benchboard.core.types import BenchResult, Commit, HistoryDocument, HistoryEntry, RunMetadata
from benchboard.reporters.html import DEFAULT_PLOTLY_URL, DashboardReporter


@pytest.fixture
def document() -> HistoryDocument:
    """History with one suite on two operating systems."""
    commit = Commit(id="a1b2c3d", message="Speed up keygen", url="https://example.org/commit/a1b2c3d")
    return HistoryDocument(
        last_update=1_700_000_000_000,
        repo_url="https://github.com/example/pq-crypto",
        entries={
            "ML-KEM": [
                HistoryEntry(
                    commit=commit,
                    date=1_700_000_000_000,
                    benches=[
                        BenchResult(name="keygen", value=1520.0, unit="ns/iter", os="linux"),
                        BenchResult(name="keygen", value=900.0, unit="ns/iter", os="macos"),
                    ],
                )
            ]
        },
        schemas={"ML-KEM": ["name", "os"]},
        group_by={"ML-KEM": ["os"]},
    )


@pytest.fixture
def metadata() -> RunMetadata:
    """CI metadata of a pull-request run."""
    return RunMetadata(
        pr_url="https://github.com/example/pq-crypto/pull/42",
        pr_title="Speed up keygen",
        commit_hash="a1b2c3d4e5f6",
        commit_hash_short="a1b2c3d",
        commit_url="https://github.com/example/pq-crypto/commit/a1b2c3d4e5f6",
    )


def embedded_suites(html: str) -> list[dict]:
    """Extract the suite payloads embedded in the page."""
    match = re.search(r"const SUITES = (.*);\n", html)
    assert match is not None
    return json.loads(match.group(1).replace("<\\/", "</"))


class TestDashboardReporterInit:
    """Tests for DashboardReporter initialization."""

    def test_defaults(self) -> None:
        """Reporter uses the public plotting library build by default."""
        reporter = DashboardReporter()

        assert reporter.plotly_url == DEFAULT_PLOTLY_URL
        assert reporter.plotly_url == Settings(_env_file=None).plotly_cdn_url
        assert reporter.title == "Benchmarks"


class TestDashboardReporterHelpers:
    """Tests for header helpers."""

    def test_format_time(self) -> None:
        """Epoch milliseconds are shown in UTC."""
        reporter = DashboardReporter()

        assert reporter._format_time(1_700_000_000_000) == "2023-11-14 22:13:20 UTC"
        assert reporter._format_time(0) == "never"

    def test_link_with_href(self) -> None:
        """Links are escaped anchors."""
        link = DashboardReporter()._link("pr-link", "https://example.org/?a=1&b=2", "PR <42>")

        assert 'id="pr-link"' in link
        assert 'href="https://example.org/?a=1&amp;b=2"' in link
        assert "PR &lt;42&gt;" in link

    def test_link_without_href(self) -> None:
        """Without a target the text is shown as plain span."""
        link = DashboardReporter()._link("pr-link", None, None)

        assert link == '<span id="pr-link"></span>'

    def test_embed_json_closes_no_script(self) -> None:
        """Embedded data cannot terminate the script block."""
        embedded = DashboardReporter()._embed_json({"message": "</script><script>alert(1)"})

        assert "</script>" not in embedded
        assert json.loads(embedded.replace("<\\/", "</")) == {"message": "</script><script>alert(1)"}


class TestDashboardReporterReport:
    """Tests for HTML generation."""

    def test_report_structure(self, document: HistoryDocument, metadata: RunMetadata) -> None:
        """Page has the header, suite selector and chart container."""
        html = DashboardReporter(title="PQ benchmarks").report(document, metadata)

        assert html.startswith("<!DOCTYPE html>")
        assert "<title>PQ benchmarks</title>" in html
        assert 'id="benchmark-set-dropdown"' in html
        assert 'id="body"' in html
        assert f'<script src="{DEFAULT_PLOTLY_URL}"' in html
        assert html.count("</script>") == 2

    def test_header_links(self, document: HistoryDocument, metadata: RunMetadata) -> None:
        """Header links point to repository, PR and commit."""
        html = DashboardReporter().report(document, metadata)

        assert "2023-11-14 22:13:20 UTC" in html
        assert 'href="https://github.com/example/pq-crypto"' in html
        assert 'href="https://github.com/example/pq-crypto/pull/42"' in html
        assert ">Speed up keygen</a>" in html
        assert ">a1b2c3d</a>" in html

    def test_header_without_metadata(self, document: HistoryDocument) -> None:
        """Without metadata the PR and commit slots are empty."""
        html = DashboardReporter().report(document)

        assert '<span id="pr-link"></span>' in html
        assert '<span id="commit-link"></span>' in html

    def test_embeds_rendered_suites(self, document: HistoryDocument) -> None:
        """Chart payloads are embedded as data for the page script."""
        suites = embedded_suites(DashboardReporter().report(document))

        assert [s["name"] for s in suites] == ["ML-KEM"]
        assert suites[0]["title"] == "ML-KEM by os"
        assert suites[0]["filters"] == {"os": ["linux", "macos"]}
        assert [c["title"] for c in suites[0]["charts"]] == [
            "Results for run with the os linux",
            "Results for run with the os macos",
        ]
        assert suites[0]["charts"][0]["traces"][0]["x"] == [1_700_000_000_000]

    def test_escapes_commit_messages(self, document: HistoryDocument) -> None:
        """Markup in commit messages never reaches the page unescaped."""
        commit = Commit(id="evil", message="</script><script>alert(1)</script>", url="")
        document.entries["ML-KEM"].append(
            HistoryEntry(
                commit=commit,
                date=1_700_000_100_000,
                benches=[BenchResult(name="keygen", value=1.0, unit="ns/iter", os="linux")],
            )
        )

        html = DashboardReporter().report(document)

        assert html.count("</script>") == 2
        assert "alert(1)" in html

    def test_empty_history(self) -> None:
        """An empty history renders a page without suites."""
        html = DashboardReporter().report(HistoryDocument(entries={}))

        assert "const SUITES = [];" in html
        assert "never" in html

    def test_report_views(self, document: HistoryDocument) -> None:
        """Pre-rendered views are embedded as given."""
        view = render_suite(document, "ML-KEM")
        view.charts = view.charts[:1]

        suites = embedded_suites(DashboardReporter().report_views([view], document))

        assert len(suites[0]["charts"]) == 1

    def test_chart_errors_are_embedded(self, document: HistoryDocument) -> None:
        """Charts that failed to render are listed on the page."""
        document.entries["ML-KEM"][0].benches.append(
            BenchResult(name="throughput", value=3.0, unit="ops/s", os="macos")
        )

        suites = embedded_suites(DashboardReporter().report(document))

        assert len(suites[0]["charts"]) == 1
        assert suites[0]["errors"][0].startswith("Results for run with the os macos")


class TestDashboardReporterFile:
    """Tests for file output."""

    def test_report_to_file(self, tmp_path: Path, document: HistoryDocument) -> None:
        """Dashboard is written to the given path, creating directories."""
        path = tmp_path / "gh-pages" / "index.html"

        DashboardReporter().report_to_file(document, path)

        assert path.exists()
        assert "<!DOCTYPE html>" in path.read_text(encoding="utf-8")
