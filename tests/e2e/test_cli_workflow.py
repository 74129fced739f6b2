"""End-to-end tests for CLI workflow.

Tests the full update → dashboard → compare pipeline a CI job runs on
every push, using files in a temporary directory.
"""

from __future__ import annotations

import json
import tempfile
from pathlib import Path

import pytest
from typer.testing import CliRunner

from benchboard.cli.main import app
from benchboard.history import HistoryStore

runner = CliRunner()


def write_run(directory: Path, commit: str, values: dict[str, float]) -> tuple[Path, Path]:
    """Write the metadata and results files of one CI run.

    ``values`` maps ``name@os`` to the measured value in ns/iter.
    """
    metadata = directory / f"metadata-{commit}.json"
    metadata.write_text(
        json.dumps(
            {
                "committer": "octocat",
                "commitHash": commit,
                "commitMessage": f"commit {commit}",
                "commitUrl": f"https://github.com/example/pq-crypto/commit/{commit}",
            }
        )
    )
    results = directory / f"results-{commit}.json"
    benches = []
    for bench, value in values.items():
        name, os_name = bench.split("@")
        benches.append({"name": name, "value": value, "unit": "ns/iter", "os": os_name, "keySize": 768})
    results.write_text(json.dumps(benches))
    return metadata, results


@pytest.mark.e2e
class TestCLIWorkflow:
    """E2E tests for the CLI workflow."""

    def test_update_dashboard_compare(self) -> None:
        """Two pushes produce a dashboard and a comparison."""
        with tempfile.TemporaryDirectory() as tmpdir:
            directory = Path(tmpdir)
            history = directory / "gh-pages" / "data.json"

            for commit, values in (
                ("c0ffee1", {"keygen@linux": 2_000_000.0, "encaps@linux": 1500.0, "keygen@macos": 900.0}),
                ("c0ffee2", {"keygen@linux": 1_800_000.0, "encaps@linux": 1600.0, "keygen@macos": 880.0}),
            ):
                metadata, results = write_run(directory, commit, values)
                result = runner.invoke(
                    app,
                    [
                        "update",
                        "ML-KEM",
                        "-m",
                        str(metadata),
                        "-r",
                        str(results),
                        "--history",
                        str(history),
                        "--schema",
                        "name,os,keySize",
                        "--group-by",
                        "os",
                        "-o",
                        str(history),
                    ],
                )
                assert result.exit_code == 0

            document = HistoryStore(history).load(missing_ok=False)
            assert [e.commit.id for e in document.entries["ML-KEM"]] == ["c0ffee1", "c0ffee2"]

            page = directory / "gh-pages" / "index.html"
            result = runner.invoke(
                app,
                ["dashboard", "--history", str(history), "-m", str(metadata), "-o", str(page)],
            )
            assert result.exit_code == 0
            html = page.read_text(encoding="utf-8")
            assert "Results for run with the os linux" in html
            assert "Results for run with the os macos" in html
            assert "Value (ms/iter)" in html
            assert "Value (ns/iter)" in html

            result = runner.invoke(app, ["compare", "--name", "ML-KEM", "--history", str(history)])
            assert result.exit_code == 0
            assert "[`c0ffee1`](https://github.com/example/pq-crypto/commit/c0ffee1)" in result.stdout
            assert "| `keygen` | `linux` | `768` | 2,000,000 ns | 1,800,000 ns | **+10.00%** ✅ |" in result.stdout
            assert "| `encaps` | `linux` | `768` | 1,500 ns | 1,600 ns | **-6.67%** ❌ |" in result.stdout
            assert "| `keygen` | `macos` | `768` | 900 ns | 880 ns | **+2.22%** ✅ |" in result.stdout

    def test_summary_of_run(self) -> None:
        """A single run is summarized without any history."""
        with tempfile.TemporaryDirectory() as tmpdir:
            _, results = write_run(Path(tmpdir), "c0ffee1", {"keygen@linux": 1520.0, "keygen@macos": 900.0})

            result = runner.invoke(
                app,
                ["summary", "-r", str(results), "--schema", "name,os,keySize", "--group-by", "os,keySize"],
            )

            assert result.exit_code == 0
            assert "### **os**: `linux`, **keySize**: `768`" in result.stdout
            assert result.stdout.count("\n---") == 2
