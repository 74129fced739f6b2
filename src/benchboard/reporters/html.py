"""HTML dashboard for benchboard.

This module assembles a standalone HTML page showing the benchmark
history as interactive charts, with one chart per group, a suite
selector and checkbox filters over the GroupBy values.

Charts are computed in Python; the embedded script only hands the
payloads to the plotting library and applies filter toggles.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from html import escape
from pathlib import Path
from typing import TYPE_CHECKING, Any

from benchboard.charts.render import render_all
from benchboard.core.config import DEFAULT_PLOTLY_URL

if TYPE_CHECKING:
    from benchboard.charts.render import SuiteView
    from benchboard.core.types import HistoryDocument, RunMetadata

# HTML template with embedded CSS and JavaScript
HTML_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="utf-8" />
    <meta name="viewport" content="width=device-width, minimum-scale=1.0, initial-scale=1, user-scalable=yes" />
    <title>{title}</title>
    <style>
        :root {{
            --bg-primary: #ffffff;
            --bg-secondary: #f6f8fa;
            --text-primary: #1f2328;
            --text-secondary: #656d76;
            --border-color: #d0d7de;
            --accent-blue: #0969da;
            --accent-red: #cf222e;
        }}

        body {{
            font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, Oxygen, Ubuntu, sans-serif;
            background-color: var(--bg-primary);
            color: var(--text-primary);
            margin: 0;
            padding: 1rem 2rem;
        }}

        header {{
            display: flex;
            flex-wrap: wrap;
            gap: 1.5rem;
            padding-bottom: 1rem;
            border-bottom: 1px solid var(--border-color);
        }}

        .header-label {{
            color: var(--text-secondary);
            margin-right: 0.25rem;
        }}

        a {{
            color: var(--accent-blue);
            text-decoration: none;
        }}

        .dropdowns {{
            margin: 1rem 0;
        }}

        .dropdowns select {{
            padding: 0.4rem 0.8rem;
            font-size: 0.95rem;
        }}

        .filter-interface {{
            display: flex;
            flex-wrap: wrap;
            gap: 2rem;
            background-color: var(--bg-secondary);
            border: 1px solid var(--border-color);
            border-radius: 6px;
            padding: 1rem;
        }}

        .checklist-title {{
            font-weight: 600;
            margin-bottom: 0.25rem;
        }}

        .benchmark-title {{
            font-size: 1.5rem;
        }}

        .benchmark-graphs {{
            margin-bottom: 2rem;
        }}

        .chart-error {{
            color: var(--accent-red);
            margin-bottom: 1rem;
        }}

        footer {{
            margin-top: 2rem;
            color: var(--text-secondary);
            font-size: 0.85rem;
        }}
    </style>
</head>
<body>
    <header id="header">
        <div class="header-item">
            <strong class="header-label">Last Update:</strong>
            <span id="last-update">{last_update}</span>
        </div>
        <div class="header-item">
            <strong class="header-label">Repository:</strong>
            {repo_link}
        </div>
        <div class="header-item">
            <strong class="header-label">PR:</strong>
            {pr_link}
        </div>
        <div class="header-item">
            <strong class="header-label">Current HEAD:</strong>
            {commit_link}
        </div>
    </header>
    <main id="main">
        <div class="dropdowns">
            <div id="benchmark-set-dropdown"></div>
        </div>
        <div id="body"></div>
    </main>
    <footer>
        <p>Generated {generated}</p>
    </footer>

    <script src="{plotly_url}" charset="utf-8"></script>
    <script id="main-script">
        "use strict";
        const SUITES = {suites_json};

        function timeZoneOffset() {{
            const parts = new Date().toString().split(" ").filter((s) => s.includes("GMT"));
            return parts.length ? ` (${{parts[0]}})` : "";
        }}

        // Counter-based visibility: a chart is hidden while any unchecked filter matches it.
        function toggleFilter(charts, hiddenBy, unchecked, field, value, checked) {{
            const id = JSON.stringify([field, value]);
            if (checked === !unchecked.has(id)) {{
                return;
            }}
            if (checked) {{
                unchecked.delete(id);
            }} else {{
                unchecked.add(id);
            }}
            charts.forEach((chart, index) => {{
                if (chart.key[field] !== value) {{
                    return;
                }}
                hiddenBy[index] = checked ? Math.max(0, hiddenBy[index] - 1) : hiddenBy[index] + 1;
                chart.elem.style.display = hiddenBy[index] > 0 ? "none" : "";
            }});
        }}

        function createFilterInterface(parent, suite, charts) {{
            const hiddenBy = charts.map(() => 0);
            const unchecked = new Set();
            Object.entries(suite.filters).forEach(([field, values]) => {{
                const checklist = document.createElement("div");
                checklist.className = "checklist";
                const title = document.createElement("div");
                title.className = "checklist-title";
                title.textContent = field;
                checklist.appendChild(title);

                values.forEach((value) => {{
                    const wrapper = document.createElement("div");
                    wrapper.className = "checklist-entry";
                    const id = `${{field}}-${{value}}`;
                    const checkBox = document.createElement("input");
                    checkBox.type = "checkbox";
                    checkBox.id = id;
                    checkBox.checked = true;
                    checkBox.addEventListener("change", function () {{
                        toggleFilter(charts, hiddenBy, unchecked, field, value, this.checked);
                    }});
                    const label = document.createElement("label");
                    label.setAttribute("for", id);
                    label.textContent = value === "-" ? "undefined" : value;
                    wrapper.appendChild(checkBox);
                    wrapper.appendChild(label);
                    checklist.appendChild(wrapper);
                }});
                parent.appendChild(checklist);
            }});
        }}

        function renderSuite(suite) {{
            const main = document.getElementById("body");
            main.innerHTML = "";

            const filterElem = document.createElement("div");
            filterElem.className = "filter-interface";
            const setElem = document.createElement("div");
            setElem.className = "benchmark-set";
            const titleElem = document.createElement("h1");
            titleElem.className = "benchmark-title";
            titleElem.textContent = suite.title;
            setElem.appendChild(titleElem);

            suite.errors.forEach((error) => {{
                const errorElem = document.createElement("div");
                errorElem.className = "chart-error";
                errorElem.textContent = error;
                setElem.appendChild(errorElem);
            }});

            const offset = timeZoneOffset();
            const charts = suite.charts.map((chart) => {{
                const elem = document.createElement("div");
                elem.className = "benchmark-graphs";
                setElem.appendChild(elem);
                const traces = chart.traces.map((trace) => ({{...trace, x: trace.x.map((ms) => new Date(ms))}}));
                const layout = structuredClone(chart.layout);
                layout.xaxis.title.text += offset;
                Plotly.newPlot(elem, traces, layout);
                return {{key: chart.key, elem}};
            }});

            createFilterInterface(filterElem, suite, charts);
            main.appendChild(filterElem);
            main.appendChild(setElem);
        }}

        function populateSuiteDropdown() {{
            const elem = document.getElementById("benchmark-set-dropdown");
            elem.innerHTML = "";
            if (SUITES.length === 0) {{
                return;
            }}
            const select = document.createElement("select");
            select.id = "bench-set-dropdown";
            SUITES.forEach((suite, index) => {{
                const option = document.createElement("option");
                option.value = String(index);
                option.textContent = suite.name;
                select.appendChild(option);
            }});
            select.addEventListener("change", function () {{
                renderSuite(SUITES[Number(this.value)]);
            }});
            elem.appendChild(select);
        }}

        populateSuiteDropdown();
        if (SUITES.length > 0) {{
            renderSuite(SUITES[0]);
        }}
    </script>
</body>
</html>"""

LINK_TEMPLATE = '<a id="{id}" href="{href}" rel="noopener">{text}</a>'


class DashboardReporter:
    """Reporter that generates the interactive benchmark dashboard.

    Provides a standalone HTML page with:
    - Header with last update, repository, PR and commit links
    - Suite selector
    - One chart per group with checkbox filters

    Attributes:
        plotly_url: Script URL of the plotting library.
        title: Page title.

    Example:
        >>> reporter = DashboardReporter()
        >>> reporter.report_to_file(document, "index.html", metadata)
    """

    def __init__(
        self,
        plotly_url: str = DEFAULT_PLOTLY_URL,
        title: str = "Benchmarks",
        default_schema: list[str] | None = None,
        default_group_by: list[str] | None = None,
    ) -> None:
        """Initialize DashboardReporter.

        Args:
            plotly_url: Script URL of the plotting library.
            title: Page title.
            default_schema: Schema for suites that declare none.
            default_group_by: GroupBy for suites that declare none.
        """
        self.plotly_url = plotly_url
        self.title = title
        self.default_schema = default_schema
        self.default_group_by = default_group_by

    def _format_time(self, epoch_ms: int) -> str:
        if not epoch_ms:
            return "never"
        return datetime.fromtimestamp(epoch_ms / 1000, tz=timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")

    def _link(self, element_id: str, href: str | None, text: str | None) -> str:
        if not href:
            return f'<span id="{element_id}">{escape(text or "")}</span>'
        return LINK_TEMPLATE.format(id=element_id, href=escape(href), text=escape(text or href))

    def _embed_json(self, data: Any) -> str:
        """Serialize data for a script block, keeping ``</script>`` out of it."""
        return json.dumps(data, ensure_ascii=False).replace("</", "<\\/")

    def report_views(
        self,
        views: list[SuiteView],
        document: HistoryDocument,
        metadata: RunMetadata | None = None,
    ) -> str:
        """Generate the dashboard for already rendered suites.

        Args:
            views: Rendered suites, in display order.
            document: History the suites were rendered from.
            metadata: Optional CI metadata for the header links.

        Returns:
            HTML string of the dashboard.
        """
        pr_url = metadata.pr_url if metadata else None
        pr_label = (metadata.pr_label or metadata.pr_title) if metadata else None
        commit_url = metadata.commit_url if metadata else None
        commit_label = (metadata.commit_label or metadata.commit_hash_short or metadata.commit_hash) if metadata else None

        return HTML_TEMPLATE.format(
            title=escape(self.title),
            last_update=self._format_time(document.last_update),
            repo_link=self._link("repository-link", document.repo_url, document.repo_url),
            pr_link=self._link("pr-link", pr_url, pr_label),
            commit_link=self._link("commit-link", commit_url, commit_label),
            generated=datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC"),
            plotly_url=escape(self.plotly_url),
            suites_json=self._embed_json([view.to_dict() for view in views]),
        )

    def report(
        self,
        document: HistoryDocument,
        metadata: RunMetadata | None = None,
    ) -> str:
        """Generate the dashboard for every suite of a history.

        Args:
            document: The benchmark history.
            metadata: Optional CI metadata for the header links.

        Returns:
            HTML string of the dashboard.
        """
        views = render_all(document, self.default_schema, self.default_group_by)
        return self.report_views(views, document, metadata)

    def report_to_file(
        self,
        document: HistoryDocument,
        path: Path | str,
        metadata: RunMetadata | None = None,
    ) -> None:
        """Write the dashboard to a file.

        Example:
            >>> reporter.report_to_file(document, Path("gh-pages/index.html"))
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        html = self.report(document, metadata)
        path.write_text(html, encoding="utf-8")
