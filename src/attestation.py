"""Audit reports built from test outcomes and traced pricing calls."""
from __future__ import annotations

import html
import json
import logging
import subprocess
from collections import OrderedDict
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from audit import Interaction, InteractionTracer

logger = logging.getLogger(__name__)

TITLE = "Pricing Engine: Quality Assurance Attestation"


@dataclass(frozen=True)
class TestOutcome:
    __test__ = False

    node_id: str
    group: str
    name: str
    passed: bool
    duration: float = 0.0


@dataclass(frozen=True)
class GitInfo:
    hash: str
    dirty_files: str = ""


@dataclass(frozen=True)
class GroupStats:
    passed: int
    failed: int

    @property
    def status(self) -> str:
        return "PASS" if self.failed == 0 else "FAIL"


def configure_logging(level: int = logging.INFO) -> None:
    """Configure default logging if no handlers are present."""
    root = logging.getLogger()
    if root.handlers:
        return
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def run_git(*args: str, cwd: Optional[Path] = None) -> str:
    result = subprocess.run(["git", *args], capture_output=True, text=True, cwd=cwd)
    if result.returncode != 0:
        raise subprocess.CalledProcessError(result.returncode, result.args, result.stdout, result.stderr)
    return result.stdout.strip()


def collect_git_info(cwd: Optional[Path] = None) -> GitInfo:
    try:
        return GitInfo(hash=run_git("rev-parse", "--short", "HEAD", cwd=cwd), dirty_files=run_git("status", "--porcelain", cwd=cwd))
    except (OSError, subprocess.CalledProcessError) as exc:
        logger.warning("Git metadata unavailable: %s", exc)
        return GitInfo(hash="unknown")


def outcome_from_report(report) -> Optional[TestOutcome]:
    """Convert a pytest report; skipped and xfailed tests are not scenarios."""
    if not (report.passed or report.failed):
        return None
    if report.when != "call" and not (report.when == "setup" and report.failed):
        return None
    parts = report.nodeid.split("::")
    return TestOutcome(
        node_id=report.nodeid,
        group=parts[1] if len(parts) > 2 else parts[0],
        name=parts[-1],
        passed=report.passed,
        duration=report.duration,
    )


class AttestationReport:
    def __init__(
        self,
        outcomes: Sequence[TestOutcome],
        tracer: Optional[InteractionTracer] = None,
        git: Optional[GitInfo] = None,
        generated_at: Optional[datetime] = None,
    ) -> None:
        self._outcomes = list(outcomes)
        self._tracer = tracer or InteractionTracer()
        self._git = git or GitInfo(hash="unknown")
        self._generated_at = generated_at or datetime.now(timezone.utc)

    def groups(self) -> "OrderedDict[str, List[TestOutcome]]":
        grouped: "OrderedDict[str, List[TestOutcome]]" = OrderedDict()
        for outcome in self._outcomes:
            grouped.setdefault(outcome.group, []).append(outcome)
        return grouped

    def stats(self) -> Dict[str, GroupStats]:
        return {
            group: GroupStats(
                passed=sum(1 for o in outcomes if o.passed),
                failed=sum(1 for o in outcomes if not o.passed),
            )
            for group, outcomes in self.groups().items()
        }

    def pass_rate(self) -> float:
        if not self._outcomes:
            return 0.0
        return 100.0 * sum(1 for o in self._outcomes if o.passed) / len(self._outcomes)

    def traces_for(self, outcome: TestOutcome) -> List[Interaction]:
        return self._tracer.get(outcome.node_id)

    def render_markdown(self) -> str:
        lines = [f"# {TITLE}", ""]
        lines.append(f"**Generated:** {self._generated_at.isoformat(timespec='seconds')}")
        lines.append(f"**Git Hash:** `{self._git.hash}`")
        if self._git.dirty_files:
            lines += ["", "**Uncommitted Changes:**", "", "```", self._git.dirty_files, "```"]
        lines += ["", "## 1. Executive Summary", ""]
        lines.append("| Area | Passed | Failed | Status |")
        lines.append("| :--- | :--- | :--- | :--- |")
        for group, stats in self.stats().items():
            lines.append(f"| {group} | {stats.passed} | {stats.failed} | {stats.status} |")
        lines += [
            "",
            f"**Total Scenarios:** {len(self._outcomes)} | **Pass Rate:** {self.pass_rate():.1f}%",
            "",
            "## 2. Detailed Audit Log",
            "",
        ]
        for group, outcomes in self.groups().items():
            lines.append(f"### {group}")
            lines.append("")
            for outcome in outcomes:
                mark = "PASS" if outcome.passed else "FAIL"
                traced = len(self.traces_for(outcome))
                suffix = f" ({traced} traced call{'s' if traced != 1 else ''})" if traced else ""
                lines.append(f"- **{mark}** {outcome.name}{suffix}")
            lines.append("")
        return "\n".join(lines)

    def render_html(self, include_traces: bool = False) -> str:
        esc = html.escape
        parts = [
            "<!DOCTYPE html>",
            "<html>",
            "<head>",
            '<meta charset="UTF-8">',
            "<title>QA Attestation Report</title>",
            "<style>",
            "  body { font-family: sans-serif; max-width: 1000px; margin: 0 auto; padding: 20px; color: #333; }",
            "  .metadata { background: #f6f8fa; padding: 15px; border-radius: 6px; border: 1px solid #e1e4e8; }",
            "  .warning { color: #856404; background-color: #fff3cd; padding: 10px; border-radius: 4px; }",
            "  .pass { color: #22863a; } .fail { color: #cb2431; }",
            "  pre { background: #f6f8fa; padding: 10px; overflow-x: auto; }",
            "</style>",
            "</head>",
            "<body>",
            f"<h1>{esc(TITLE)}</h1>",
            '<div class="metadata">',
            f"<p><strong>Generated:</strong> {esc(self._generated_at.isoformat(timespec='seconds'))}</p>",
            f"<p><strong>Git Hash:</strong> <code>{esc(self._git.hash)}</code></p>",
        ]
        if self._git.dirty_files:
            parts.append(f'<div class="warning"><strong>Uncommitted Changes:</strong><pre>{esc(self._git.dirty_files)}</pre></div>')
        parts.append("</div>")

        parts.append("<h2>Executive Summary</h2>")
        parts.append("<table><tr><th>Area</th><th>Passed</th><th>Failed</th><th>Status</th></tr>")
        for group, stats in self.stats().items():
            css = "pass" if stats.failed == 0 else "fail"
            parts.append(
                f'<tr><td>{esc(group)}</td><td>{stats.passed}</td><td>{stats.failed}</td>'
                f'<td class="{css}">{stats.status}</td></tr>'
            )
        parts.append("</table>")
        parts.append(f"<p><strong>Total Scenarios:</strong> {len(self._outcomes)} | <strong>Pass Rate:</strong> {self.pass_rate():.1f}%</p>")

        parts.append("<h2>Detailed Audit Log</h2>")
        for group, outcomes in self.groups().items():
            parts.append(f"<h3>{esc(group)}</h3>")
            parts.append("<ul>")
            for outcome in outcomes:
                css = "pass" if outcome.passed else "fail"
                mark = "PASS" if outcome.passed else "FAIL"
                parts.append(f'<li><span class="{css}">{mark}</span> {esc(outcome.name)}')
                if include_traces:
                    parts.append(f' <span class="duration">{outcome.duration:.3f}s</span>')
                    for interaction in self.traces_for(outcome):
                        payload = {"input": interaction.input, "output": interaction.output}
                        parts.append(f"<pre>{esc(json.dumps(payload, indent=2, sort_keys=True, default=str))}</pre>")
                parts.append("</li>")
            parts.append("</ul>")
        parts += ["</body>", "</html>"]
        return "\n".join(parts)

    def write_reports(self, directory: Path) -> Path:
        stamp = self._generated_at.strftime("%Y-%m-%dT%H-%M-%S")
        report_dir = Path(directory) / stamp
        report_dir.mkdir(parents=True, exist_ok=True)
        (report_dir / "attestation.md").write_text(self.render_markdown(), encoding="utf-8")
        (report_dir / "attestation-light.html").write_text(self.render_html(include_traces=False), encoding="utf-8")
        (report_dir / "attestation-full.html").write_text(self.render_html(include_traces=True), encoding="utf-8")
        logger.info("Attestation reports written to %s", report_dir)
        return report_dir
