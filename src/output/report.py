"""
Report rendering for a pipeline result: JSON for machines, text for people.
"""

import json
from dataclasses import dataclass
from typing import Any, Dict, List

from src.activity.types import ActivityCorpus
from src.workflow import PipelineResult

EMPTY_REPORT_MESSAGE = "No skills matched. Try analyzing more repositories."

SCORE_BAR_WIDTH = 20
MAX_EVIDENCE_LINES = 3


def format_duration(duration_ms: int) -> str:
    if duration_ms < 1000:
        return f"{duration_ms}ms"
    seconds = duration_ms / 1000
    if seconds < 60:
        return f"{seconds:.1f}s"
    minutes, secs = divmod(int(seconds), 60)
    return f"{minutes}m {secs}s"


def format_score_bar(score: int, width: int = SCORE_BAR_WIDTH) -> str:
    filled = int(score / 100 * width + 0.5)
    filled = max(0, min(filled, width))
    return "█" * filled + "░" * (width - filled)


@dataclass
class ReportGenerator:
    """Builds a report from a PipelineResult and the corpus it came from."""

    format: str = "text"  # "text" or "json"
    show_evidence: bool = True

    def build_report(self, result: PipelineResult, corpus: ActivityCorpus) -> Dict[str, Any]:
        skills = [
            {
                "id": s.skill.id,
                "name": s.skill.name,
                "category": s.skill.category,
                "score": s.score,
                "explanation": s.explanation,
                "components": s.components.to_dict(),
                "inferred_from": sorted(s.inferred_from),
                "evidence": [e.to_dict() for e in s.evidence],
            }
            for s in result.skills
        ]
        summary = {
            "run_id": result.run_id,
            "repos_scanned": len(corpus.repos),
            "commits_analyzed": len(corpus.commits),
            "prs_analyzed": len(corpus.pull_requests),
            "stars_scanned": len(corpus.stars),
            "terms_extracted": len(result.term_table),
            "skills_matched": len(result.matched),
            "skills_reported": len(result.skills),
            "elapsed_time": format_duration(result.duration_ms),
            "errors": len(result.errors.errors),
        }
        return {"skills": skills, "summary": summary}

    def generate(self, result: PipelineResult, corpus: ActivityCorpus) -> str:
        report = self.build_report(result, corpus)
        if self.format == "json":
            return json.dumps(report, indent=2)
        return self.format_text(report)

    def format_text(self, report: Dict[str, Any]) -> str:
        lines: List[str] = ["", "=" * 60, "  SKILL RECOMMENDATIONS", "=" * 60, ""]

        if not report["skills"]:
            lines += [EMPTY_REPORT_MESSAGE, ""]
        else:
            lines += ["Matched Skills:", ""]
            for skill in report["skills"]:
                lines.append(f"  {skill['name']}")
                lines.append(f"  {format_score_bar(skill['score'])} {skill['score']}/100")
                lines.append(f"  ID: {skill['id']}")
                if skill["category"]:
                    lines.append(f"  Category: {skill['category']}")
                if skill["inferred_from"]:
                    lines.append(f"  Inferred from: {', '.join(skill['inferred_from'])}")
                lines.append(f"  {skill['explanation']}")
                if self.show_evidence and skill["evidence"]:
                    lines.append("  Evidence:")
                    for evidence in skill["evidence"][:MAX_EVIDENCE_LINES]:
                        lines.append(f"    [{evidence['kind']}] {evidence['title']}")
                        lines.append(f"      {evidence['url']}")
                lines.append("")

        summary = report["summary"]
        lines += [
            "-" * 60,
            "Run Summary:",
            "",
            f"  Repositories scanned: {summary['repos_scanned']}",
            f"  Commits analyzed:     {summary['commits_analyzed']}",
            f"  Pull requests:        {summary['prs_analyzed']}",
            f"  Starred repos:        {summary['stars_scanned']}",
            f"  Terms extracted:      {summary['terms_extracted']}",
            f"  Skills matched:       {summary['skills_matched']}",
            f"  Skills reported:      {summary['skills_reported']}",
            f"  Total time:           {summary['elapsed_time']}",
        ]
        if summary["errors"]:
            lines.append(f"  Errors (recovered):   {summary['errors']}")
        lines += ["", "=" * 60, ""]
        return "\n".join(lines)
