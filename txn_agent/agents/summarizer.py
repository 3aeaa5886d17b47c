"""
Summarizer — natural-language summary of matched transactions.

Three paths:
- 0 matches: template, no backend call
- matches + backend ok: LLM narrative (2-3 sentences)
- matches + backend failure: deterministic template from stats

Statistics are computed by code (stats.py). The LLM only phrases them.
Never raises to the caller.
"""

import logging
from dataclasses import dataclass, field

import config
from txn_agent.backends import TextBackend, get_backend
from txn_agent.errors import BackendUnavailableError, SummaryDegraded
from txn_agent.prompts.summarizer import SUMMARY_PROMPT, TEMPLATES
from txn_agent.stats import AmountStats, compute_amount_stats, match_percentage
from txn_agent.types import Usage
from txn_agent.utils.formatting import format_date, format_pct, format_usd

logger = logging.getLogger(__name__)


@dataclass
class SummaryResult:
    """Summary text; degraded=True when the template replaced the narrative."""
    text: str
    degraded: bool = False
    usage: Usage = field(default_factory=Usage)


def _merchant(record: dict) -> str:
    return record.get("merchant") or "Unknown"


def _format_sample(records: list[dict]) -> str:
    """Compact one-line-per-record sample for the prompt."""
    lines = []
    for i, r in enumerate(records, 1):
        location = ", ".join(str(p) for p in (r.get("city"), r.get("state")) if p)
        lines.append(
            f"{i}. {format_usd(r.get('amt'))} at {_merchant(r)} "
            f"({r.get('category') or 'uncategorized'})"
            + (f" in {location}" if location else "")
            + f" on {format_date(r.get('timestamp'))}"
        )
    return "\n".join(lines)


class Summarizer:
    """
    Summary writer for query results.

    Usage:
        summarizer = Summarizer()
        result = summarizer.summarize("coffee purchases", matched, total=1000)
        print(result.text)
    """

    def __init__(
        self,
        backend: TextBackend | None = None,
        temperature: float | None = None,
        top_p: float | None = None,
        sample_size: int | None = None,
    ):
        self.backend = backend or get_backend()
        self.temperature = temperature if temperature is not None else config.SUMMARY_TEMPERATURE
        self.top_p = top_p if top_p is not None else config.TOP_P
        self.sample_size = sample_size if sample_size is not None else config.SAMPLE_SIZE

    def summarize(
        self,
        query: str,
        matched: list[dict],
        total: int,
        narrative: bool = True,
    ) -> SummaryResult:
        """
        Summarize matches. Falls back to templates, never raises.

        Args:
            narrative: If False, skip the backend and use the template
        """
        if not matched:
            return SummaryResult(
                text=TEMPLATES["no_matches"].format(query=query, total=total)
            )

        percentage = format_pct(match_percentage(len(matched), total))
        stats = compute_amount_stats(matched)

        if stats is None:
            # Nothing numeric to report on
            logger.warning("Matched records have no numeric amounts")
            return SummaryResult(
                text=f'Found {len(matched)} transactions ({percentage} of total) matching "{query}".',
                degraded=True,
            )

        if not narrative:
            return SummaryResult(text=self._fallback(query, len(matched), percentage, stats))

        try:
            text, usage = self._generate_narrative(query, matched, total, percentage, stats)
            return SummaryResult(text=text, usage=usage)
        except SummaryDegraded as e:
            logger.warning(f"Summary generation failed, using template: {e.message}")
            return SummaryResult(
                text=self._fallback(query, len(matched), percentage, stats),
                degraded=True,
            )

    def _generate_narrative(
        self,
        query: str,
        matched: list[dict],
        total: int,
        percentage: str,
        stats: AmountStats,
    ) -> tuple[str, Usage]:
        """
        Ask the backend for a 2-3 sentence narrative.

        Raises:
            SummaryDegraded: backend failed or returned nothing
        """
        prompt = SUMMARY_PROMPT.format(
            query=query,
            total=total,
            match_count=len(matched),
            percentage=percentage,
            lowest=format_usd(stats.lowest),
            lowest_merchant=_merchant(stats.lowest_record),
            lowest_date=format_date(stats.lowest_record.get("timestamp")),
            highest=format_usd(stats.highest),
            highest_merchant=_merchant(stats.highest_record),
            highest_date=format_date(stats.highest_record.get("timestamp")),
            average=format_usd(stats.average),
            sample=_format_sample(matched[:self.sample_size]),
        )

        try:
            completion = self.backend.generate(
                prompt,
                temperature=self.temperature,
                top_p=self.top_p,
            )
        except BackendUnavailableError as e:
            raise SummaryDegraded(e.message) from e

        text = completion.text.strip()
        if not text:
            raise SummaryDegraded("backend returned an empty summary")

        return text, completion.usage

    def _fallback(self, query: str, match_count: int, percentage: str, stats: AmountStats) -> str:
        return TEMPLATES["fallback"].format(
            match_count=match_count,
            percentage=percentage,
            query=query,
            lowest=format_usd(stats.lowest),
            lowest_merchant=_merchant(stats.lowest_record),
            highest=format_usd(stats.highest),
            highest_merchant=_merchant(stats.highest_record),
        )


# =============================================================================
# Simple API
# =============================================================================

def summarize(
    query: str,
    matched: list[dict],
    total: int,
    backend: TextBackend | None = None,
) -> str:
    """
    Summarize matched transactions.

    Simple wrapper — returns just the text.
    """
    return Summarizer(backend=backend).summarize(query, matched, total).text
