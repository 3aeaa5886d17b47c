"""
Agent implementations.

Each agent does ONE thing:
- RuleGenerator: question → Rule (via LLM backend)
- PatternParser: question → Rule (regex, offline)
- Summarizer: matched records → summary text
"""

from txn_agent.agents.generator import GenerationResult, RuleGenerator, generate_rule
from txn_agent.agents.pattern_parser import PatternParser, parse_pattern_rule
from txn_agent.agents.summarizer import SummaryResult, Summarizer, summarize

__all__ = [
    "GenerationResult",
    "RuleGenerator",
    "generate_rule",
    "PatternParser",
    "parse_pattern_rule",
    "SummaryResult",
    "Summarizer",
    "summarize",
]
