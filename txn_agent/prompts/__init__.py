"""
Prompt templates for agents.

Each file contains only constants and small builders.
Agent logic is in txn_agent/agents/*.py
"""

from txn_agent.prompts.generator import RULE_PROMPT, get_rule_prompt
from txn_agent.prompts.summarizer import SUMMARY_PROMPT, TEMPLATES

__all__ = [
    "RULE_PROMPT",
    "get_rule_prompt",
    "SUMMARY_PROMPT",
    "TEMPLATES",
]
