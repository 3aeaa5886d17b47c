"""
Generator prompt — natural language → JSON rule.

Field catalog and operator vocabulary come from txn_agent/rules,
so the prompt and the executor share one vocabulary.
The prompt ends with an open <result> tag; extraction accepts
completions that only close it.
"""

from txn_agent.rules import get_fields_for_prompt, get_operators_for_prompt


RULE_PROMPT = """You are a JSON rules engine generator for credit card transaction filtering. Your task is to convert natural language queries into precise JSON rules.

AVAILABLE FIELDS:
{fields}

SUPPORTED OPERATORS (use these EXACT names):
{operators}

CRITICAL RULES:
1. Use ONLY the field names from the available fields list above
2. Use ONLY the exact operator names listed above (e.g., "equal" NOT "equals")
3. The "amt" field represents transaction amount in dollars
4. For categories, use "equal" operator with exact string matching
5. Use "all" when every condition must hold, "any" when one is enough
6. Return ONLY valid JSON, no other text
7. Surround your JSON output with <result></result> tags

QUERY: "{query}"

Generate a JSON rule following this exact structure:
{{
  "conditions": {{
    "all": [
      {{
        "fact": "field_name",
        "operator": "operator_name",
        "value": value
      }}
    ]
  }},
  "event": {{
    "type": "transaction-match",
    "params": {{
      "message": "Clear description of what this rule matches"
    }}
  }}
}}

<result>"""


def get_rule_prompt(query: str) -> str:
    """Build rule generation prompt for a query (embedded verbatim)."""
    return RULE_PROMPT.format(
        fields=get_fields_for_prompt(),
        operators=get_operators_for_prompt(),
        query=query,
    )
