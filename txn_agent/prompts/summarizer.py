"""
Summary prompt and templates.

Used by agents/summarizer.py.
Statistics are pre-computed by code (stats.py); the LLM only phrases them.
"""

# Deterministic templates, used when there is nothing to narrate
# or the backend call fails
TEMPLATES = {
    "no_matches": (
        'No transactions matched the criteria "{query}" '
        "out of {total} total transactions."
    ),
    "fallback": (
        'Found {match_count} transactions ({percentage} of total) matching "{query}". '
        "The lowest amount was {lowest} at {lowest_merchant}, "
        "and the highest was {highest} at {highest_merchant}."
    ),
}


SUMMARY_PROMPT = """You are a financial data analyst providing insights on credit card transaction analysis results.

ORIGINAL QUERY: "{query}"

ANALYSIS RESULTS:
- Total transactions in dataset: {total}
- Transactions matching criteria: {match_count}
- Match percentage: {percentage}

FINANCIAL INSIGHTS:
- Lowest matching amount: {lowest} at {lowest_merchant} on {lowest_date}
- Highest matching amount: {highest} at {highest_merchant} on {highest_date}
- Average amount: {average}

SAMPLE MATCHING TRANSACTIONS:
{sample}

TASK: Generate a natural language summary that:
1. States how many transactions matched the criteria
2. Highlights the most notable findings (lowest, highest amounts)
3. Mentions interesting patterns in merchants, categories, or locations
4. Uses a professional but conversational tone
5. Keep it concise (2-3 sentences maximum)

Provide only the summary, no additional text:"""
