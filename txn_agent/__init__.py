"""Natural-language rule engine for credit card transactions."""
