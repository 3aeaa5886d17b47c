"""
Fields — what a rule can compare against.

Each field has:
- name: record key (also the rule "fact")
- type: string | number | datetime | date
- description: shown to the LLM in the generation prompt

FIELDS order is the CSV column order of the transaction export.
FIELD_ALIASES maps free-text phrases to field names (many-to-one).
"""

from types import MappingProxyType
from typing import Literal, TypedDict

FieldType = Literal["string", "number", "datetime", "date"]


class FieldDef(TypedDict):
    name: str
    type: FieldType
    description: str


_FIELDS: list[FieldDef] = [
    {"name": "transactionId", "type": "string", "description": "Unique transaction identifier"},
    {"name": "timestamp", "type": "datetime", "description": "Transaction timestamp"},
    {"name": "cardNumber", "type": "string", "description": "Credit card number"},
    {"name": "merchant", "type": "string", "description": "Merchant name"},
    {"name": "category", "type": "string", "description": "Transaction category (home, travel, food_dining, etc.)"},
    {"name": "amt", "type": "number", "description": "Transaction amount in dollars"},
    {"name": "firstName", "type": "string", "description": "Cardholder first name"},
    {"name": "lastName", "type": "string", "description": "Cardholder last name"},
    {"name": "gender", "type": "string", "description": "Cardholder gender (M/F)"},
    {"name": "streetAddress", "type": "string", "description": "Street address"},
    {"name": "city", "type": "string", "description": "City"},
    {"name": "state", "type": "string", "description": "State abbreviation"},
    {"name": "zip", "type": "string", "description": "ZIP code"},
    {"name": "lat", "type": "number", "description": "Latitude coordinate"},
    {"name": "long", "type": "number", "description": "Longitude coordinate"},
    {"name": "cityPop", "type": "number", "description": "City population"},
    {"name": "job", "type": "string", "description": "Job title"},
    {"name": "dob", "type": "date", "description": "Date of birth"},
    {"name": "transHash", "type": "string", "description": "Transaction hash"},
    {"name": "unixTime", "type": "number", "description": "Unix timestamp"},
    {"name": "merLat", "type": "number", "description": "Merchant latitude"},
    {"name": "merLong", "type": "number", "description": "Merchant longitude"},
    {"name": "isFraud", "type": "number", "description": "Fraud indicator (0/1)"},
    {"name": "merZip", "type": "string", "description": "Merchant ZIP code"},
]

FIELDS: MappingProxyType = MappingProxyType(
    {f["name"]: MappingProxyType(dict(f)) for f in _FIELDS}
)


FIELD_ALIASES: MappingProxyType = MappingProxyType({
    # Amount
    "amount": "amt",
    "price": "amt",
    "cost": "amt",
    "value": "amt",
    "dollars": "amt",
    "money": "amt",
    "transaction amount": "amt",
    # Merchant
    "store": "merchant",
    "shop": "merchant",
    "business": "merchant",
    "vendor": "merchant",
    "company": "merchant",
    # Cardholder
    "name": "firstName",
    "first name": "firstName",
    "last name": "lastName",
    "surname": "lastName",
    # Location
    "location": "city",
    "place": "city",
    # Fraud flag
    "fraud": "isFraud",
    "fraudulent": "isFraud",
    "suspicious": "isFraud",
})


# =============================================================================
# Lookup
# =============================================================================

def resolve_field(text: str) -> str | None:
    """
    Resolve free text to a field name.

    Aliases are checked first, then field names (case-insensitive).
    Returns None when nothing matches.

    Examples:
        resolve_field("amount") → "amt"
        resolve_field(" Fraud ") → "isFraud"
        resolve_field("CITYPOP") → "cityPop"
        resolve_field("balance") → None
    """
    if not text:
        return None

    normalized = text.lower().strip()

    if normalized in FIELD_ALIASES:
        return FIELD_ALIASES[normalized]

    for name in FIELDS:
        if name.lower() == normalized:
            return name

    return None


def get_field(name: str) -> MappingProxyType | None:
    """Get field definition by exact name."""
    return FIELDS.get(name)


def get_field_names() -> list[str]:
    """Field names in column order."""
    return list(FIELDS)


def get_fields_by_type(field_type: FieldType) -> list[str]:
    """Field names of a given value type."""
    return [name for name, f in FIELDS.items() if f["type"] == field_type]


def get_fields_for_prompt() -> str:
    """One line per field: 'name (type): description'."""
    return "\n".join(
        f"{f['name']} ({f['type']}): {f['description']}"
        for f in FIELDS.values()
    )
