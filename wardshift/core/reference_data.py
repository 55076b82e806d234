"""
Static lookup tables: departments, bed capacities and the country list
used for input assistance. Read-only at runtime.
"""

from typing import Dict, List

CORONARY_UNIT = "Coronary Unit"

DEPARTMENTS: List[str] = [
    CORONARY_UNIT,
    "Cardiology",
    "Intensive Care",
    "Internal Medicine",
    "Emergency",
]

DEPARTMENT_SHORT_NAMES: Dict[str, str] = {
    CORONARY_UNIT: "CCU",
    "Cardiology": "CARD",
    "Intensive Care": "ICU",
    "Internal Medicine": "IM",
    "Emergency": "ER",
}

DEPARTMENT_BED_COUNTS: Dict[str, int] = {
    CORONARY_UNIT: 10,
    "Cardiology": 24,
    "Intensive Care": 12,
    "Internal Medicine": 20,
    "Emergency": 15,
}

# Fallback label for patients saved without a department
OTHER_DEPARTMENT = "Other"

COUNTRIES: List[str] = [
    "Albania",
    "Austria",
    "Belgium",
    "Bosnia and Herzegovina",
    "Bulgaria",
    "Croatia",
    "Czech Republic",
    "Denmark",
    "Finland",
    "France",
    "Germany",
    "Greece",
    "Hungary",
    "Ireland",
    "Italy",
    "Kosovo",
    "Montenegro",
    "Netherlands",
    "North Macedonia",
    "Norway",
    "Poland",
    "Portugal",
    "Romania",
    "Serbia",
    "Slovakia",
    "Slovenia",
    "Spain",
    "Sweden",
    "Switzerland",
    "Turkey",
    "United Kingdom",
    "United States",
]


def search_countries(query: str) -> List[str]:
    """Case-insensitive substring filter over COUNTRIES."""
    needle = (query or "").strip().lower()
    if not needle:
        return list(COUNTRIES)
    return [c for c in COUNTRIES if needle in c.lower()]
