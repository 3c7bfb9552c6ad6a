"""Industry vocabulary used when grouping companies and jobs."""

INDUSTRIES = [
    "Technology",
    "Finance",
    "Healthcare",
    "Education",
    "Manufacturing",
    "Retail",
    "Hospitality",
    "Construction",
    "Transportation",
    "Media",
    "Energy",
    "Telecommunications",
    "Real Estate",
    "Government",
    "Non-profit",
    "Other",
]
