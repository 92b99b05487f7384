"""
Constants for smelter_recon package.

Centralizes vocabularies and tuning defaults used by the reconciliation engine.
"""

# Legal-entity suffixes stripped from facility names before comparison
LEGAL_SUFFIXES = (
    "ltd",
    "inc",
    "corp",
    "corporation",
    "limited",
    "gmbh",
    "sa",
    "llc",
    "co",
    "company",
)

# Standard codes a reference list can be loaded under (the "list type")
KNOWN_STANDARDS = ("CMRT", "EMRT", "AMRT")

# Tag for records that only say they come from an RMI list
GENERIC_STANDARD = "RMI"

# Keyword fallback when a status has no "<STANDARD>: " prefix.
# Checked in order, first hit wins.
STANDARD_KEYWORDS = (
    ("cmrt", "CMRT"),
    ("conflict minerals", "CMRT"),
    ("emrt", "EMRT"),
    ("extended minerals", "EMRT"),
    ("amrt", "AMRT"),
    ("aluminium", "AMRT"),
    ("rmi", GENERIC_STANDARD),
    ("conformant", GENERIC_STANDARD),
)

# Assessment status assumed when a reference row has none
DEFAULT_ASSESSMENT_STATUS = "Conformant"

# Metals preselected for a comparison when present in the reference data
DEFAULT_METALS = ("Gold", "Tin", "Cobalt", "Copper", "Nickel")
DEFAULT_STANDARDS = ("CMRT",)

# Fuzzy matching defaults
DEFAULT_FUZZY_ACCEPT_THRESHOLD = 0.6  # Below this a fuzzy candidate is rejected
DEFAULT_FUZZY_CLASSIFY_THRESHOLD = 0.8  # Below this a fuzzy match needs attention
DEFAULT_NAME_WEIGHT = 0.8
DEFAULT_ID_WEIGHT = 0.2
DEFAULT_KEY_THRESHOLD = 0.6  # Minimum per-key similarity for a key to count
DEFAULT_MIN_MATCH_LENGTH = 3  # Shorter normalized queries are not fuzzy searched

# Exact matches own confidence 1.0; fuzzy confidence stays strictly below it
MAX_FUZZY_CONFIDENCE = 0.999

# Parallel processing defaults
DEFAULT_WORKERS = 1
