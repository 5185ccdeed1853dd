"""
Configuration constants and defaults for qPCR Calculator.

This module contains default recipe values, column name mappings for design
spreadsheets, message templates, and application metadata.
"""

from typing import Final

# ============================================================================
# Default Recipe (per single reaction, µl)
# ============================================================================

# 2X master mix (polymerase, buffer, dNTPs)
DEFAULT_MIX_UL: Final[float] = 10.0

# Volume of ONE primer; the same volume is used for forward and reverse
DEFAULT_PRIMER_UL: Final[float] = 1.0

# Template added to each well separately from the master mix
DEFAULT_CDNA_UL: Final[float] = 2.0

DEFAULT_WATER_UL: Final[float] = 5.0

# ============================================================================
# Default Experimental Design
# ============================================================================

# Technical replicates per group per target
DEFAULT_REPEAT: Final[int] = 3

# Primer stock concentration (µM) - carried through, not used in the arithmetic
DEFAULT_PRIMER_CONCENTRATION_UM: Final[float] = 10.0

DEFAULT_FORWARD_PRIMER_NAME: Final[str] = "Forward"
DEFAULT_REVERSE_PRIMER_NAME: Final[str] = "Reverse"

# Decimal places used when formatting volumes for display
DEFAULT_VOLUME_DECIMALS: Final[int] = 1

VOLUME_UNIT: Final[str] = "µl"

# ============================================================================
# Design Spreadsheet Column Names (Case-Insensitive Matching)
# ============================================================================

TARGET_COLUMN: Final[str] = "Target"
GROUP_COLUMN: Final[str] = "Group"

DESIGN_COLUMNS: Final[list[str]] = [TARGET_COLUMN, GROUP_COLUMN]

# Maps alternative names to standard internal names
COLUMN_ALIASES: Final[dict[str, str]] = {
    # Target variants
    "target": TARGET_COLUMN,
    "targets": TARGET_COLUMN,
    "gene": TARGET_COLUMN,
    "genes": TARGET_COLUMN,
    "target_name": TARGET_COLUMN,
    "gene_name": TARGET_COLUMN,
    # Group variants
    "group": GROUP_COLUMN,
    "groups": GROUP_COLUMN,
    "condition": GROUP_COLUMN,
    "treatment": GROUP_COLUMN,
    "sample_group": GROUP_COLUMN,
}

# ============================================================================
# Output Column Names
# ============================================================================

COMPONENT_COLUMN: Final[str] = "Component"
VOLUME_COLUMN: Final[str] = "Volume (µl)"

OUTPUT_WORKING_SOLUTION_COLUMNS: Final[list[str]] = [
    "Target",
    "Reactions",
    "Mix (µl)",
    "Forward Primer (µl)",
    "Reverse Primer (µl)",
    "Water (µl)",
    "Total Volume (µl)",
]

MASTER_MIX_COMPONENTS: Final[list[tuple[str, str]]] = [
    ("mix", "Mix"),
    ("forward_primer", "Forward Primer"),
    ("reverse_primer", "Reverse Primer"),
    ("water", "Water"),
]

MASTER_MIX_TOTAL_LABEL: Final[str] = "Total"
CDNA_TOTAL_LABEL: Final[str] = "cDNA (total)"

# ============================================================================
# Validation Messages
# ============================================================================

ERROR_NEGATIVE_VOLUME: Final[str] = "Recipe, {field}: Volume must be >= 0, got {value}"
ERROR_DUPLICATE_NAME: Final[str] = "Duplicate {kind} name found: '{value}' at positions {positions}"
ERROR_EMPTY_NAME: Final[str] = "{kind} at position {position}: Name cannot be empty"
ERROR_EMPTY_PRIMER_NAME: Final[str] = "{primer} primer: Name cannot be empty"
ERROR_NON_POSITIVE_CONCENTRATION: Final[str] = (
    "{primer} primer: Concentration must be > 0, got {value}"
)
ERROR_INVALID_FIELD: Final[str] = "{location}: {message}"

WARN_NO_TARGETS: Final[str] = "No targets defined - nothing will be prepared"
WARN_NO_GROUPS: Final[str] = "No groups defined - every volume will be 0"
WARN_ZERO_REPEAT: Final[str] = "Replicate count is 0 - every volume will be 0"
WARN_EMPTY_RECIPE: Final[str] = "All recipe volumes are 0 - nothing will be pipetted"
WARN_ZERO_CDNA: Final[str] = "Recipe cDNA volume is 0 - reactions will have no template"
WARN_SAME_PRIMER_NAME: Final[str] = (
    "Forward and reverse primers share the name '{name}' - check the primer pair"
)

# ============================================================================
# Application Metadata
# ============================================================================

APP_NAME: Final[str] = "qPCR Calculator"

DEFAULT_EXPORT_PREFIX: Final[str] = "qpcr_plan"

# ============================================================================
# Runtime Environment
# ============================================================================

ENV_LOG_LEVEL: Final[str] = "QPCR_CALCULATOR_LOG_LEVEL"
DEFAULT_LOG_LEVEL: Final[str] = "INFO"

ENV_SERVER_NAME: Final[str] = "GRADIO_SERVER_NAME"
ENV_SERVER_PORT: Final[str] = "GRADIO_SERVER_PORT"
DEFAULT_SERVER_NAME: Final[str] = "127.0.0.1"
DEFAULT_SERVER_PORT: Final[int] = 7860

# ============================================================================
# Helper Functions
# ============================================================================


def normalize_column_name(name: str) -> str:
    """
    Normalize a column name for matching.

    Converts to lowercase, strips whitespace, and looks up aliases.

    Args:
        name: Raw column name from input file

    Returns:
        Standardized column name, or original if no match found
    """
    normalized = name.strip().lower()

    if normalized in COLUMN_ALIASES:
        return COLUMN_ALIASES[normalized]

    for col in DESIGN_COLUMNS:
        if col.lower() == normalized:
            return col

    return name
