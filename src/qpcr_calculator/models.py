"""
Data models for qPCR Calculator using Pydantic.

This module defines the core data structures used throughout the application,
with runtime validation and type safety provided by Pydantic.

Input models accept both Python field names and the camelCase wire names used
by configuration files (``forwardPrimer``, ``cDNA``, ...). Result models dump
to camelCase when serialized ``by_alias``.
"""

from typing import Any
from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel

from qpcr_calculator.config import (
    DEFAULT_CDNA_UL,
    DEFAULT_FORWARD_PRIMER_NAME,
    DEFAULT_MIX_UL,
    DEFAULT_PRIMER_CONCENTRATION_UM,
    DEFAULT_PRIMER_UL,
    DEFAULT_REPEAT,
    DEFAULT_REVERSE_PRIMER_NAME,
    DEFAULT_WATER_UL,
)


# ============================================================================
# Input Data Models
# ============================================================================


class Primer(BaseModel):
    """
    A single primer stock.

    The concentration is carried through for reference only; no volume
    calculation depends on it.
    """

    name: str = Field(..., description="Primer identifier")
    concentration: float = Field(..., description="Stock concentration in µM")

    @field_validator("name")
    @classmethod
    def strip_whitespace(cls, v: str) -> str:
        """Strip leading/trailing whitespace from the name."""
        return v.strip()

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "examples": [{"name": "GAPDH-F", "concentration": 10.0}]
        },
    }


class Recipe(BaseModel):
    """
    Volumes for ONE reaction.

    ``primers`` is the volume of a single primer and is applied identically
    to the forward and the reverse primer. Volumes are not range-checked here;
    negative values flow through the calculation unchanged.
    """

    mix: float = Field(..., description="Master mix volume per reaction (µl)")
    primers: float = Field(..., description="Volume of one primer per reaction (µl)")
    cdna: float = Field(..., alias="cDNA", description="cDNA template volume per reaction (µl)")
    water: float = Field(..., description="Water volume per reaction (µl)")

    model_config = {
        "frozen": True,
        "populate_by_name": True,
        "json_schema_extra": {
            "examples": [{"mix": 10.0, "primers": 1.0, "cDNA": 2.0, "water": 5.0}]
        },
    }


class SampleDesign(BaseModel):
    """
    Experimental layout: which targets are measured, in which groups, and how
    many technical replicates per group per target.

    Target names are kept exactly as given; they become the keys of the
    working solutions. Both name sequences are stored as tuples.
    """

    targets: tuple[str, ...] = Field(default_factory=tuple, description="Ordered target (gene) names")
    repeat: int = Field(..., ge=0, description="Technical replicates per group per target")
    groups: tuple[str, ...] = Field(default_factory=tuple, description="Ordered group (condition) names")

    @field_validator("groups")
    @classmethod
    def strip_names(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        """Strip leading/trailing whitespace from every group name."""
        return tuple(name.strip() for name in v)

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "examples": [
                {"targets": ["geneA", "geneB"], "repeat": 3, "groups": ["ctrl", "treat"]}
            ]
        },
    }


class PrimersConfig(BaseModel):
    """Forward/reverse primer pair."""

    forward: Primer
    reverse: Primer

    model_config = {"frozen": True}


class QPCRConfig(BaseModel):
    """
    Complete input for one volume calculation.

    Immutable once constructed.
    """

    samples: SampleDesign
    recipe: Recipe
    primers: PrimersConfig

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "examples": [
                {
                    "samples": {"targets": ["geneA"], "repeat": 3, "groups": ["ctrl", "treat"]},
                    "recipe": {"mix": 10.0, "primers": 1.0, "cDNA": 2.0, "water": 5.0},
                    "primers": {
                        "forward": {"name": "geneA-F", "concentration": 10.0},
                        "reverse": {"name": "geneA-R", "concentration": 10.0},
                    },
                }
            ]
        },
    }


# ============================================================================
# Result Models
# ============================================================================


class ReagentVolumes(BaseModel):
    """
    Scaled volumes of the four pre-mixed components plus their sum.

    cDNA is not part of this mixture; it is added to each well separately.
    """

    mix: float = Field(..., description="Master mix volume (µl)")
    forward_primer: float = Field(..., description="Forward primer volume (µl)")
    reverse_primer: float = Field(..., description="Reverse primer volume (µl)")
    water: float = Field(..., description="Water volume (µl)")
    total_volume: float = Field(..., description="Sum of the four components (µl)")

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
    }


class WorkingSolution(ReagentVolumes):
    """Per-target mixture scaled to the reactions of that target."""


class MasterMix(ReagentVolumes):
    """Combined mixture scaled to the reactions of the whole experiment."""


class CalculationResult(BaseModel):
    """
    Output of a single volume calculation.

    Produced fresh on every call; nothing is shared between results.
    """

    total_reactions: int = Field(..., description="Reactions across all targets")
    reactions_per_target: int = Field(..., description="Groups × replicates")
    working_solutions: dict[str, WorkingSolution] = Field(
        default_factory=dict, description="Working solution per target name"
    )
    master_mix: MasterMix
    total_cdna_volume: float = Field(..., description="cDNA required for all reactions (µl)")

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "json_schema_extra": {
            "examples": [
                {
                    "totalReactions": 6,
                    "reactionsPerTarget": 6,
                    "workingSolutions": {
                        "geneA": {
                            "mix": 60.0,
                            "forwardPrimer": 6.0,
                            "reversePrimer": 6.0,
                            "water": 30.0,
                            "totalVolume": 102.0,
                        }
                    },
                    "masterMix": {
                        "mix": 60.0,
                        "forwardPrimer": 6.0,
                        "reversePrimer": 6.0,
                        "water": 30.0,
                        "totalVolume": 102.0,
                    },
                    "totalCdnaVolume": 12.0,
                }
            ]
        },
    }


# ============================================================================
# Validation Models
# ============================================================================


class ValidationResult(BaseModel):
    """
    Result of input validation checks.

    Contains all errors, warnings, and summary information.
    """

    is_valid: bool = Field(..., description="True if no blocking errors")
    errors: list[str] = Field(default_factory=list, description="Blocking validation errors")
    warnings: list[str] = Field(default_factory=list, description="Non-blocking warnings")
    summary: dict[str, Any] = Field(default_factory=dict, description="Summary statistics")

    @property
    def has_errors(self) -> bool:
        """Check if there are any errors."""
        return len(self.errors) > 0

    @property
    def has_warnings(self) -> bool:
        """Check if there are any warnings."""
        return len(self.warnings) > 0

    def add_error(self, message: str) -> None:
        """Add an error message."""
        self.errors.append(message)
        self.is_valid = False

    def add_warning(self, message: str) -> None:
        """Add a warning message."""
        self.warnings.append(message)

    def get_report(self) -> str:
        """
        Generate a human-readable report.

        Returns:
            Formatted string with errors, warnings, and summary
        """
        lines = []

        if self.has_errors:
            lines.append("ERRORS:")
            for error in self.errors:
                lines.append(f"  - {error}")
            lines.append("")

        if self.has_warnings:
            lines.append("WARNINGS:")
            for warning in self.warnings:
                lines.append(f"  - {warning}")
            lines.append("")

        if self.summary:
            lines.append("SUMMARY:")
            for key, value in self.summary.items():
                lines.append(f"  {key}: {value}")

        return "\n".join(lines)


# ============================================================================
# Helper Functions for Model Creation
# ============================================================================


def create_qpcr_config(
    targets: list[str],
    groups: list[str],
    repeat: int = DEFAULT_REPEAT,
    mix: float = DEFAULT_MIX_UL,
    primers: float = DEFAULT_PRIMER_UL,
    cdna: float = DEFAULT_CDNA_UL,
    water: float = DEFAULT_WATER_UL,
    forward_name: str = DEFAULT_FORWARD_PRIMER_NAME,
    forward_concentration: float = DEFAULT_PRIMER_CONCENTRATION_UM,
    reverse_name: str = DEFAULT_REVERSE_PRIMER_NAME,
    reverse_concentration: float = DEFAULT_PRIMER_CONCENTRATION_UM,
) -> QPCRConfig:
    """
    Create a QPCRConfig from flat values, filling in defaults.

    Args:
        targets: Target (gene) names
        groups: Group (condition) names
        repeat: Technical replicates per group per target
        mix: Master mix volume per reaction (µl)
        primers: Volume of one primer per reaction (µl)
        cdna: cDNA volume per reaction (µl)
        water: Water volume per reaction (µl)
        forward_name: Forward primer name
        forward_concentration: Forward primer stock concentration (µM)
        reverse_name: Reverse primer name
        reverse_concentration: Reverse primer stock concentration (µM)

    Returns:
        Validated QPCRConfig instance

    Raises:
        ValidationError: If values don't meet model requirements
    """
    return QPCRConfig(
        samples=SampleDesign(targets=list(targets), repeat=repeat, groups=list(groups)),
        recipe=Recipe(mix=mix, primers=primers, cdna=cdna, water=water),
        primers=PrimersConfig(
            forward=Primer(name=forward_name, concentration=forward_concentration),
            reverse=Primer(name=reverse_name, concentration=reverse_concentration),
        ),
    )


def create_config_from_dict(data: dict[str, Any]) -> QPCRConfig:
    """
    Create a QPCRConfig from a nested dictionary (e.g. parsed JSON).

    Raises:
        ValidationError: If data doesn't meet validation requirements
    """
    return QPCRConfig.model_validate(data)
