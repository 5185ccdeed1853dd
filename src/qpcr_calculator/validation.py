"""
Validation logic for qPCR Calculator.

This module is an optional layer in front of the calculation. It handles:
- Conversion of raw input into a QPCRConfig with readable error messages
- Name checks (blank and duplicate targets, groups, primers)
- Range checks on recipe volumes and primer concentrations
- Warnings for designs that produce empty or all-zero plans

The calculation itself never calls this module.
"""

from collections import defaultdict
from typing import Any

from pydantic import ValidationError

from qpcr_calculator.compute import compute_reactions_per_target, compute_total_reactions
from qpcr_calculator.config import (
    ERROR_DUPLICATE_NAME,
    ERROR_EMPTY_NAME,
    ERROR_EMPTY_PRIMER_NAME,
    ERROR_INVALID_FIELD,
    ERROR_NEGATIVE_VOLUME,
    ERROR_NON_POSITIVE_CONCENTRATION,
    WARN_EMPTY_RECIPE,
    WARN_NO_GROUPS,
    WARN_NO_TARGETS,
    WARN_SAME_PRIMER_NAME,
    WARN_ZERO_CDNA,
    WARN_ZERO_REPEAT,
)
from qpcr_calculator.models import QPCRConfig, ValidationResult


def validate_names(names: tuple[str, ...] | list[str], kind: str) -> list[str]:
    """
    Check a list of names for blanks and duplicates.

    Args:
        names: Target or group names, in order
        kind: Label used in messages ("Target", "Group")

    Returns:
        List of error messages (positions are 1-indexed)
    """
    errors = []
    positions: dict[str, list[int]] = defaultdict(list)

    for idx, name in enumerate(names, start=1):
        if name.strip() == "":
            errors.append(ERROR_EMPTY_NAME.format(kind=kind, position=idx))
            continue
        positions[name].append(idx)

    for name, found_at in positions.items():
        if len(found_at) > 1:
            errors.append(ERROR_DUPLICATE_NAME.format(
                kind=kind.lower(),
                value=name,
                positions=", ".join(map(str, found_at)),
            ))

    return errors


def validate_recipe(config: QPCRConfig) -> tuple[list[str], list[str]]:
    """
    Check recipe volumes.

    Returns:
        Tuple of (errors, warnings)
    """
    errors = []
    warnings = []
    recipe = config.recipe

    volumes = {
        "mix": recipe.mix,
        "primers": recipe.primers,
        "cDNA": recipe.cdna,
        "water": recipe.water,
    }
    for field, value in volumes.items():
        if value < 0:
            errors.append(ERROR_NEGATIVE_VOLUME.format(field=field, value=value))

    if all(value == 0 for value in volumes.values()):
        warnings.append(WARN_EMPTY_RECIPE)
    elif recipe.cdna == 0:
        warnings.append(WARN_ZERO_CDNA)

    return errors, warnings


def validate_primers(config: QPCRConfig) -> tuple[list[str], list[str]]:
    """
    Check primer names and concentrations.

    Returns:
        Tuple of (errors, warnings)
    """
    errors = []
    warnings = []
    pair = config.primers

    for label, primer in (("Forward", pair.forward), ("Reverse", pair.reverse)):
        if primer.name == "":
            errors.append(ERROR_EMPTY_PRIMER_NAME.format(primer=label))
        if primer.concentration <= 0:
            errors.append(ERROR_NON_POSITIVE_CONCENTRATION.format(
                primer=label, value=primer.concentration
            ))

    if pair.forward.name and pair.forward.name == pair.reverse.name:
        warnings.append(WARN_SAME_PRIMER_NAME.format(name=pair.forward.name))

    return errors, warnings


def validate_design(config: QPCRConfig) -> tuple[list[str], list[str]]:
    """
    Check targets, groups, and replicate count.

    Returns:
        Tuple of (errors, warnings)
    """
    samples = config.samples
    errors = validate_names(samples.targets, "Target") + validate_names(samples.groups, "Group")
    warnings = []

    if not samples.targets:
        warnings.append(WARN_NO_TARGETS)
    if not samples.groups:
        warnings.append(WARN_NO_GROUPS)
    if samples.repeat == 0:
        warnings.append(WARN_ZERO_REPEAT)

    return errors, warnings


def validate_configuration(config: QPCRConfig) -> ValidationResult:
    """
    Run all validation checks on a configuration.

    Args:
        config: Configuration to check

    Returns:
        ValidationResult with errors, warnings, summary, and validity status
    """
    all_errors = []
    all_warnings = []

    for check in (validate_design, validate_recipe, validate_primers):
        errors, warnings = check(config)
        all_errors.extend(errors)
        all_warnings.extend(warnings)

    summary = {
        "num_targets": len(config.samples.targets),
        "num_groups": len(config.samples.groups),
        "replicates": config.samples.repeat,
        "reactions_per_target": compute_reactions_per_target(config.samples),
        "total_reactions": compute_total_reactions(config.samples),
    }

    return ValidationResult(
        is_valid=len(all_errors) == 0,
        errors=all_errors,
        warnings=all_warnings,
        summary=summary,
    )


def format_validation_error(exc: ValidationError) -> list[str]:
    """
    Turn a Pydantic ValidationError into one message per failing field.

    Example: "samples.repeat: Input should be greater than or equal to 0"
    """
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"]) or "configuration"
        messages.append(ERROR_INVALID_FIELD.format(location=location, message=error["msg"]))
    return messages


def parse_configuration(data: dict[str, Any]) -> tuple[QPCRConfig | None, ValidationResult]:
    """
    Build a QPCRConfig from raw data and validate it.

    Shape and type problems are reported instead of raised, so a host can
    display every problem at once.

    Args:
        data: Nested dictionary (e.g. parsed JSON)

    Returns:
        Tuple of (config or None if the data could not be parsed, ValidationResult)
    """
    try:
        config = QPCRConfig.model_validate(data)
    except ValidationError as e:
        return None, ValidationResult(is_valid=False, errors=format_validation_error(e))

    return config, validate_configuration(config)
