"""
Unit tests for validation module.

Tests name checks, recipe and primer checks, warnings for empty plans,
and conversion of raw input into a configuration.
"""

from qpcr_calculator.models import create_qpcr_config
from qpcr_calculator.validation import (
    parse_configuration,
    validate_configuration,
    validate_design,
    validate_names,
    validate_primers,
    validate_recipe,
)


def raw_config(**overrides):
    data = {
        "samples": {"targets": ["geneA", "geneB"], "repeat": 3, "groups": ["ctrl", "treat"]},
        "recipe": {"mix": 10, "primers": 1, "cDNA": 2, "water": 5},
        "primers": {
            "forward": {"name": "geneA-F", "concentration": 10},
            "reverse": {"name": "geneA-R", "concentration": 10},
        },
    }
    data.update(overrides)
    return data


# ============================================================================
# validate_names Tests
# ============================================================================


def test_validate_names_clean():
    """validate_names should return no errors for unique names."""
    assert validate_names(["geneA", "geneB"], "Target") == []


def test_validate_names_duplicate():
    """validate_names should report duplicates with 1-indexed positions."""
    errors = validate_names(["geneA", "geneB", "geneA"], "Target")

    assert len(errors) == 1
    assert "Duplicate target name" in errors[0]
    assert "'geneA'" in errors[0]
    assert "1, 3" in errors[0]


def test_validate_names_blank():
    """validate_names should report blank names."""
    errors = validate_names(["ctrl", "  "], "Group")

    assert errors == ["Group at position 2: Name cannot be empty"]


def test_validate_names_blank_not_counted_as_duplicate():
    """Several blank names should each be reported once as blank."""
    errors = validate_names(["", ""], "Target")

    assert len(errors) == 2
    assert all("cannot be empty" in error for error in errors)


# ============================================================================
# Section Checks
# ============================================================================


def test_validate_design_warnings_for_empty_lists():
    """Empty targets and groups should produce warnings, not errors."""
    config = create_qpcr_config(targets=[], groups=[], repeat=3)
    errors, warnings = validate_design(config)

    assert errors == []
    assert len(warnings) == 2
    assert any("No targets" in warning for warning in warnings)
    assert any("No groups" in warning for warning in warnings)


def test_validate_design_zero_repeat_warning():
    """A replicate count of 0 should produce a warning."""
    config = create_qpcr_config(targets=["geneA"], groups=["ctrl"], repeat=0)
    errors, warnings = validate_design(config)

    assert errors == []
    assert any("Replicate count is 0" in warning for warning in warnings)


def test_validate_recipe_negative_volume():
    """Negative recipe volumes should be errors."""
    config = create_qpcr_config(targets=["geneA"], groups=["ctrl"], mix=-1.0, cdna=-0.5)
    errors, _ = validate_recipe(config)

    assert len(errors) == 2
    assert any("mix" in error for error in errors)
    assert any("cDNA" in error for error in errors)


def test_validate_recipe_all_zero_warning():
    """An all-zero recipe should produce a single warning."""
    config = create_qpcr_config(
        targets=["geneA"], groups=["ctrl"], mix=0, primers=0, cdna=0, water=0
    )
    errors, warnings = validate_recipe(config)

    assert errors == []
    assert len(warnings) == 1
    assert "All recipe volumes are 0" in warnings[0]


def test_validate_recipe_zero_cdna_warning():
    """A recipe without cDNA should produce a warning."""
    config = create_qpcr_config(targets=["geneA"], groups=["ctrl"], cdna=0)
    _, warnings = validate_recipe(config)

    assert len(warnings) == 1
    assert "cDNA volume is 0" in warnings[0]


def test_validate_primers_non_positive_concentration():
    """Zero or negative primer concentrations should be errors."""
    config = create_qpcr_config(
        targets=["geneA"],
        groups=["ctrl"],
        forward_concentration=0.0,
        reverse_concentration=-1.0,
    )
    errors, _ = validate_primers(config)

    assert len(errors) == 2
    assert errors[0].startswith("Forward primer")
    assert errors[1].startswith("Reverse primer")


def test_validate_primers_empty_name():
    """Blank primer names should be errors."""
    config = create_qpcr_config(targets=["geneA"], groups=["ctrl"], forward_name="  ")
    errors, _ = validate_primers(config)

    assert errors == ["Forward primer: Name cannot be empty"]


def test_validate_primers_same_name_warning():
    """Forward and reverse sharing a name should produce a warning."""
    config = create_qpcr_config(
        targets=["geneA"], groups=["ctrl"], forward_name="P1", reverse_name="P1"
    )
    errors, warnings = validate_primers(config)

    assert errors == []
    assert len(warnings) == 1
    assert "'P1'" in warnings[0]


# ============================================================================
# validate_configuration Tests
# ============================================================================


def test_validate_configuration_valid():
    """A typical configuration should pass with a summary."""
    config = create_qpcr_config(targets=["geneA", "geneB"], groups=["ctrl", "treat"], repeat=3)
    result = validate_configuration(config)

    assert result.is_valid
    assert result.errors == []
    assert result.warnings == []
    assert result.summary == {
        "num_targets": 2,
        "num_groups": 2,
        "replicates": 3,
        "reactions_per_target": 6,
        "total_reactions": 12,
    }


def test_validate_configuration_collects_all_errors():
    """Errors from every section should be collected together."""
    config = create_qpcr_config(
        targets=["geneA", "geneA"],
        groups=["ctrl"],
        water=-5.0,
        reverse_concentration=0.0,
    )
    result = validate_configuration(config)

    assert not result.is_valid
    assert len(result.errors) == 3
    assert "ERRORS:" in result.get_report()


# ============================================================================
# parse_configuration Tests
# ============================================================================


def test_parse_configuration_valid():
    """parse_configuration should return a config and a passing result."""
    config, result = parse_configuration(raw_config())

    assert config is not None
    assert config.samples.targets == ("geneA", "geneB")
    assert result.is_valid


def test_parse_configuration_type_error():
    """Shape problems should be reported, not raised."""
    data = raw_config(recipe={"mix": "lots", "primers": 1, "cDNA": 2, "water": 5})
    config, result = parse_configuration(data)

    assert config is None
    assert not result.is_valid
    assert len(result.errors) == 1
    assert result.errors[0].startswith("recipe.mix:")


def test_parse_configuration_missing_sections():
    """Every missing section should get its own message."""
    config, result = parse_configuration({"samples": {"repeat": 3}})

    assert config is None
    locations = [error.split(":")[0] for error in result.errors]
    assert "recipe" in locations
    assert "primers" in locations


def test_parse_configuration_negative_repeat():
    """A negative replicate count is rejected at parse time."""
    data = raw_config(samples={"targets": ["geneA"], "repeat": -2, "groups": ["ctrl"]})
    config, result = parse_configuration(data)

    assert config is None
    assert result.errors[0].startswith("samples.repeat:")


def test_parse_configuration_semantic_error():
    """A well-formed config with duplicates parses but fails validation."""
    data = raw_config(samples={"targets": ["geneA", "geneA"], "repeat": 3, "groups": ["ctrl"]})
    config, result = parse_configuration(data)

    assert config is not None
    assert not result.is_valid
    assert "Duplicate target name" in result.errors[0]
