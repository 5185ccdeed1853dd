"""
Tests for the Gradio host functions.

Exercises the form-processing entry point and the greeting without
launching a server.
"""

from pathlib import Path
from unittest.mock import Mock

import pandas as pd

from qpcr_calculator.ui import greet, process_inputs, split_names, write_export_file


FIXTURES_DIR = Path(__file__).parent / "fixtures"

FORM_DEFAULTS = {
    "targets_text": "geneA",
    "groups_text": "ctrl, treat",
    "repeat": 3.0,
    "mix": 10.0,
    "primers": 1.0,
    "cdna": 2.0,
    "water": 5.0,
    "forward_name": "geneA-F",
    "forward_concentration": 10.0,
    "reverse_name": "geneA-R",
    "reverse_concentration": 10.0,
}


def run_form(**overrides):
    values = dict(FORM_DEFAULTS)
    values.update(overrides)
    return process_inputs(**values)


# ============================================================================
# greet Tests
# ============================================================================


def test_greet():
    """greet should format the name into the greeting."""
    assert greet("Ada") == "Hello, Ada! You've been greeted from Python!"


# ============================================================================
# split_names Tests
# ============================================================================


def test_split_names_mixed_separators():
    """Commas, semicolons, and new lines all separate names."""
    assert split_names("geneA, geneB;geneC\n geneD ") == ["geneA", "geneB", "geneC", "geneD"]


def test_split_names_empty():
    """Blank input gives no names."""
    assert split_names("") == []
    assert split_names(None) == []
    assert split_names(" , \n") == []


# ============================================================================
# process_inputs Tests
# ============================================================================


def test_process_inputs_success():
    """Valid form values should produce tables and Excel bytes."""
    status, working_df, master_df, excel_bytes = run_form(targets_text="geneA, geneB")

    assert "VALIDATION PASSED" in status
    assert "Total reactions: 12" in status
    assert "Master mix total: 204.0 µl" in status
    assert "cDNA total: 24.0 µl" in status

    assert isinstance(working_df, pd.DataFrame)
    assert list(working_df["Target"]) == ["geneA", "geneB"]
    assert list(master_df["Volume (µl)"]) == [120.0, 12.0, 12.0, 60.0, 204.0, 24.0]
    assert isinstance(excel_bytes, bytes)


def test_process_inputs_validation_failure():
    """Duplicate targets should stop processing with an error report."""
    status, working_df, master_df, excel_bytes = run_form(targets_text="geneA, geneA")

    assert "VALIDATION FAILED" in status
    assert "Duplicate target name" in status
    assert working_df is None
    assert master_df is None
    assert excel_bytes is None


def test_process_inputs_missing_value():
    """A cleared number field should be reported as a field error."""
    status, _, _, excel_bytes = run_form(water=None)

    assert "VALIDATION FAILED" in status
    assert "recipe.water" in status
    assert excel_bytes is None


def test_process_inputs_warnings_shown():
    """Warnings should be listed alongside a successful result."""
    status, working_df, _, excel_bytes = run_form(repeat=0)

    assert "VALIDATION PASSED" in status
    assert "Replicate count is 0" in status
    assert list(working_df["Total Volume (µl)"]) == [0.0]
    assert excel_bytes is not None


def test_process_inputs_design_file():
    """A design spreadsheet should replace the typed targets and groups."""
    design_file = Mock()
    design_file.name = str(FIXTURES_DIR / "design.csv")

    status, working_df, _, _ = run_form(targets_text="ignored", design_file=design_file)

    assert "Targets: 3" in status
    assert "Groups: 2" in status
    assert list(working_df["Target"]) == ["GAPDH", "ACTB", "IL6"]


def test_process_inputs_missing_design_file():
    """Unexpected failures should be reported in the status message."""
    status, working_df, _, excel_bytes = run_form(design_file="does_not_exist.csv")

    assert "ERROR" in status
    assert working_df is None
    assert excel_bytes is None


# ============================================================================
# write_export_file Tests
# ============================================================================


def test_write_export_file():
    """Exported bytes should be written to a temporary xlsx file."""
    _, _, _, excel_bytes = run_form()
    path = write_export_file(excel_bytes)

    assert path.endswith(".xlsx")
    assert Path(path).read_bytes() == excel_bytes
    Path(path).unlink()


def test_write_export_file_none():
    """No bytes means no file."""
    assert write_export_file(None) is None
