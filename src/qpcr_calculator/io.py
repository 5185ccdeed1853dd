"""
Input/Output operations for qPCR Calculator.

This module handles reading configurations and design spreadsheets, building
result tables, and exporting results to Excel files.
"""

import json
import logging
from datetime import datetime
from io import BytesIO
from pathlib import Path
from typing import Any, BinaryIO

import pandas as pd
from pydantic import ValidationError

from qpcr_calculator import __version__
from qpcr_calculator.config import (
    APP_NAME,
    CDNA_TOTAL_LABEL,
    COMPONENT_COLUMN,
    DEFAULT_EXPORT_PREFIX,
    DEFAULT_VOLUME_DECIMALS,
    GROUP_COLUMN,
    MASTER_MIX_COMPONENTS,
    MASTER_MIX_TOTAL_LABEL,
    OUTPUT_WORKING_SOLUTION_COLUMNS,
    TARGET_COLUMN,
    VOLUME_COLUMN,
    VOLUME_UNIT,
    normalize_column_name,
)
from qpcr_calculator.models import CalculationResult, QPCRConfig, SampleDesign

logger = logging.getLogger(__name__)


# ============================================================================
# Configuration Loading
# ============================================================================


def load_configuration(source: dict[str, Any] | str | Path | bytes) -> QPCRConfig:
    """
    Load a QPCRConfig from a dictionary, JSON text, JSON bytes, or a .json file.

    A ``str`` is treated as JSON text when it starts with ``{``, otherwise as
    a file path.

    Args:
        source: Configuration source

    Returns:
        Validated QPCRConfig

    Raises:
        FileNotFoundError: If a file path doesn't exist
        ValueError: If the content is not valid JSON or doesn't match the model
    """
    try:
        if isinstance(source, dict):
            return QPCRConfig.model_validate(source)

        if isinstance(source, bytes):
            return QPCRConfig.model_validate_json(source)

        if isinstance(source, str) and source.lstrip().startswith("{"):
            return QPCRConfig.model_validate_json(source)

        file_path = Path(source)
        if not file_path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")

        logger.info("Loading configuration from %s", file_path)
        return QPCRConfig.model_validate_json(file_path.read_bytes())

    except FileNotFoundError:
        raise
    except (ValidationError, json.JSONDecodeError, OSError) as e:
        raise ValueError(f"Error reading configuration: {e}") from e


def save_configuration(config: QPCRConfig, output_path: str | Path) -> None:
    """Write a configuration to a JSON file using the wire (camelCase) names."""
    Path(output_path).write_text(config.model_dump_json(by_alias=True, indent=2))
    logger.info("Saved configuration to %s", output_path)


# ============================================================================
# Design Spreadsheets
# ============================================================================


def load_spreadsheet(
    file_path_or_bytes: str | Path | bytes | BinaryIO,
    sheet_name: str | int = 0,
) -> pd.DataFrame:
    """
    Load a spreadsheet from file path or bytes.

    Args:
        file_path_or_bytes: Path to Excel/CSV file, bytes, or file-like object
        sheet_name: Sheet name or index to read (Excel only)

    Returns:
        DataFrame with raw data from spreadsheet

    Raises:
        FileNotFoundError: If file path doesn't exist
        ValueError: If file format is unsupported or corrupted
    """
    try:
        if isinstance(file_path_or_bytes, (str, Path)):
            file_path = Path(file_path_or_bytes)
            if not file_path.exists():
                raise FileNotFoundError(f"File not found: {file_path}")

            if file_path.suffix.lower() == ".csv":
                df = pd.read_csv(file_path)
            else:
                df = pd.read_excel(file_path, sheet_name=sheet_name)
        elif isinstance(file_path_or_bytes, bytes):
            df = pd.read_excel(BytesIO(file_path_or_bytes), sheet_name=sheet_name)
        else:
            df = pd.read_excel(file_path_or_bytes, sheet_name=sheet_name)

        # Remove completely empty rows
        df = df.dropna(how="all")
        df = df.reset_index(drop=True)

        return df

    except FileNotFoundError:
        raise
    except Exception as e:
        raise ValueError(f"Error reading spreadsheet: {e}") from e


def normalize_dataframe_columns(df: pd.DataFrame) -> pd.DataFrame:
    """
    Normalize column names in DataFrame using config mappings.

    Args:
        df: DataFrame with raw column names

    Returns:
        DataFrame with normalized column names
    """
    column_mapping = {col: normalize_column_name(str(col)) for col in df.columns}
    return df.rename(columns=column_mapping)


def _unique_values(series: pd.Series) -> list[str]:
    """Non-blank values of a column as strings, in first-seen order."""
    values = []
    for value in series.dropna():
        text = str(value).strip()
        if text and text not in values:
            values.append(text)
    return values


def design_from_dataframe(df: pd.DataFrame, repeat: int) -> SampleDesign:
    """
    Build a SampleDesign from a spreadsheet of targets and groups.

    The two columns are independent lists: a row may hold a target, a group,
    or both. Repeated values are collapsed.

    Args:
        df: DataFrame with normalized column names
        repeat: Technical replicates per group per target

    Returns:
        SampleDesign with the unique targets and groups

    Raises:
        ValueError: If neither a Target nor a Group column is present
    """
    df = normalize_dataframe_columns(df)

    if TARGET_COLUMN not in df.columns and GROUP_COLUMN not in df.columns:
        raise ValueError(
            f"Missing required columns: expected '{TARGET_COLUMN}' and/or '{GROUP_COLUMN}'"
        )

    targets = _unique_values(df[TARGET_COLUMN]) if TARGET_COLUMN in df.columns else []
    groups = _unique_values(df[GROUP_COLUMN]) if GROUP_COLUMN in df.columns else []

    return SampleDesign(targets=targets, repeat=repeat, groups=groups)


# ============================================================================
# Result Formatting
# ============================================================================


def format_volume(volume: float, decimals: int = DEFAULT_VOLUME_DECIMALS) -> str:
    """
    Format a volume for display.

    Example: format_volume(60) -> "60.0 µl"
    """
    return f"{volume:.{decimals}f} {VOLUME_UNIT}"


def result_to_dict(result: CalculationResult, by_alias: bool = True) -> dict[str, Any]:
    """
    Serialize a CalculationResult.

    Args:
        result: Calculation output
        by_alias: Use camelCase keys (totalReactions, masterMix, ...) if True

    Returns:
        Plain dictionary ready for JSON encoding
    """
    return result.model_dump(by_alias=by_alias)


def working_solutions_to_dataframe(result: CalculationResult) -> pd.DataFrame:
    """
    One row per target with the scaled working solution volumes.

    Returns:
        DataFrame with OUTPUT_WORKING_SOLUTION_COLUMNS
    """
    rows = []
    for target, solution in result.working_solutions.items():
        rows.append({
            "Target": target,
            "Reactions": result.reactions_per_target,
            "Mix (µl)": solution.mix,
            "Forward Primer (µl)": solution.forward_primer,
            "Reverse Primer (µl)": solution.reverse_primer,
            "Water (µl)": solution.water,
            "Total Volume (µl)": solution.total_volume,
        })

    return pd.DataFrame(rows, columns=OUTPUT_WORKING_SOLUTION_COLUMNS)


def master_mix_to_dataframe(result: CalculationResult) -> pd.DataFrame:
    """
    One row per master mix component, then the total, then the cDNA needed.

    Returns:
        DataFrame with Component and Volume (µl) columns
    """
    master_mix = result.master_mix
    rows = [
        {COMPONENT_COLUMN: label, VOLUME_COLUMN: getattr(master_mix, field)}
        for field, label in MASTER_MIX_COMPONENTS
    ]
    rows.append({COMPONENT_COLUMN: MASTER_MIX_TOTAL_LABEL, VOLUME_COLUMN: master_mix.total_volume})
    rows.append({COMPONENT_COLUMN: CDNA_TOTAL_LABEL, VOLUME_COLUMN: result.total_cdna_volume})

    return pd.DataFrame(rows, columns=[COMPONENT_COLUMN, VOLUME_COLUMN])


# ============================================================================
# Excel Export
# ============================================================================


def export_results_to_excel(
    result: CalculationResult,
    config: QPCRConfig,
    output_path: str | Path | None = None,
) -> bytes | None:
    """
    Export a calculation to an Excel file with multiple sheets.

    Sheets: WorkingSolutions, MasterMix, Metadata.

    Args:
        result: Calculation output
        config: Configuration the result was computed from
        output_path: Optional path to save file (if None, returns bytes)

    Returns:
        Bytes of Excel file if output_path is None, otherwise None
    """
    if output_path is None:
        buffer = BytesIO()
        writer_target = buffer
    else:
        writer_target = Path(output_path)

    with pd.ExcelWriter(writer_target, engine="openpyxl") as writer:
        working_solutions_to_dataframe(result).to_excel(
            writer, sheet_name="WorkingSolutions", index=False, freeze_panes=(1, 0)
        )

        master_mix_to_dataframe(result).to_excel(
            writer, sheet_name="MasterMix", index=False, freeze_panes=(1, 0)
        )

        metadata = _create_metadata_dict(result, config)
        metadata_df = pd.DataFrame(list(metadata.items()), columns=["Parameter", "Value"])
        metadata_df.to_excel(writer, sheet_name="Metadata", index=False, freeze_panes=(1, 0))

        for sheet_name in writer.sheets:
            _auto_adjust_column_widths(writer.sheets[sheet_name])

    logger.info(
        "Exported plan for %d targets to %s",
        len(result.working_solutions),
        output_path if output_path is not None else "memory",
    )

    if output_path is None:
        buffer.seek(0)
        return buffer.getvalue()
    return None


def generate_export_filename(prefix: str = DEFAULT_EXPORT_PREFIX) -> str:
    """
    Generate a timestamped filename for exports.

    Args:
        prefix: Prefix for filename

    Returns:
        Filename string with timestamp
    """
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    return f"{prefix}_{timestamp}.xlsx"


def _create_metadata_dict(result: CalculationResult, config: QPCRConfig) -> dict[str, str]:
    """Key/value pairs describing the inputs behind an export."""
    samples = config.samples
    recipe = config.recipe
    primers = config.primers

    return {
        "Generated At": datetime.now().isoformat(),
        "App Name": APP_NAME,
        "App Version": __version__,
        "Targets": ", ".join(samples.targets),
        "Groups": ", ".join(samples.groups),
        "Replicates": str(samples.repeat),
        "Reactions per Target": str(result.reactions_per_target),
        "Total Reactions": str(result.total_reactions),
        "Mix per Reaction (µl)": str(recipe.mix),
        "Primer per Reaction (µl)": str(recipe.primers),
        "cDNA per Reaction (µl)": str(recipe.cdna),
        "Water per Reaction (µl)": str(recipe.water),
        "Forward Primer": f"{primers.forward.name} ({primers.forward.concentration} µM)",
        "Reverse Primer": f"{primers.reverse.name} ({primers.reverse.concentration} µM)",
    }


def _auto_adjust_column_widths(worksheet) -> None:
    """
    Auto-adjust column widths in an openpyxl worksheet.

    Args:
        worksheet: openpyxl worksheet object
    """
    for column in worksheet.columns:
        column_letter = column[0].column_letter
        max_length = max(
            (len(str(cell.value)) for cell in column if cell.value is not None),
            default=0,
        )
        # Cap at 50 characters
        worksheet.column_dimensions[column_letter].width = min(max_length + 2, 50)
