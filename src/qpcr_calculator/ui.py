"""
Gradio UI for qPCR Calculator

This module provides a web-based user interface using Gradio. It collects the
recipe and experimental design, runs the volume calculation once per click,
and displays the working solutions and master mix.
"""

import logging
import os
import re
import tempfile
import traceback
from pathlib import Path

import gradio as gr
import pandas as pd

from qpcr_calculator import __version__
from qpcr_calculator.compute import calculate_qpcr_volumes
from qpcr_calculator.config import (
    DEFAULT_CDNA_UL,
    DEFAULT_FORWARD_PRIMER_NAME,
    DEFAULT_LOG_LEVEL,
    DEFAULT_MIX_UL,
    DEFAULT_PRIMER_CONCENTRATION_UM,
    DEFAULT_PRIMER_UL,
    DEFAULT_REPEAT,
    DEFAULT_REVERSE_PRIMER_NAME,
    DEFAULT_SERVER_NAME,
    DEFAULT_SERVER_PORT,
    DEFAULT_WATER_UL,
    ENV_LOG_LEVEL,
    ENV_SERVER_NAME,
    ENV_SERVER_PORT,
)
from qpcr_calculator.io import (
    design_from_dataframe,
    export_results_to_excel,
    format_volume,
    generate_export_filename,
    load_spreadsheet,
    master_mix_to_dataframe,
    working_solutions_to_dataframe,
)
from qpcr_calculator.validation import parse_configuration

logger = logging.getLogger(__name__)


def greet(name: str) -> str:
    """Return a greeting for ``name``."""
    return f"Hello, {name}! You've been greeted from Python!"


def split_names(text: str | None) -> list[str]:
    """
    Split a comma/semicolon/newline separated list, dropping blanks.

    Example: "geneA, geneB\\ngeneC" -> ["geneA", "geneB", "geneC"]
    """
    if not text:
        return []
    return [part.strip() for part in re.split(r"[,;\n]", text) if part.strip()]


def _format_messages(title: str, messages: list[str]) -> str:
    lines = [f"**{title} ({len(messages)}):**"]
    lines.extend(f"- {message}" for message in messages)
    return "\n".join(lines) + "\n"


def process_inputs(
    targets_text: str,
    groups_text: str,
    repeat: float | None,
    mix: float | None,
    primers: float | None,
    cdna: float | None,
    water: float | None,
    forward_name: str,
    forward_concentration: float | None,
    reverse_name: str,
    reverse_concentration: float | None,
    design_file=None,
) -> tuple[str, pd.DataFrame | None, pd.DataFrame | None, bytes | None]:
    """
    Build a configuration from form values and compute the volume plan.

    Args:
        targets_text: Target names, comma or newline separated
        groups_text: Group names, comma or newline separated
        repeat: Technical replicates per group per target
        mix: Master mix volume per reaction (µl)
        primers: Volume of one primer per reaction (µl)
        cdna: cDNA volume per reaction (µl)
        water: Water volume per reaction (µl)
        forward_name: Forward primer name
        forward_concentration: Forward primer stock concentration (µM)
        reverse_name: Reverse primer name
        reverse_concentration: Reverse primer stock concentration (µM)
        design_file: Optional spreadsheet (path or object with ``.name``)
            whose Target/Group columns replace the typed lists

    Returns:
        Tuple of (status_message, working_solutions_df, master_mix_df, excel_bytes)
    """
    try:
        targets = split_names(targets_text)
        groups = split_names(groups_text)

        if design_file is not None:
            file_path = getattr(design_file, "name", design_file)
            design = design_from_dataframe(
                load_spreadsheet(file_path), repeat=int(repeat or 0)
            )
            targets = design.targets or targets
            groups = design.groups or groups

        # Gradio Number fields deliver floats (or None when cleared)
        raw_config = {
            "samples": {
                "targets": targets,
                "repeat": int(repeat) if repeat is not None else None,
                "groups": groups,
            },
            "recipe": {"mix": mix, "primers": primers, "cDNA": cdna, "water": water},
            "primers": {
                "forward": {"name": forward_name or "", "concentration": forward_concentration},
                "reverse": {"name": reverse_name or "", "concentration": reverse_concentration},
            },
        }

        config, validation_result = parse_configuration(raw_config)

        if config is None or not validation_result.is_valid:
            error_msg = "❌ **VALIDATION FAILED**\n\n"
            error_msg += _format_messages("Errors", validation_result.errors)
            if validation_result.has_warnings:
                error_msg += "\n" + _format_messages("Warnings", validation_result.warnings)
            return error_msg, None, None, None

        result = calculate_qpcr_volumes(config)

        status_msg = "✅ **VALIDATION PASSED**\n\n"
        status_msg += f"- Targets: {len(config.samples.targets)}\n"
        status_msg += f"- Groups: {len(config.samples.groups)}\n"
        status_msg += f"- Replicates: {config.samples.repeat}\n"

        if validation_result.has_warnings:
            status_msg += "\n⚠️ " + _format_messages("Warnings", validation_result.warnings)

        df_working = working_solutions_to_dataframe(result).round(3)
        df_master = master_mix_to_dataframe(result).round(3)

        excel_bytes = export_results_to_excel(result, config)

        status_msg += "\n✅ **Volume plan computed successfully!**\n"
        status_msg += f"- Reactions per target: {result.reactions_per_target}\n"
        status_msg += f"- Total reactions: {result.total_reactions}\n"
        status_msg += f"- Master mix total: {format_volume(result.master_mix.total_volume)}\n"
        status_msg += f"- cDNA total: {format_volume(result.total_cdna_volume)}\n"

        return status_msg, df_working, df_master, excel_bytes

    except Exception as e:
        logger.exception("Volume calculation failed")
        error_msg = f"❌ **ERROR**: {str(e)}\n\n"
        error_msg += "Please check your inputs and try again."
        error_msg += f"\n\nDetails:\n{traceback.format_exc()}"
        return error_msg, None, None, None


def write_export_file(excel_bytes: bytes | None) -> str | None:
    """Write exported bytes to a timestamped temp file and return its path."""
    if excel_bytes is None:
        return None

    temp_path = Path(tempfile.gettempdir()) / generate_export_filename()
    temp_path.write_bytes(excel_bytes)
    return str(temp_path)


def build_app() -> gr.Blocks:
    """
    Build and return the Gradio interface.

    Returns:
        Configured Gradio Blocks interface
    """
    with gr.Blocks(title="qPCR Calculator") as app:
        gr.Markdown(
            f"""
            # 🧬 qPCR Reagent Volume Calculator
            **Version {__version__}**

            Scale a per-reaction recipe to working solutions and a master mix.
            """
        )

        with gr.Row():
            with gr.Column(scale=1):
                gr.Markdown("## 🧪 Experimental Design")

                targets_input = gr.Textbox(
                    label="Targets",
                    placeholder="GAPDH, ACTB, IL6",
                    lines=2,
                    info="Target gene names, separated by commas or new lines",
                )

                groups_input = gr.Textbox(
                    label="Groups",
                    placeholder="Control, Treated",
                    lines=2,
                    info="Sample groups / conditions",
                )

                repeat_input = gr.Number(
                    label="Technical Replicates",
                    value=DEFAULT_REPEAT,
                    minimum=0,
                    precision=0,
                    info="Replicates per group per target",
                )

                design_upload = gr.File(
                    label="Design Spreadsheet [Optional]",
                    file_types=[".xlsx", ".csv"],
                    type="filepath",
                )

                gr.Markdown("### Recipe (per reaction, µl)")

                with gr.Row():
                    mix_input = gr.Number(label="Mix", value=DEFAULT_MIX_UL, step=0.1)
                    primers_input = gr.Number(
                        label="Primer (each)", value=DEFAULT_PRIMER_UL, step=0.1
                    )
                with gr.Row():
                    cdna_input = gr.Number(label="cDNA", value=DEFAULT_CDNA_UL, step=0.1)
                    water_input = gr.Number(label="Water", value=DEFAULT_WATER_UL, step=0.1)

                gr.Markdown("### Primers")

                with gr.Row():
                    forward_name = gr.Textbox(label="Forward", value=DEFAULT_FORWARD_PRIMER_NAME)
                    forward_conc = gr.Number(
                        label="Forward (µM)", value=DEFAULT_PRIMER_CONCENTRATION_UM
                    )
                with gr.Row():
                    reverse_name = gr.Textbox(label="Reverse", value=DEFAULT_REVERSE_PRIMER_NAME)
                    reverse_conc = gr.Number(
                        label="Reverse (µM)", value=DEFAULT_PRIMER_CONCENTRATION_UM
                    )

                calculate_btn = gr.Button(
                    "🧮 Calculate Volumes",
                    variant="primary",
                    size="lg",
                )

            with gr.Column(scale=2):
                gr.Markdown("## 📊 Results")

                status_output = gr.Markdown(
                    value="Enter a design and click 'Calculate Volumes' to begin.",
                    label="Status",
                )

                with gr.Tabs():
                    with gr.Tab("🧫 Working Solutions"):
                        working_table = gr.DataFrame(
                            label="Working Solution per Target",
                            wrap=True,
                        )

                    with gr.Tab("🧴 Master Mix"):
                        master_table = gr.DataFrame(
                            label="Master Mix for All Reactions",
                            wrap=True,
                        )

                download_btn = gr.DownloadButton(
                    label="📥 Download Volume Plan (Excel)",
                    variant="secondary",
                    size="lg",
                    visible=False,
                )

        excel_state = gr.State(value=None)

        def calculate_wrapper(*args):
            status, working_df, master_df, excel_bytes = process_inputs(*args)
            return (
                status,
                working_df,
                master_df,
                excel_bytes,
                gr.update(visible=excel_bytes is not None),
            )

        calculate_btn.click(
            fn=calculate_wrapper,
            inputs=[
                targets_input,
                groups_input,
                repeat_input,
                mix_input,
                primers_input,
                cdna_input,
                water_input,
                forward_name,
                forward_conc,
                reverse_name,
                reverse_conc,
                design_upload,
            ],
            outputs=[
                status_output,
                working_table,
                master_table,
                excel_state,
                download_btn,
            ],
        )

        download_btn.click(
            fn=write_export_file,
            inputs=[excel_state],
            outputs=download_btn,
        )

        with gr.Accordion("👋 Greeting", open=False):
            with gr.Row():
                name_input = gr.Textbox(label="Name")
                greeting_output = gr.Textbox(label="Greeting", interactive=False)
            gr.Button("Greet").click(fn=greet, inputs=name_input, outputs=greeting_output)

        gr.Markdown(
            """
            ---
            ### 📖 Quick Start Guide

            1. **List your targets and groups**, or upload a spreadsheet with
               `Target` and `Group` columns
            2. **Set the replicate count** and the per-reaction recipe
            3. **Click "Calculate Volumes"**:
               - Working solutions are scaled to groups × replicates for each target
               - The master mix is scaled to every reaction in the experiment
               - cDNA is listed separately; it is added to each well on its own
            4. **Download the Excel file** with the complete plan
            """
        )

    return app


def main():
    """Main entry point to launch the Gradio app."""
    logging.basicConfig(
        level=os.getenv(ENV_LOG_LEVEL, DEFAULT_LOG_LEVEL).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = build_app()

    # When running in Docker, set GRADIO_SERVER_NAME=0.0.0.0
    server_name = os.getenv(ENV_SERVER_NAME, DEFAULT_SERVER_NAME)
    server_port = int(os.getenv(ENV_SERVER_PORT, str(DEFAULT_SERVER_PORT)))

    logger.info("Starting qPCR Calculator on %s:%d", server_name, server_port)

    app.launch(
        server_name=server_name,
        server_port=server_port,
        share=False,
        show_error=True,
    )


if __name__ == "__main__":
    main()
