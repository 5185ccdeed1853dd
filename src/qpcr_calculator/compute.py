"""
Computation engine for qPCR Calculator.

This module handles:
- Reaction counts (per target and across the experiment)
- Working solution volumes per target
- Master mix volumes for the whole experiment
- Total cDNA volume

Architecture note: every function here is pure. No validation happens in this
module; zero or negative inputs propagate arithmetically. Stricter checks live
in ``qpcr_calculator.validation`` and are applied by the caller when wanted.
"""

import logging

from qpcr_calculator.models import (
    CalculationResult,
    MasterMix,
    QPCRConfig,
    Recipe,
    SampleDesign,
    WorkingSolution,
)

logger = logging.getLogger(__name__)


def compute_reactions_per_target(samples: SampleDesign) -> int:
    """
    Number of reactions needed for one target.

    Formula: reactions = number of groups × technical replicates
    """
    return len(samples.groups) * samples.repeat


def compute_total_reactions(samples: SampleDesign) -> int:
    """Number of reactions across all targets."""
    return compute_reactions_per_target(samples) * len(samples.targets)


def compute_working_solution(recipe: Recipe, reactions: int) -> WorkingSolution:
    """
    Scale the recipe to a per-target working solution.

    Args:
        recipe: Per-reaction volumes
        reactions: Reactions for the target

    Returns:
        WorkingSolution whose total is the sum of its four scaled components
    """
    mix_volume = recipe.mix * reactions
    forward_primer_volume = recipe.primers * reactions
    reverse_primer_volume = recipe.primers * reactions
    water_volume = recipe.water * reactions

    return WorkingSolution(
        mix=mix_volume,
        forward_primer=forward_primer_volume,
        reverse_primer=reverse_primer_volume,
        water=water_volume,
        total_volume=mix_volume + forward_primer_volume + reverse_primer_volume + water_volume,
    )


def compute_master_mix(recipe: Recipe, total_reactions: int) -> MasterMix:
    """
    Scale the recipe to a master mix covering every reaction.

    The total is computed from the per-reaction sum, not by adding up
    working solutions:

        total = (mix + 2 × primers + water) × total_reactions

    cDNA is excluded; it is added to each well separately.
    """
    return MasterMix(
        mix=recipe.mix * total_reactions,
        forward_primer=recipe.primers * total_reactions,
        reverse_primer=recipe.primers * total_reactions,
        water=recipe.water * total_reactions,
        total_volume=(recipe.mix + recipe.primers * 2 + recipe.water) * total_reactions,
    )


def compute_total_cdna_volume(recipe: Recipe, total_reactions: int) -> float:
    """cDNA required across all reactions (µl)."""
    return recipe.cdna * total_reactions


def calculate_qpcr_volumes(config: QPCRConfig) -> CalculationResult:
    """
    Calculate working solutions, master mix, and cDNA volume for an experiment.

    Algorithm:
    1. reactions_per_target = len(groups) × repeat
    2. total_reactions = reactions_per_target × len(targets)
    3. For each target: scale the recipe by reactions_per_target. A target
       name listed twice keeps only its last entry.
    4. Master mix: scale the recipe by total_reactions
    5. cDNA: recipe cDNA × total_reactions

    Primer concentrations are carried in the configuration but do not enter
    the calculation.

    Args:
        config: Complete experiment configuration

    Returns:
        Fresh CalculationResult
    """
    samples = config.samples
    recipe = config.recipe

    reactions_per_target = compute_reactions_per_target(samples)
    total_reactions = compute_total_reactions(samples)

    working_solutions: dict[str, WorkingSolution] = {}
    for target in samples.targets:
        working_solutions[target] = compute_working_solution(recipe, reactions_per_target)

    master_mix = compute_master_mix(recipe, total_reactions)
    total_cdna_volume = compute_total_cdna_volume(recipe, total_reactions)

    logger.debug(
        "Calculated %d reactions (%d per target) for %d targets",
        total_reactions,
        reactions_per_target,
        len(working_solutions),
    )

    return CalculationResult(
        total_reactions=total_reactions,
        reactions_per_target=reactions_per_target,
        working_solutions=working_solutions,
        master_mix=master_mix,
        total_cdna_volume=total_cdna_volume,
    )
