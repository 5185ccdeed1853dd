"""
qPCR Calculator - Reagent Volume Planning Utility

A quantitative PCR (qPCR) planning utility that scales a per-reaction recipe
to the working solutions and master mix needed for an experiment.
"""

__version__ = "0.1.0"
__author__ = "Genome Innovation Hub"
