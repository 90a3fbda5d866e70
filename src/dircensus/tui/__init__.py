"""Textual interface for dircensus."""

from dircensus.tui.app import CensusApp, run_tui

__all__ = ["CensusApp", "run_tui"]
