"""Interactive UI components for worktree-keeper."""

from .picker import FuzzyPickerApp, filter_choices, fuzzy_select

__all__ = ["FuzzyPickerApp", "filter_choices", "fuzzy_select"]
