"""
Input-side integration: notes parsing, scenario config, scenario runner.
"""

from .notes import NotesParseError, load_notes, parse_notes, render_notes
from .runner import ScenarioOutcome, run_scenario, run_scenarios
from .scenarios import DEFAULT_SCENARIOS, Scenario, load_scenarios, log_level_from_env, parse_scenarios

__all__ = [
    "NotesParseError",
    "load_notes",
    "parse_notes",
    "render_notes",
    "ScenarioOutcome",
    "run_scenario",
    "run_scenarios",
    "DEFAULT_SCENARIOS",
    "Scenario",
    "load_scenarios",
    "log_level_from_env",
    "parse_scenarios",
]
