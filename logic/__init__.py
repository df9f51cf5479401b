"""logic — Simulation systems package.

Subpackages
-----------
ai/         — species update registry, perception, steering and the
              fish / herd / wolf / pack behaviours

Top-level modules
-----------------
terrain         — terrain synthesis (noise passes, features, spawn point)
tick            — per-tick orchestrator (spawn phase + update phase)
entity_factory  — agent creation + bounded-retry spawners
movement        — input-driven player movement
input_manager   — raw pygame input → movement / command intents
"""
