"""Solving engine: grid, propagation rules and the fixpoint orchestrator."""
