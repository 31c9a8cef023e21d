"""Shared formulas and exceptions used across Idle Finance modules."""
