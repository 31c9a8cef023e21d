"""
Feature modules for Idle Finance.

Each subpackage owns one slice of the economy core:

- shared: pure formulas and the domain exception hierarchy
- economy: tick and purchase transformations
- offline: offline-earnings reconciliation
- prestige: prestige point algebra and reset
- game: derived-state aggregation and the driver-facing GameService
- persistence: JSON save codec
"""
