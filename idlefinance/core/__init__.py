"""Core infrastructure for Idle Finance: runtime config, balance loading, logging."""
