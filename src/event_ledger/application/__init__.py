"""Application layer – use-case level orchestration."""
