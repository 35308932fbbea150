"""Testing utilities – in-memory doubles for kernel ports."""
