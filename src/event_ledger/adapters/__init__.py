"""Adapters – concrete storage and transport implementations of kernel ports."""
