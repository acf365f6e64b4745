"""Shared utilities for ConvertBot."""
