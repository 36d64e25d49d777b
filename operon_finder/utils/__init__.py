"""Utility helpers for the operon finder."""
