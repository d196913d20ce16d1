"""Utility helpers for the feedback service."""
