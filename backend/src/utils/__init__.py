"""Utility helpers for the Chamonix ski conditions backend."""
