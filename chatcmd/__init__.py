"""Prefix command interpreter for chat bots."""
