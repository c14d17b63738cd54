"""Helpers for LLM chat command-line tools: prompts, paths, loaders, spinners and completion payloads."""

__version__ = "0.29.0"