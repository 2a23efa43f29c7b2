"""Prompt management for the conversation persona."""

from nihongo_kaiwa.prompts.registry import PromptRegistry, prompt_registry

__all__ = ["PromptRegistry", "prompt_registry"]
