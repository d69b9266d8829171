"""Prompt rendering for translation backends."""

from locontext.prompts.renderer import PromptRenderer

__all__ = ["PromptRenderer"]
