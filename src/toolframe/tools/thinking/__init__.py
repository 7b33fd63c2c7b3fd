from .think import ThinkParams, ThinkTool

__all__ = ["ThinkParams", "ThinkTool"]
