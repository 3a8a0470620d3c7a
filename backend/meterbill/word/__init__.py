from .renderer import render_docx

__all__ = ["render_docx"]
