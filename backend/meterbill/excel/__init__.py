from .renderer import render_xlsx

__all__ = ["render_xlsx"]
