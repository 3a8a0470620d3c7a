from .generate import GenerateForm

__all__ = ["GenerateForm"]
