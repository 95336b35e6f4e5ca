"""Rendering of synthesized table models into model definition files."""

from .generator import ModelRenderer
from .writer import ModelWriter, model_file_name

__all__ = [
    "ModelRenderer",
    "ModelWriter",
    "model_file_name",
]
