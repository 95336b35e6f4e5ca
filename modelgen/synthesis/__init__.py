"""Model synthesis module for modelgen.

Combines column metadata, foreign key descriptors and type mapping into
ordered table models, and orchestrates introspection across tables.
"""

from .synthesizer import ModelSynthesizer, synthesize, camel_case, CURRENT_TIMESTAMP
from .builder import ModelBuilder, BuildResult, TableFailure

__all__ = [
    "ModelSynthesizer",
    "synthesize",
    "camel_case",
    "CURRENT_TIMESTAMP",
    "ModelBuilder",
    "BuildResult",
    "TableFailure",
]
