"""
Type Oracle: the checked program as seen by the schema generator.
"""

from .base import TypeOracle
from .loader import load_program, load_program_dict
from .model_oracle import ModelOracle

__all__ = [
    "TypeOracle",
    "ModelOracle",
    "load_program",
    "load_program_dict",
]
