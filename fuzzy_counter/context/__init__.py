# fuzzy_counter/context/__init__.py
# input preprocessing applied before strings reach the prefix tree

from .preprocessor import Preprocessor, compile_patterns  # masking + rejection rules

__all__ = [
    "Preprocessor",
    "compile_patterns",
]
