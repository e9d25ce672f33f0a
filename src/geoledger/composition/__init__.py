"""Composition — граф прикрепления активов (зданий) к земле."""

from .graph import CompositionGraph

__all__ = ["CompositionGraph"]
