"""Bias analysis."""

from newsbias.analysis.bias_analyzer import BiasAnalyzer, Lexicon, largest_remainder

__all__ = ["BiasAnalyzer", "Lexicon", "largest_remainder"]
