"""Agentic Invest: multi-agent stock-picking pipeline."""

__version__ = "0.1.0"
__author__ = "Agentic Invest Team"

__all__ = ["__version__", "__author__"]
