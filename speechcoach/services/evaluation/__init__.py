"""
Evaluation module - rubric scoring of transcripts with an LLM.
"""

from .evaluator import SpeechEvaluator

__all__ = ["SpeechEvaluator"]
