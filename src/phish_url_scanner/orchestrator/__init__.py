"""Scan orchestration: concurrent component analysis and score fusion."""

from phish_url_scanner.orchestrator.fusion import aggregate, classify, confidence, generate_explanation
from phish_url_scanner.orchestrator.pipeline import scan

__all__ = ["aggregate", "classify", "confidence", "generate_explanation", "scan"]
