"""
PAGEFIT - Print-ready A4 Generation with Fitted Text

A resume layout engine that takes an AI-structured resume record and computes the
font sizes, spacing and content caps needed to fit a single A4 page.

Architecture:
- Intake Context: AI model selection and resume structuring client
- Layout Context: Content analysis and per-template layout optimization
- Preprocessing Context: Record normalization, overflow relocation, layout hints
- Rendering Context: Print-safety styles and template context assembly
"""

__version__ = "0.1.0"
