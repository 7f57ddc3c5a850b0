"""
Footprint Questionnaire Engine

Turns answers to a formula-driven questionnaire into an environmental
footprint estimate, and ranks single-answer "what-if" alternatives by
their impact.

ARCHITECTURAL GUARANTEE:
------------------------
This package contains ZERO knowledge of:
    - Form rendering or styling
    - Page routing
    - Answer persistence

It is a pure computation library.

Pipeline (footprint.pipeline.compute_footprint):
    answers + constants -> assignments -> visible questions -> footprint -> scenarios
"""

__version__ = "0.1.0"
