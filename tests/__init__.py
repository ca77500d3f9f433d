"""
Test package for the AED Shock Advisor.

Covers:
- Unit tests for the rhythm features and the shock rule
- Quality gate, loader and renderer
- End-to-end pipeline and command line runs
"""
