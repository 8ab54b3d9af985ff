"""Lint findings and readiness classification.

- Findings — severity-tagged records produced by the Spectral linter
- Classifier — maps a set of findings to a readiness level
- Spectral — runs the external linter and parses its JSON output
"""
