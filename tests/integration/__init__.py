"""
mvn-tui — integration test package

File: tests/integration/__init__.py

Purpose
- Test package marker. Tests here spawn ``python -m mvn_tui`` subprocesses
  and never require Maven or network access.
"""
