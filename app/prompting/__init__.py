"""Prompting package.

Contains the deterministic prompt-construction helper used by core
orchestration. It does not validate requests or invoke providers.
"""
