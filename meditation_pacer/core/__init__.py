"""Pacing core: value types, tokenizer, and pacer.

WHY: The core is the stable heart of the package. It is a pure,
deterministic transformation from (text, target duration) to paced
markup, consumed by the formatters, the CLI and the HTTP server.

HOW: ir.py defines the data structures, tokenizer.py splits text into
speech atoms, pacer.py budgets and distributes silence over them.

RULES:
- No I/O, no environment access, no shared mutable state
- Nothing in the core raises for any text, duration or configuration
"""
