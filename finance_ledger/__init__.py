"""
Finance Ledger - Source Package

A personal finance ledger: reads a flat file of dated income/expense
records, validates every line against a strict format and prints the
profit, cost and balance.

DESIGN PRINCIPLES:
1. A bad line is a value, not a crash
2. Fail fast, one named reason per rejected line
3. No silent corrections
4. Every run is auditable
5. Storage layer is swappable
"""

__version__ = "1.0.0"
