"""
Comissio - Source Package

A commission tracker for salespeople who get paid in installments.

DESIGN PRINCIPLES:
1. A sale is split into its installments once, at creation time
2. Dashboard numbers are recomputed from the installment list on every read
3. Persisted data is validated before it is trusted
4. Collaborators (storage, AI) degrade to empty or fallback values
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Comissio Team"
