"""
FoxTagger - Wallet Spending Limit Tracker

Tracks per-account spending against user-configured limits,
sends scheduled digests and alerts, and annotates outgoing
transactions with advisory spending insights.

Nothing here signs or submits transactions.
"""

__version__ = "0.1.0"
