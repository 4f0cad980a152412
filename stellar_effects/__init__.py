"""
Stellar Effects: derives ledger effects from Stellar transactions.

Decodes a transaction's envelope, result and meta, works out what each
operation changed, and emits one effect record per observable change
(balances, trustlines, offers, signers, sponsorships, pools, contracts)
to downstream consumers.
"""

__version__ = "0.1.0"
