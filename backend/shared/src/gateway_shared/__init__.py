"""Shared core for the Razorpay transaction app.

Holds the transaction-session translation layer (models, services, utils)
used by the HTTP surface in ``gateway_api``.
"""
