"""FastAPI surface for the Razorpay transaction-session webhooks."""
