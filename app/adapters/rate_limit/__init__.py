"""Rate limiting adapters.

The sliding-window algorithm only talks to ``AbstractRateLimitStore``, so the
process-local store can later be replaced by a shared cache without changing
the limiter or the API layer.
"""
