"""
Singleton management for the content oracle.

The oracle client is built lazily from the app config the first time a
request needs it; tests swap in a fake with ``OracleManager.set_oracle``.
"""

from __future__ import annotations

from flask import current_app


class OracleManager:
    """Lazy-loaded singleton for ContentOracle."""

    _oracle = None

    @classmethod
    def get_oracle(cls):
        if cls._oracle is None:
            from oracle import ContentOracle
            cls._oracle = ContentOracle.from_config(current_app.config)
        return cls._oracle

    @classmethod
    def set_oracle(cls, oracle) -> None:
        cls._oracle = oracle

    @classmethod
    def reset(cls):
        """Drop the cached oracle so the next call rebuilds it from config."""
        cls._oracle = None
