"""Optimization identifier generation."""

import secrets
import time


def generate_optimization_id(date: str) -> str:
    """
    Return ``opt-<date>-<epoch ms>-<random hex>``.

    The random suffix keeps ids unique when several triggers for the same
    date land in the same millisecond.
    """
    return f"opt-{date}-{int(time.time() * 1000)}-{secrets.token_hex(4)}"
