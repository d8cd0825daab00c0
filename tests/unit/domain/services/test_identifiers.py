from __future__ import annotations

import re

from ecopilot.domain.services.identifiers import generate_optimization_id


def test_identifier_shape() -> None:
    identifier = generate_optimization_id("2025-01-15")

    assert re.fullmatch(r"opt-2025-01-15-\d{13}-[0-9a-f]{8}", identifier)


def test_identifiers_are_unique_within_the_same_millisecond() -> None:
    identifiers = {generate_optimization_id("2025-01-15") for _ in range(500)}

    assert len(identifiers) == 500
