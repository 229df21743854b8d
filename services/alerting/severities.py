"""
Severity ranking used to pick the worst severity among the alerts sharing a trap.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from services.alerting.errors import UnrankedSeverityError


class SeverityRanking:
    """Ordered severities, index 0 being the highest priority."""

    def __init__(self, severities: Sequence[str]) -> None:
        cleaned = [str(s).strip() for s in severities if str(s).strip()]
        if not cleaned:
            raise ValueError("At least one severity must be configured")
        if len(set(cleaned)) != len(cleaned):
            raise ValueError(f"Severities must be unique: {cleaned}")
        self._severities: List[str] = cleaned

    @property
    def lowest(self) -> str:
        return self._severities[-1]

    def rank_of(self, severity: Optional[str]) -> Optional[int]:
        try:
            return self._severities.index(severity)
        except ValueError:
            return None

    def require_rank(self, severity: str) -> int:
        rank = self.rank_of(severity)
        if rank is None:
            raise UnrankedSeverityError(severity)
        return rank

    def is_higher_priority(self, severity: str, other: str) -> bool:
        return self.require_rank(severity) < self.require_rank(other)

    def __repr__(self) -> str:
        return f"SeverityRanking({self._severities!r})"
