"""
Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

try:
    from ._env import ensure_test_env
except ImportError:
    from tests._env import ensure_test_env
ensure_test_env()

import pytest

from services.alerting.errors import UnrankedSeverityError
from services.alerting.severities import SeverityRanking


def test_rank_order():
    ranking = SeverityRanking(["critical", "warning", "info"])
    assert ranking.rank_of("critical") == 0
    assert ranking.rank_of("info") == 2
    assert ranking.rank_of("unknown") is None
    assert ranking.lowest == "info"


def test_is_higher_priority():
    ranking = SeverityRanking(["critical", "warning", "info"])
    assert ranking.is_higher_priority("critical", "warning") is True
    assert ranking.is_higher_priority("info", "warning") is False
    assert ranking.is_higher_priority("warning", "warning") is False


def test_unranked_severity_raises():
    ranking = SeverityRanking(["critical", "warning"])
    with pytest.raises(UnrankedSeverityError) as exc_info:
        ranking.require_rank("info")
    assert exc_info.value.severity == "info"
    with pytest.raises(UnrankedSeverityError):
        ranking.is_higher_priority("info", "critical")


def test_invalid_rankings_are_rejected():
    with pytest.raises(ValueError):
        SeverityRanking([])
    with pytest.raises(ValueError):
        SeverityRanking(["critical", "critical"])
