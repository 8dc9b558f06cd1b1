"""Unit tests for the wait-time estimator."""

from types import SimpleNamespace

import pytest

from src.domain.enums import DEFAULT_SERVICE_MINUTES, SERVICE_MINUTES, ServiceType
from src.domain.waiting import estimate_wait, service_minutes


class TestServiceMinutes:
    def test_fixed_table(self):
        assert service_minutes("haircut") == 20
        assert service_minutes("beard") == 5
        assert service_minutes("haircut+beard") == 25

    def test_enum_values_match_table(self):
        assert set(SERVICE_MINUTES) == {s.value for s in ServiceType}

    @pytest.mark.parametrize("service", [None, "", "shave", "HAIRCUT"])
    def test_unknown_or_missing_costs_default(self, service):
        assert service_minutes(service) == DEFAULT_SERVICE_MINUTES == 20


class TestEstimateWait:
    def test_empty_queue_is_zero(self):
        assert estimate_wait([]) == 0

    def test_haircut_plus_beard(self):
        assert estimate_wait(["haircut", "beard"]) == 25

    def test_unknown_service_costs_twenty(self):
        assert estimate_wait(["perm"]) == 20

    def test_accepts_entries_with_service_type(self):
        entries = [
            SimpleNamespace(service_type="haircut"),
            SimpleNamespace(service_type=None),
            SimpleNamespace(service_type="beard"),
        ]
        assert estimate_wait(entries) == 45

    def test_accepts_a_generator(self):
        assert estimate_wait(s for s in ["haircut+beard", "haircut+beard"]) == 50
