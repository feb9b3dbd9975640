"""Tests for pending changes and apply"""
import pytest

from app.core.exceptions import ApplyFailed, ValidationError
from app.models.enums import Subsystem
from app.schemas.appliance import ApplyStatus
from app.services.pending import PendingService


@pytest.fixture
def service(appliance):
    return PendingService(appliance)


def test_nothing_pending(service):
    pending = service.pending_changes()

    assert pending.has_pending is False
    assert pending.total_count == 0
    assert [s.service for s in pending.services] == [Subsystem.FIREWALL, Subsystem.DHCP]


def test_pending_counts(appliance, service):
    appliance.pending["firewall"] = ApplyStatus(applied=False, pending_subsystems=["aliases", "filter"])
    appliance.pending["dhcp"] = ApplyStatus(applied=False)

    pending = service.pending_changes()

    assert pending.has_pending is True
    assert pending.total_count == 3
    assert {s.service: s.count for s in pending.services} == {Subsystem.FIREWALL: 2, Subsystem.DHCP: 1}


def test_apply_known_service(appliance, service):
    result = service.apply("dhcp")

    assert appliance.apply_calls == ["dhcp"]
    assert result.has_pending is False


def test_apply_unknown_service(appliance, service):
    with pytest.raises(ValidationError):
        service.apply("nat")
    assert appliance.apply_calls == []


def test_apply_failure(appliance, service):
    appliance.fail_apply = True
    with pytest.raises(ApplyFailed):
        service.apply("firewall")
