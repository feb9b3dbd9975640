"""Tests for identifier classification and resolution"""
import pytest

from app.core.exceptions import AliasNotFound, HostnameUnresolved, InvalidIdentifier
from app.models.enums import IdentifierKind
from app.services.identifier import IdentifierResolver, classify, is_mac, normalize_mac


class TestClassify:
    """Shape-only classification, first match wins"""

    @pytest.mark.parametrize("raw", ["192.168.1.50", "0.0.0.0", "255.255.255.255", "10.0.0.9"])
    def test_dotted_quads_are_ips(self, raw):
        assert classify(raw).kind == IdentifierKind.IP

    @pytest.mark.parametrize("raw", ["GUEST_DEVICES", "BLOCKED", "IOT2", "_", "123"])
    def test_upper_case_tokens_are_aliases(self, raw):
        assert classify(raw).kind == IdentifierKind.ALIAS

    @pytest.mark.parametrize("raw", ["laptop.local", "Laptop", "my-phone", "guest_devices", "256.1.1.1", "1.2.3"])
    def test_everything_else_is_a_hostname(self, raw):
        assert classify(raw).kind == IdentifierKind.HOSTNAME

    def test_octet_out_of_range_is_not_an_ip(self):
        """256.1.1.1 has the shape of an IP but fails the range check"""
        assert classify("192.168.1.256").kind == IdentifierKind.HOSTNAME

    def test_whitespace_is_trimmed(self):
        identifier = classify("  192.168.1.50\n")
        assert identifier.kind == IdentifierKind.IP
        assert identifier.value == "192.168.1.50"

    @pytest.mark.parametrize("raw", ["", "   ", None, 42, ["10.0.0.1"]])
    def test_empty_or_non_string_is_rejected(self, raw):
        with pytest.raises(InvalidIdentifier):
            classify(raw)


class TestMacHelpers:
    def test_mac_formats(self):
        assert is_mac("aa:bb:cc:dd:ee:ff")
        assert is_mac("AA-BB-CC-DD-EE-FF")
        assert not is_mac("aabb.ccdd.eeff")
        assert not is_mac("")

    def test_normalize_mac(self):
        assert normalize_mac(" AA-BB-CC-DD-EE-FF ") == "aa:bb:cc:dd:ee:ff"


class TestResolver:
    def test_ip_is_returned_unchanged_without_lookup(self, appliance):
        appliance.fail_reads = True
        resolver = IdentifierResolver(appliance)
        assert resolver.resolve(classify("10.0.0.5")) == "10.0.0.5"

    def test_existing_alias_resolves_to_its_name(self, appliance):
        appliance.add_alias("GUEST_DEVICES", ["192.168.1.60"])
        resolver = IdentifierResolver(appliance)
        assert resolver.resolve(classify("GUEST_DEVICES")) == "GUEST_DEVICES"

    def test_missing_alias_raises(self, appliance):
        resolver = IdentifierResolver(appliance)
        with pytest.raises(AliasNotFound):
            resolver.resolve(classify("NO_SUCH_GROUP"))

    def test_hostname_resolves_case_insensitively(self, appliance):
        resolver = IdentifierResolver(appliance)
        assert resolver.resolve(classify("phone.LOCAL")) == "192.168.1.51"

    def test_unknown_hostname_raises(self, appliance):
        resolver = IdentifierResolver(appliance)
        with pytest.raises(HostnameUnresolved):
            resolver.resolve(classify("printer.local"))

    def test_lease_without_ip_is_ignored(self, appliance):
        appliance.add_lease("aa:bb:cc:00:00:09", None, "tv")
        resolver = IdentifierResolver(appliance)
        with pytest.raises(HostnameUnresolved):
            resolver.resolve(classify("tv"))

    def test_first_lease_wins_on_duplicate_hostnames(self, appliance):
        appliance.add_lease("aa:bb:cc:00:00:10", "192.168.1.70", "twin")
        appliance.add_lease("aa:bb:cc:00:00:11", "192.168.1.71", "TWIN")
        resolver = IdentifierResolver(appliance)
        assert resolver.resolve(classify("twin")) == "192.168.1.70"
