"""Tests for the RuleRecord attribute bag."""

from __future__ import annotations

from sudo_rule_cache.records import RuleRecord


class TestRuleRecord:
    """Tests for RuleRecord accessors."""

    def test_from_dict_normalizes_scalars_to_lists(self):
        # Act
        rec = RuleRecord.from_dict({"name": "r1", "order": 3, "user": ["a", "b"]})

        # Assert
        assert rec.to_dict() == {"name": ["r1"], "order": ["3"], "user": ["a", "b"]}

    def test_get_values_preserves_order_and_copies(self):
        # Arrange
        rec = RuleRecord({"notAfter": ["20210101000000Z", "20200101000000Z"]})

        # Act
        values = rec.get_values("notAfter")
        values.append("mutated")

        # Assert
        assert rec.get_values("notAfter") == ["20210101000000Z", "20200101000000Z"]

    def test_absent_attribute_reads_empty(self):
        rec = RuleRecord()

        assert rec.get_values("notBefore") == []
        assert rec.get_string("notBefore") is None
        assert not rec.has("notBefore")

    def test_empty_value_list_reads_as_absent(self):
        rec = RuleRecord({"notBefore": []})

        assert not rec.has("notBefore")
        assert rec.get_string("notBefore") is None

    def test_lookup_is_case_insensitive(self):
        rec = RuleRecord({"objectClass": ["sudoRule"]})

        assert rec.get_string("objectclass") == "sudoRule"

    def test_add_string_appends_without_duplicates(self):
        # Arrange
        rec = RuleRecord({"objectClass": ["top"]})

        # Act
        rec.add_string("objectClass", "sudoRule")
        rec.add_string("objectClass", "sudoRule")

        # Assert
        assert rec.get_values("objectClass") == ["top", "sudoRule"]

    def test_set_values_keeps_existing_spelling(self):
        rec = RuleRecord({"objectClass": ["top"]})

        rec.set_values("OBJECTCLASS", ["sudoRule"])

        assert rec.to_dict() == {"objectClass": ["sudoRule"]}

    def test_copy_is_independent(self):
        rec = RuleRecord({"user": ["alice"]})

        dup = rec.copy()
        dup.add_string("user", "bob")

        assert rec.get_values("user") == ["alice"]
        assert dup == RuleRecord({"user": ["alice", "bob"]})

    def test_remove(self):
        rec = RuleRecord({"user": ["alice"], "name": ["r"]})

        rec.remove("USER")
        rec.remove("missing")

        assert list(rec) == ["name"]
