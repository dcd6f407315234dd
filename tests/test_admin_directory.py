"""Admin roster resolution from comma-separated configuration."""

from __future__ import annotations

from unittest.mock import patch

from app.services.admin_directory import build_admin_roster, get_admin_recipients


class TestBuildAdminRoster:
    def test_parallel_lists_are_index_aligned(self):
        roster = build_admin_roster(
            "9876543210, 919812345678",
            "Arun, Priya",
            "arun@example.com, priya@example.com",
        )
        assert [(a.phone, a.name, a.contact) for a in roster] == [
            ("919876543210", "Arun", "arun@example.com"),
            ("919812345678", "Priya", "priya@example.com"),
        ]

    def test_missing_names_and_contacts_use_defaults(self):
        roster = build_admin_roster("9876543210,9000000001,9000000002", "Arun")
        assert [a.name for a in roster] == ["Arun", "Admin", "Admin"]
        # Contact falls back to the raw configured token, not the prefixed phone
        assert [a.contact for a in roster] == ["9876543210", "9000000001", "9000000002"]

    def test_country_code_prepended_only_when_absent(self):
        roster = build_admin_roster("919876543210,8765432109")
        assert [a.phone for a in roster] == ["919876543210", "918765432109"]

    def test_blank_tokens_are_skipped_without_shifting_names(self):
        roster = build_admin_roster("9000000001,,9000000003", "A,B,C")
        assert [(a.phone, a.name) for a in roster] == [("919000000001", "A"), ("919000000003", "C")]

    def test_empty_configuration_yields_empty_roster(self):
        assert build_admin_roster("") == []
        assert build_admin_roster(None, "Arun", "x") == []


class TestGetAdminRecipients:
    @patch("app.core.config.ADMIN_CONTACTS", "")
    @patch("app.core.config.ADMIN_NAMES", "Arun,Priya")
    @patch("app.core.config.ADMIN_WHATSAPP_NUMBERS", "9000000001,9000000002")
    def test_reads_configuration(self):
        roster = get_admin_recipients()
        assert [a.name for a in roster] == ["Arun", "Priya"]

    @patch("app.core.config.ADMIN_NAMES", "")
    @patch("app.core.config.ADMIN_WHATSAPP_NUMBERS", "")
    @patch("app.core.config.TO_WHATSAPP_NUMBER", "919999999999")
    def test_single_admin_fallback(self):
        roster = get_admin_recipients()
        assert len(roster) == 1
        assert roster[0].phone == "919999999999"
        assert roster[0].name == "Admin"

    @patch("app.core.config.ADMIN_WHATSAPP_NUMBERS", "")
    @patch("app.core.config.TO_WHATSAPP_NUMBER", "")
    def test_nothing_configured(self):
        assert get_admin_recipients() == []

    def test_recomputed_on_every_call(self):
        with patch("app.core.config.ADMIN_WHATSAPP_NUMBERS", "9000000001"):
            first = get_admin_recipients()
        with patch("app.core.config.ADMIN_WHATSAPP_NUMBERS", "9000000001,9000000002"):
            second = get_admin_recipients()
        assert len(first) == 1
        assert len(second) == 2
