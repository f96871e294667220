"""
Tests for row classification and upload type parsing.
"""

from __future__ import annotations

import pytest

from intake.uploads.classifier import (
    DUPLICATE_IDENTIFIER_REASON,
    RowClassifier,
    classify,
    column_roles_from_settings,
    parse_column_ref,
)
from intake.uploads.errors import SchemaMismatch
from intake.uploads.models import ClassifiedRow, Outcome, Row, UploadType
from tests.helpers import CLIENTS_HEADER, CONTACTS_HEADER, contact_row

REFERENCE = frozenset({"CTC100", "CTC200"})


def _row(values, columns=CLIENTS_HEADER, line=2) -> Row:
    return Row(line_number=line, values=tuple(values), columns=tuple(columns))


class TestUploadTypeFromFileName:
    @pytest.mark.parametrize(
        "file_name, expected",
        [
            ("batch_clients_001.csv", UploadType.CLIENTS),
            ("batch_contacts_002.csv", UploadType.CONTACTS),
            ("mbeya_results_2024_q1.csv", UploadType.RESULTS),
        ],
    )
    def test_second_segment_selects_type(self, file_name, expected):
        assert UploadType.from_file_name(file_name) is expected

    @pytest.mark.parametrize(
        "file_name",
        ["clients.csv", "batch_Clients_001.csv", "batch_visits_001.csv", "clients_batch_001.csv", ""],
    )
    def test_unknown_types_are_none(self, file_name):
        assert UploadType.from_file_name(file_name) is None

    @pytest.mark.parametrize(
        "file_name, expected",
        [
            ("dir_x/batch_clients_1.csv", UploadType.CLIENTS),
            ("up_results_2/batch_contacts_1.csv", UploadType.CONTACTS),
            ("a_clients_b/visits.csv", None),
        ],
    )
    def test_directory_parts_are_ignored(self, file_name, expected):
        assert UploadType.from_file_name(file_name) is expected


class TestClassify:
    def test_clients_duplicate_is_rejected(self):
        outcome = classify(UploadType.CLIENTS, _row(["CTC100", "Asha"]), REFERENCE, 0)

        assert not outcome.accepted
        assert outcome.reason == DUPLICATE_IDENTIFIER_REASON

    def test_clients_new_identifier_is_accepted(self):
        outcome = classify(UploadType.CLIENTS, _row(["CTC999", "Asha"]), REFERENCE, 0)

        assert outcome.accepted
        assert outcome.reason is None

    @pytest.mark.parametrize("upload_type", [UploadType.CONTACTS, UploadType.RESULTS])
    def test_unknown_index_client_is_rejected(self, upload_type):
        row = _row(contact_row("C1", "CTC404"), CONTACTS_HEADER)

        outcome = classify(upload_type, row, REFERENCE, 12)

        assert not outcome.accepted
        assert outcome.reason == f"No matching index client identifier in {upload_type.value} file"

    @pytest.mark.parametrize("upload_type", [UploadType.CONTACTS, UploadType.RESULTS])
    def test_known_index_client_is_accepted(self, upload_type):
        row = _row(contact_row("C1", "CTC200"), CONTACTS_HEADER)

        assert classify(upload_type, row, REFERENCE, 12).accepted

    def test_missing_cross_reference_value_is_rejected(self):
        row = _row(["C1", "Asha"], CONTACTS_HEADER)

        assert not classify(UploadType.CONTACTS, row, REFERENCE, 12).accepted

    def test_unknown_type_accepts_everything(self):
        assert classify(None, _row(["CTC100"]), REFERENCE, 0).accepted

    def test_classification_is_idempotent(self):
        row = _row(["CTC100", "Asha"])

        first = classify(UploadType.CLIENTS, row, REFERENCE, 0)
        second = classify(UploadType.CLIENTS, row, REFERENCE, 0)

        assert first == second


class TestColumnRoles:
    def test_parse_column_ref(self):
        assert parse_column_ref("12") == 12
        assert parse_column_ref(" ctc_number ") == "ctc_number"

    def test_defaults_follow_positional_convention(self, settings):
        roles = column_roles_from_settings(settings)

        assert roles == {
            UploadType.CLIENTS: 0,
            UploadType.CONTACTS: 12,
            UploadType.RESULTS: 12,
        }

    def test_named_column_is_resolved_against_header(self):
        roles = {UploadType.CONTACTS: "index_ctc_number"}

        classifier = RowClassifier.for_header(UploadType.CONTACTS, CONTACTS_HEADER, REFERENCE, roles)

        assert classifier.key_position == 12

    def test_missing_named_column_fails_fast(self):
        roles = {UploadType.CLIENTS: "ctc_number"}

        with pytest.raises(SchemaMismatch) as exc_info:
            RowClassifier.for_header(UploadType.CLIENTS, ["client_id", "name"], REFERENCE, roles)

        assert exc_info.value.details["column"] == "ctc_number"

    def test_position_past_header_fails_fast(self):
        roles = {UploadType.CONTACTS: 12}

        with pytest.raises(SchemaMismatch):
            RowClassifier.for_header(UploadType.CONTACTS, CLIENTS_HEADER, REFERENCE, roles)

    def test_unknown_type_needs_no_role(self):
        classifier = RowClassifier.for_header(None, [], REFERENCE, {})

        assert classifier.classify(_row(["CTC100"])).accepted


class TestRejectedRowEntry:
    def test_repeated_column_names_keep_every_value(self):
        row = _row(["CTC1", "0755000000", "0655000000"], columns=["ctc_number", "phone", "phone"])

        entry = ClassifiedRow(row=row, outcome=Outcome.reject("nope")).to_report_entry()

        assert entry == {
            "ctc_number": "CTC1",
            "phone": "0755000000",
            "phone_2": "0655000000",
            "rejectionReason": "nope",
        }

    def test_values_past_header_are_keyed_by_position(self):
        row = _row(["CTC1", "Asha", "extra"], columns=["ctc_number", "first_name"])

        assert row.as_dict() == {"ctc_number": "CTC1", "first_name": "Asha", "_2": "extra"}
