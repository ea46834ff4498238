import pytest

from learnlab.core.exceptions import ValidationError
from learnlab.domain.roster_domain import parse_roster_csv


class TestParseRosterCsv:
    def test_header_is_case_insensitive_and_password_optional(self):
        rows = parse_roster_csv("Name,EMAIL\nAda Lovelace,ada@school.edu\n")
        assert rows == [{"name": "Ada Lovelace", "email": "ada@school.edu", "password": None}]

    def test_password_column_and_blank_lines(self):
        text = (
            "name,email,password\n"
            "Ada,ada@school.edu,LongEnough1\n"
            "\n"
            "Alan,alan@school.edu,\n"
        )
        rows = parse_roster_csv(text)

        assert len(rows) == 2
        assert rows[0]["password"] == "LongEnough1"
        assert rows[1]["password"] is None

    def test_quoted_cells(self):
        rows = parse_roster_csv('name,email\n"Hopper, Grace",grace@school.edu\n')
        assert rows[0]["name"] == "Hopper, Grace"

    def test_empty_cells_are_kept_for_per_row_reporting(self):
        rows = parse_roster_csv("name,email\n,missing@school.edu\n")
        assert rows == [{"name": None, "email": "missing@school.edu", "password": None}]

    def test_missing_required_column(self):
        with pytest.raises(ValidationError, match="CSV must have columns: name, email"):
            parse_roster_csv("name,phone\nAda,123\n")

    @pytest.mark.parametrize("text", ["", "name,email\n", "name,email\n\n\n"])
    def test_no_data_rows(self, text):
        with pytest.raises(ValidationError, match="header row and at least one data row"):
            parse_roster_csv(text)
