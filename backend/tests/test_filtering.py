"""
Tests for the client-side text filter shared by the list views.
"""
from eco_admin.services.filtering import matches, filter_rows


USERS = [
    {"id": "1", "full_name": "Иван Петров", "email": "user1@example.com", "phone": "+7 999 123-45-67"},
    {"id": "2", "full_name": "Мария Сидорова", "email": "user2@example.com", "phone": "+7 999 234-56-78"},
    {"id": "3", "full_name": "Алексей Козлов", "email": "user3@example.com", "phone": None},
]
FIELDS = ("full_name", "email", "phone")


class TestMatches:
    """Tests for matches() and filter_rows()."""

    def test_cyrillic_query_is_case_insensitive(self):
        """Filtering on "мар" keeps only Мария Сидорова."""
        result = filter_rows(USERS, "мар", FIELDS)
        assert [row["id"] for row in result] == ["2"]

    def test_uppercase_query_matches_lowercase_field(self):
        """Upper-case query text still matches a lower-case email."""
        assert matches(USERS[0], "USER1@", FIELDS)

    def test_empty_query_keeps_every_row(self):
        """Empty or missing search text keeps the full list."""
        assert filter_rows(USERS, "", FIELDS) == USERS
        assert filter_rows(USERS, None, FIELDS) == USERS

    def test_absent_field_never_matches(self):
        """A null phone never matches, even a query every phone contains."""
        assert not matches(USERS[2], "999", FIELDS)

    def test_only_designated_fields_are_searched(self):
        """Fields outside the designated set are ignored."""
        assert not matches(USERS[0], "1", ("full_name",))
        assert matches(USERS[0], "1", ("email",))

    def test_every_kept_row_matches_at_least_one_field(self):
        """Kept rows match some field; dropped rows match none."""
        for query in ["ов", "example", "234", "zzz", "а"]:
            kept = filter_rows(USERS, query, FIELDS)
            for row in kept:
                assert any(
                    row.get(field) is not None and query.casefold() in row[field].casefold()
                    for field in FIELDS
                )
            for row in USERS:
                if row not in kept:
                    assert not matches(row, query, FIELDS)

    def test_no_match_yields_empty_list(self):
        """A query nothing contains yields an empty list."""
        assert filter_rows(USERS, "nobody", FIELDS) == []
