"""
Unit tests for UserRepository, catalog repositories and update-clause building
"""
from unittest.mock import patch

import pytest
from psycopg2 import errors

from conftest import NOW
from dental_supply.core.exceptions import ConflictError
from dental_supply.domain.catalog import CategoryCreate, VariantCreate
from dental_supply.repositories.base import build_update_clause
from dental_supply.repositories.category_repository import CategoryRepository
from dental_supply.repositories.review_repository import ReviewRepository
from dental_supply.repositories.user_repository import UserRepository
from dental_supply.repositories.variant_repository import VariantRepository


def user_row(**overrides):
    row = {
        'id': 1,
        'email': 'dana@example.com',
        'first_name': 'Dana',
        'last_name': 'Smile',
        'role': 'user',
        'last_login': None,
        'created_at': NOW,
        'updated_at': NOW
    }
    row.update(overrides)
    return row


class TestBuildUpdateClause:

    def test_skips_unknown_and_none(self):
        clause, values = build_update_clause(
            {'name': 'New', 'price': None, 'hacker': 'x'}, ('name', 'price')
        )

        assert clause == "name = %s, updated_at = NOW()"
        assert values == ['New']

    def test_nothing_to_update(self):
        assert build_update_clause({}, ('name',)) == ("", [])


class TestUserRepository:

    @patch('dental_supply.repositories.user_repository.get_db_connection_dict')
    def test_find_by_email_is_case_insensitive_and_includes_hash(self, mock_get_conn, mock_conn, mock_cursor):
        mock_get_conn.return_value = mock_conn
        mock_cursor.fetchone.return_value = user_row(password_hash='$2b$12$hash')

        user = UserRepository().find_by_email('DANA@example.com')

        assert user.password_hash == '$2b$12$hash'
        assert "LOWER(email) = LOWER(%s)" in mock_cursor.execute.call_args.args[0]

    @patch('dental_supply.repositories.user_repository.get_db_connection_dict')
    def test_create_lowercases_email(self, mock_get_conn, mock_conn, mock_cursor):
        mock_get_conn.return_value = mock_conn
        mock_cursor.fetchone.return_value = user_row()

        UserRepository().create('Dana@Example.com', 'hash', 'Dana', 'Smile')

        params = mock_cursor.execute.call_args.args[1]
        assert params[0] == 'dana@example.com'
        mock_conn.commit.assert_called_once()

    @patch('dental_supply.repositories.user_repository.get_db_connection_dict')
    def test_create_duplicate_raises_conflict(self, mock_get_conn, mock_conn, mock_cursor):
        mock_get_conn.return_value = mock_conn
        mock_cursor.execute.side_effect = errors.UniqueViolation()

        with pytest.raises(ConflictError):
            UserRepository().create('dana@example.com', 'hash', 'Dana', 'Smile')

        mock_conn.rollback.assert_called_once()
        mock_conn.close.assert_called_once()


class TestCatalogRepositories:

    @patch('dental_supply.repositories.category_repository.get_db_connection_dict')
    def test_duplicate_category_name(self, mock_get_conn, mock_conn, mock_cursor):
        mock_get_conn.return_value = mock_conn
        mock_cursor.execute.side_effect = errors.UniqueViolation()

        with pytest.raises(ConflictError):
            CategoryRepository().create(CategoryCreate(name='Hygiene'))

    @patch('dental_supply.repositories.variant_repository.get_db_connection_dict')
    def test_duplicate_variant_sku(self, mock_get_conn, mock_conn, mock_cursor):
        mock_get_conn.return_value = mock_conn
        mock_cursor.execute.side_effect = errors.UniqueViolation()

        with pytest.raises(ConflictError) as exc_info:
            VariantRepository().create(1, VariantCreate(name='Large', sku='GLV-L', price=12))

        assert 'GLV-L' in exc_info.value.message

    @patch('dental_supply.repositories.review_repository.get_db_connection_dict')
    def test_review_stats_over_approved_only(self, mock_get_conn, mock_conn, mock_cursor):
        mock_get_conn.return_value = mock_conn
        mock_cursor.fetchall.return_value = [
            {'rating': 5, 'count': 2},
            {'rating': 4, 'count': 1},
        ]

        stats = ReviewRepository().get_stats(1)

        assert stats.total_reviews == 3
        assert stats.average_rating == 4.67
        assert stats.rating_distribution == {1: 0, 2: 0, 3: 0, 4: 1, 5: 2}
        assert mock_cursor.execute.call_args.args[1] == (1, 'approved')

    @patch('dental_supply.repositories.review_repository.get_db_connection_dict')
    def test_review_stats_without_reviews(self, mock_get_conn, mock_conn, mock_cursor):
        mock_get_conn.return_value = mock_conn
        mock_cursor.fetchall.return_value = []

        stats = ReviewRepository().get_stats(1)

        assert stats.average_rating == 0.0
        assert stats.total_reviews == 0
