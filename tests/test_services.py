"""
Ledger Service Tests

Tests for the store operations, month filtering and credit/debit
aggregation, run directly against a SQLAlchemy session.
"""

import datetime as dt
from decimal import Decimal
from types import SimpleNamespace

import pytest
from fastapi import HTTPException

import services
from common.enum import LaunchType
from schemas import LaunchCreate, LaunchUpdate, MonthSummary


def make(db, description, amount, launch_type, date):
    return services.create_launch(db, LaunchCreate(
        description=description,
        amount=amount,
        type=launch_type,
        date=date,
    ))


class TestStore:
    """Tests for create/get/update/delete."""

    def test_round_trip(self, db_session):
        launch = make(db_session, "Salário", "1000.00", LaunchType.CREDITO, "2024-03-05")

        fetched = services.get_launch(db_session, launch.id)

        assert fetched.description == "Salário"
        assert fetched.amount == Decimal("1000.00")
        assert fetched.type is LaunchType.CREDITO
        assert fetched.date == dt.date(2024, 3, 5)

    def test_update_applies_only_given_fields(self, db_session):
        launch = make(db_session, "Aluguel", "400.00", LaunchType.DEBITO, "2024-03-10")

        services.update_launch(db_session, launch.id, LaunchUpdate(description="Aluguel março"))

        fetched = services.get_launch(db_session, launch.id)
        assert fetched.description == "Aluguel março"
        assert fetched.amount == Decimal("400.00")
        assert fetched.type is LaunchType.DEBITO
        assert fetched.date == dt.date(2024, 3, 10)

    def test_delete(self, db_session):
        launch = make(db_session, "Aluguel", "400.00", LaunchType.DEBITO, "2024-03-10")

        services.delete_launch(db_session, launch.id)

        with pytest.raises(HTTPException) as exc_info:
            services.get_launch(db_session, launch.id)
        assert exc_info.value.status_code == 404

    def test_update_missing_raises_404(self, db_session):
        with pytest.raises(HTTPException) as exc_info:
            services.update_launch(db_session, 42, LaunchUpdate(amount="1"))

        assert exc_info.value.status_code == 404

    def test_list_launches_ordered_by_id(self, db_session):
        first = make(db_session, "B", "1", LaunchType.DEBITO, "2024-05-01")
        second = make(db_session, "A", "1", LaunchType.DEBITO, "2024-01-01")

        assert [launch.id for launch in services.list_launches(db_session)] == [first.id, second.id]


class TestMonthQueries:
    """Tests for list_by_month and summarize_month."""

    @pytest.fixture
    def ledger(self, db_session):
        make(db_session, "Mercado", "150.25", LaunchType.DEBITO, "2024-03-20")
        make(db_session, "Salário", "1000.00", LaunchType.CREDITO, "2024-03-05")
        make(db_session, "Aluguel", "400.00", LaunchType.DEBITO, "2024-03-10")
        make(db_session, "Freela", "300.00", LaunchType.CREDITO, "2024-02-28")
        make(db_session, "Salário", "1000.00", LaunchType.CREDITO, "2023-03-05")
        return db_session

    def test_list_by_month_filters_and_orders(self, ledger):
        launches = services.list_by_month(ledger, 2024, 3)

        assert [launch.description for launch in launches] == ["Salário", "Aluguel", "Mercado"]
        assert all(launch.date.year == 2024 and launch.date.month == 3 for launch in launches)

    def test_list_by_month_empty(self, ledger):
        assert services.list_by_month(ledger, 2024, 7) == []

    def test_summarize_month(self, ledger):
        summary = services.summarize_month(ledger, 2024, 3)

        assert summary.total_credits == Decimal("1000.00")
        assert summary.total_debits == Decimal("550.25")
        assert summary.balance == Decimal("449.75")

    def test_summarize_month_empty(self, ledger):
        summary = services.summarize_month(ledger, 2020, 1)

        assert summary.total_credits == Decimal("0.00")
        assert summary.total_debits == Decimal("0.00")

    def test_sql_and_memory_totals_agree(self, ledger):
        launches = services.list_by_month(ledger, 2024, 3)

        assert services.summarize(launches) == services.summarize_month(ledger, 2024, 3)


class TestSummarize:
    """Tests for the in-memory summarize()."""

    @staticmethod
    def launch(amount, launch_type):
        return SimpleNamespace(amount=Decimal(amount), type=launch_type)

    def test_empty(self):
        assert services.summarize([]) == MonthSummary(total_credits=0, total_debits=0)

    def test_splits_credits_and_debits(self):
        summary = services.summarize([
            self.launch("1000.00", LaunchType.CREDITO),
            self.launch("400.00", LaunchType.DEBITO),
            self.launch("0.10", LaunchType.DEBITO),
        ])

        assert summary.total_credits == Decimal("1000.00")
        assert summary.total_debits == Decimal("400.10")
        assert summary.balance == Decimal("599.90")

    def test_linear_over_disjoint_sets(self):
        a = [self.launch("10.50", LaunchType.CREDITO), self.launch("3.25", LaunchType.DEBITO)]
        b = [self.launch("7.00", LaunchType.DEBITO), self.launch("1.00", LaunchType.CREDITO)]

        assert services.summarize(a + b) == services.summarize(a) + services.summarize(b)

    def test_unknown_type_raises(self):
        with pytest.raises(ValueError):
            services.summarize([SimpleNamespace(amount=Decimal("1"), type="Transferência")])
