import logging
from decimal import Decimal
from typing import Iterable, List

from fastapi import HTTPException, status
from sqlalchemy import case, extract, func
from sqlalchemy.orm import Session

from common.enum import LaunchType
from models import Launch
from schemas import LaunchCreate, LaunchUpdate, MonthSummary

logger = logging.getLogger(__name__)

NOT_FOUND = "Lançamento não encontrado"


# Ledger store
def create_launch(db: Session, data: LaunchCreate) -> Launch:
    launch = Launch(
        description=data.description,
        amount=data.amount,
        type=data.type,
        date=data.date
    )
    db.add(launch)
    db.commit()
    db.refresh(launch)
    logger.info("Created launch %s", launch.id)
    return launch


def list_launches(db: Session) -> List[Launch]:
    return db.query(Launch).order_by(Launch.id).all()


def get_launch(db: Session, launch_id: int) -> Launch:
    launch = db.query(Launch).filter(Launch.id == launch_id).first()

    if not launch:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=NOT_FOUND
        )

    return launch


def update_launch(db: Session, launch_id: int, data: LaunchUpdate) -> Launch:
    launch = get_launch(db, launch_id)

    # Only fields present in the patch are applied
    if data.description is not None:
        launch.description = data.description
    if data.amount is not None:
        launch.amount = data.amount
    if data.type is not None:
        launch.type = data.type
    if data.date is not None:
        launch.date = data.date

    db.commit()
    db.refresh(launch)
    logger.info("Updated launch %s", launch.id)
    return launch


def delete_launch(db: Session, launch_id: int) -> None:
    launch = get_launch(db, launch_id)
    db.delete(launch)
    db.commit()
    logger.info("Deleted launch %s", launch_id)


# Month queries and aggregation
def _in_month(year: int, month: int):
    # dates are stored as UTC calendar dates
    return (
        extract("year", Launch.date) == year,
        extract("month", Launch.date) == month,
    )


def list_by_month(db: Session, year: int, month: int) -> List[Launch]:
    return db.query(Launch).filter(
        *_in_month(year, month)
    ).order_by(Launch.date.asc(), Launch.id.asc()).all()


def summarize_month(db: Session, year: int, month: int) -> MonthSummary:
    """Credit and debit totals for a month, computed by the database."""
    credits, debits = db.query(
        func.coalesce(func.sum(case((Launch.type == LaunchType.CREDITO, Launch.amount), else_=0)), 0),
        func.coalesce(func.sum(case((Launch.type == LaunchType.DEBITO, Launch.amount), else_=0)), 0),
    ).filter(*_in_month(year, month)).one()

    return MonthSummary(
        total_credits=Decimal(str(credits)),
        total_debits=Decimal(str(debits))
    )


def summarize(launches: Iterable) -> MonthSummary:
    """Credit and debit totals over launches already in memory."""
    total_credits = Decimal("0")
    total_debits = Decimal("0")

    for launch in launches:
        if launch.type == LaunchType.CREDITO:
            total_credits += Decimal(str(launch.amount))
        elif launch.type == LaunchType.DEBITO:
            total_debits += Decimal(str(launch.amount))
        else:
            raise ValueError(f"Unknown launch type: {launch.type!r}")

    return MonthSummary(total_credits=total_credits, total_debits=total_debits)
