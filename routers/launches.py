from fastapi import APIRouter, Depends, Path, Query, status
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session
from typing import List
import csv
import io

import services
from database import get_db
from schemas import LaunchCreate, LaunchUpdate, LaunchResponse, MonthSummary

router = APIRouter()

# upper bound of the Integer primary key
MAX_ID = 2147483647


# sync handlers, the Session blocks
# Launch CRUD Operations
@router.post("", response_model=LaunchResponse, status_code=status.HTTP_201_CREATED)
def create_launch(
        launch_data: LaunchCreate,
        db: Session = Depends(get_db)
):
    """Create a new launch"""
    return services.create_launch(db, launch_data)


@router.get("", response_model=List[LaunchResponse])
def list_launches(db: Session = Depends(get_db)):
    """List all launches"""
    return services.list_launches(db)


# Month scoped queries, declared before /{launch_id}
@router.get("/by-month", response_model=List[LaunchResponse])
def list_by_month(
        year: int = Query(..., ge=1, le=9999),
        month: int = Query(..., ge=1, le=12),
        db: Session = Depends(get_db)
):
    """List the launches of a month, oldest first"""
    return services.list_by_month(db, year, month)


@router.get("/summary", response_model=MonthSummary)
def month_summary(
        year: int = Query(..., ge=1, le=9999),
        month: int = Query(..., ge=1, le=12),
        db: Session = Depends(get_db)
):
    """Credit and debit totals of a month"""
    return services.summarize_month(db, year, month)


@router.get("/export")
def export_csv(
        year: int = Query(..., ge=1, le=9999),
        month: int = Query(..., ge=1, le=12),
        db: Session = Depends(get_db)
):
    """Export the launches of a month to CSV"""
    launches = services.list_by_month(db, year, month)
    summary = services.summarize(launches)

    output = io.StringIO()
    writer = csv.writer(output)

    writer.writerow(["ID", "Data", "Descrição", "Tipo", "Valor"])

    for launch in launches:
        writer.writerow([
            launch.id,
            launch.date.isoformat(),
            launch.description,
            launch.type.value,
            f"{launch.amount:.2f}"
        ])

    writer.writerow([])
    writer.writerow(["", "", "Total de Créditos", "", f"{summary.total_credits:.2f}"])
    writer.writerow(["", "", "Total de Débitos", "", f"{summary.total_debits:.2f}"])
    writer.writerow(["", "", "Saldo", "", f"{summary.balance:.2f}"])

    output.seek(0)

    return StreamingResponse(
        iter([output.getvalue()]),
        media_type="text/csv",
        headers={
            "Content-Disposition": f"attachment; filename=launches_{year:04d}_{month:02d}.csv"
        }
    )


@router.get("/{launch_id}", response_model=LaunchResponse)
def get_launch(
        launch_id: int = Path(..., ge=1, le=MAX_ID),
        db: Session = Depends(get_db)
):
    """Get a specific launch"""
    return services.get_launch(db, launch_id)


@router.put("/{launch_id}", response_model=LaunchResponse)
def update_launch(
        launch_data: LaunchUpdate,
        launch_id: int = Path(..., ge=1, le=MAX_ID),
        db: Session = Depends(get_db)
):
    """Update only the fields sent in the request"""
    return services.update_launch(db, launch_id, launch_data)


@router.delete("/{launch_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_launch(
        launch_id: int = Path(..., ge=1, le=MAX_ID),
        db: Session = Depends(get_db)
):
    """Delete a launch"""
    services.delete_launch(db, launch_id)
    return None
