from typing import List

from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session

from learnlab.core.database import get_db
from learnlab.core.exceptions import ValidationError
from learnlab.core.security import AuthSession, require_role
from learnlab.domain.roster_domain import parse_roster_csv
from learnlab.schemas.bulk_upload import (
    BulkUploadHistoryItem,
    BulkUploadRequest,
    BulkUploadResponse,
)
from learnlab.services.bulk_upload import BulkUploadService

router = APIRouter(prefix="/bulk-upload", tags=["bulk-upload"])


@router.post("/students", response_model=BulkUploadResponse)
def upload_students(
    request: BulkUploadRequest,
    session: AuthSession = Depends(require_role("faculty")),
    db: Session = Depends(get_db),
):
    """
    Create many student accounts, best effort.

    Rows are processed independently: a duplicate email or a missing field
    fails that row only. The response counts successes and failures and
    carries up to 10 error messages.
    """
    return BulkUploadService(db).import_students(session, request.students, request.filename)


@router.post("/students/csv", response_model=BulkUploadResponse)
async def upload_students_csv(
    request: Request,
    filename: str = "bulk_upload.csv",
    session: AuthSession = Depends(require_role("faculty")),
    db: Session = Depends(get_db),
):
    """
    Same as `/bulk-upload/students` but takes the raw CSV text as the body.

    The header row must contain `name` and `email`; `password` is optional.
    """
    body = await request.body()
    try:
        text = body.decode("utf-8-sig")
    except UnicodeDecodeError:
        raise ValidationError("CSV must be UTF-8 encoded")

    rows = parse_roster_csv(text)
    return await run_in_threadpool(
        BulkUploadService(db).import_students, session, rows, filename
    )


@router.get("/history", response_model=List[BulkUploadHistoryItem])
def upload_history(
    session: AuthSession = Depends(require_role("faculty")),
    db: Session = Depends(get_db),
):
    return BulkUploadService(db).history(session)
