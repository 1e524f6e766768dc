"""POST /v1/financing/run - trigger a financing pass over pending invoices"""

import logging
from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from invoice_financing.api.v1.schemas import FinancingRunRequest, FinancingRunResponse
from invoice_financing.api.dependencies import get_request_id, get_today
from invoice_financing.infrastructure.database.session import get_db
from invoice_financing.services.financing_service import run_financing

router = APIRouter()


@router.post("/financing/run", response_model=FinancingRunResponse)
def create_financing_run(
    request: Request,
    request_body: Optional[FinancingRunRequest] = None,
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
):
    """
    Finance all NON_FINANCED invoices.

    Flow:
    1. Page through pending invoices (batch_size per page)
    2. Match each invoice to the cheapest eligible financier
    3. Persist every outcome and commit once for the whole run
    4. Return per-status counts
    """
    request_id = get_request_id(request)
    body = request_body or FinancingRunRequest()

    try:
        summary = run_financing(
            db,
            batch_size=body.batch_size,
            financing_date=body.financing_date or today,
        )
    except Exception as e:
        logging.error(f"Financing run failed: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Financing run failed")

    return FinancingRunResponse.from_summary(summary)
