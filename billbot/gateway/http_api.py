"""Bill form API — context for the categorization form and its submissions."""

from __future__ import annotations

import datetime as dt
import logging

from fastapi import APIRouter, Query, Request
from pydantic import BaseModel, ConfigDict, Field

from billbot.types import BillCategory

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["bill-form"])


class Member(BaseModel):
    id: str
    name: str


class BillFormContext(BaseModel):
    image_id: str
    image_url: str
    categories: list[BillCategory]
    members: list[Member]


class BillSubmission(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    image_id: str = Field(alias="imageId", min_length=1)
    image_url: str = Field(default="", alias="imageUrl")
    category: BillCategory
    amount: float = Field(gt=0)
    date: dt.date
    members: list[str] = Field(default_factory=list)


class SubmissionResponse(BaseModel):
    status: str
    image_id: str


@router.get("/bill-form", response_model=BillFormContext)
async def bill_form(
    request: Request,
    image_id: str = Query("", alias="imageId"),
    image_url: str = Query("", alias="imageUrl"),
):
    members = request.app.state.config.members
    return BillFormContext(
        image_id=image_id,
        image_url=image_url,
        categories=list(BillCategory),
        members=[Member(id=k, name=v) for k, v in members.items()],
    )


@router.post("/bills", response_model=SubmissionResponse, status_code=202)
async def submit_bill(submission: BillSubmission):
    # Nothing is stored yet; the submission is only recorded in the log.
    logger.info(
        "Bill submitted: image=%s category=%s amount=%.2f date=%s members=%s",
        submission.image_id,
        submission.category.value,
        submission.amount,
        submission.date.isoformat(),
        ",".join(submission.members) or "-",
    )
    return SubmissionResponse(status="accepted", image_id=submission.image_id)
