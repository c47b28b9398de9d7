"""Report Routes - manager/admin aggregates."""

from datetime import datetime

from fastapi import APIRouter, Depends, Query

from workboard.api.dependencies import get_principal, get_report_service
from workboard.core.domain_types import Principal
from workboard.schemas.report import CompletedTasksReport, WorkloadReport
from workboard.services.reports import ReportService

router = APIRouter(prefix="/api/v1/reports", tags=["reports"])


@router.get("/completed-tasks", response_model=list[CompletedTasksReport])
async def completed_tasks(
    created_from: datetime | None = Query(None),
    created_to: datetime | None = Query(None),
    principal: Principal = Depends(get_principal),
    reports: ReportService = Depends(get_report_service),
):
    return await reports.completed_per_project(principal, created_from, created_to)


@router.get("/workload", response_model=list[WorkloadReport])
async def team_workload(
    principal: Principal = Depends(get_principal),
    reports: ReportService = Depends(get_report_service),
):
    return await reports.team_workload(principal)
