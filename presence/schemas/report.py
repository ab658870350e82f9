"""
Report schemas
"""
from datetime import date
from typing import List
from pydantic import BaseModel


class DailySummary(BaseModel):
    work_date: date
    total_employees: int
    present: int
    late: int
    not_checked_in: int
    checked_out: int
    attendance_rate: int  # percent, rounded


class DepartmentPresence(BaseModel):
    department: str
    present: int
    total: int
    percentage: int


class DayCount(BaseModel):
    work_date: date
    total: int


class ReportSummaryResponse(BaseModel):
    summary: DailySummary
    departments: List[DepartmentPresence]
    check_ins_by_day: List[DayCount]
