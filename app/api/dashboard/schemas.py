from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel

from app.core.enums import EnrollmentCategory


class EnrollmentCount(BaseModel):
    enrollment_category: Optional[EnrollmentCategory] = None
    count: int


class DashboardStats(BaseModel):
    total_students: int
    total_staff: int
    monthly_revenue: Decimal
    pending_balances: Decimal
    enrollment_distribution: List[EnrollmentCount]
