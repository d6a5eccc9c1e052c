from pydantic import Field

from roc_contracts.schemas.base import CamelModel


class MonthlyRevenue(CamelModel):
    month: str = Field(..., description="Calendar month as YYYY-MM")
    amount: float


class ContractAnalytics(CamelModel):
    """Portfolio figures as computed by the API (or locally, see summarize_portfolio)."""

    total_contracts: int = 0
    active_contracts: int = 0
    expiring_soon: int = 0
    overdue_payments: int = 0
    total_rent_collected: float = 0.0
    average_rent_amount: float = 0.0
    occupancy_rate: float = Field(0.0, description="Percentage of contracts that are active")
    contracts_by_status: dict[str, int] = {}
    monthly_revenue: list[MonthlyRevenue] = []
