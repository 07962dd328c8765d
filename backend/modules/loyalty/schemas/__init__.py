from .loyalty_schemas import (
    ScanRequest,
    MembershipOut,
    MembershipWithBrand,
    StampResponse,
    RedeemResponse,
    QRCodeResponse,
    ActivityOut,
    ActivityStats,
    TransactionType,
    DateRange,
    PeriodSummary,
    TodaySummary,
    RecentTransaction,
    DashboardStats,
    CustomerSummary,
    TransactionOut,
    HourlyActivity,
    StatisticsOut,
)
