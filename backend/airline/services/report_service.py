"""
Admin reporting: headline metrics, daily series, per-flight figures and
CSV / PDF exports.

Revenue is net of refunds: completed payments are positive rows and
refunds are negative rows in the same ledger, so a plain SUM over both
statuses gives what the airline actually kept.
"""

import csv
import io
from datetime import timedelta
from decimal import Decimal

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle
from sqlalchemy import case, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from airline.core.clock import utcnow
from airline.models import Booking, Client, Flight, Passenger, Payment
from airline.models.enums import BookingStatus, PaymentStatus
from airline.schemas.report import BookingStats, DailyCount, DailyRevenue, FlightReportRow, Metrics

LEDGER_STATUSES = (PaymentStatus.COMPLETED.value, PaymentStatus.REFUNDED.value)


def _money(value) -> float:
    return float(value or Decimal("0"))


async def get_metrics(db: AsyncSession) -> Metrics:
    async def scalar(stmt):
        return (await db.execute(stmt)).scalar_one()

    total_bookings = await scalar(select(func.count()).select_from(Booking))
    active_bookings = await scalar(
        select(func.count()).select_from(Booking).where(Booking.status != BookingStatus.CANCELLED.value)
    )
    revenue = await scalar(
        select(func.sum(Payment.amount)).where(Payment.status == PaymentStatus.COMPLETED.value)
    )
    refunds = await scalar(
        select(func.sum(Payment.amount)).where(Payment.status == PaymentStatus.REFUNDED.value)
    )
    paid_bookings = await scalar(
        select(func.count(func.distinct(Payment.booking_id))).where(Payment.status == PaymentStatus.COMPLETED.value)
    )

    return Metrics(
        total_bookings=total_bookings,
        active_bookings=active_bookings,
        total_revenue=_money(revenue) + _money(refunds),
        total_refunds=-_money(refunds),
        total_clients=await scalar(select(func.count()).select_from(Client)),
        total_flights=await scalar(select(func.count()).select_from(Flight)),
        average_booking_value=round(_money(revenue) / paid_bookings, 2) if paid_bookings else 0.0,
    )


async def bookings_per_day(db: AsyncSession, days: int = 30) -> list[DailyCount]:
    since = utcnow() - timedelta(days=days)
    day = func.date(Booking.created_at)
    rows = await db.execute(
        select(day.label("day"), func.count().label("count"))
        .where(Booking.created_at >= since)
        .group_by(day)
        .order_by(day)
    )
    return [DailyCount(day=row.day, count=row.count) for row in rows]


async def revenue_per_day(db: AsyncSession, days: int = 30) -> list[DailyRevenue]:
    since = utcnow() - timedelta(days=days)
    day = func.date(Payment.payment_timestamp)
    rows = await db.execute(
        select(day.label("day"), func.sum(Payment.amount).label("revenue"))
        .where(Payment.payment_timestamp >= since, Payment.status.in_(LEDGER_STATUSES))
        .group_by(day)
        .order_by(day)
    )
    return [DailyRevenue(day=row.day, revenue=_money(row.revenue)) for row in rows]


async def flight_report(db: AsyncSession) -> list[FlightReportRow]:
    passengers = (
        select(Passenger.flight_id, func.count(Passenger.passenger_id).label("passengers"))
        .join(Booking, Booking.booking_id == Passenger.booking_id)
        .where(Booking.status != BookingStatus.CANCELLED.value)
        .group_by(Passenger.flight_id)
        .subquery()
    )
    revenue = (
        select(Booking.flight_id, func.sum(Payment.amount).label("revenue"))
        .join(Payment, Payment.booking_id == Booking.booking_id)
        .where(Payment.status.in_(LEDGER_STATUSES))
        .group_by(Booking.flight_id)
        .subquery()
    )
    rows = await db.execute(
        select(
            Flight.flight_id,
            Flight.flight_no,
            Flight.status,
            func.coalesce(passengers.c.passengers, 0),
            revenue.c.revenue,
        )
        .outerjoin(passengers, passengers.c.flight_id == Flight.flight_id)
        .outerjoin(revenue, revenue.c.flight_id == Flight.flight_id)
        .order_by(Flight.depart_when.desc())
    )
    return [
        FlightReportRow(flight_id=fid, flight_no=no, status=status, passengers=count, revenue=_money(rev))
        for fid, no, status, count, rev in rows.all()
    ]


async def booking_stats(db: AsyncSession) -> BookingStats:
    rows = await db.execute(select(Booking.status, func.count()).group_by(Booking.status))
    by_status = {status.value: 0 for status in BookingStatus}
    by_status.update({status: count for status, count in rows.all()})

    flags = (
        await db.execute(
            select(
                func.coalesce(func.sum(case((Booking.support == "yes", 1), else_=0)), 0),
                func.coalesce(func.sum(case((Booking.fasttrack == "yes", 1), else_=0)), 0),
            )
        )
    ).one()

    sizes = (
        select(func.count(Passenger.passenger_id).label("size"))
        .group_by(Passenger.booking_id)
        .subquery()
    )
    average = (await db.execute(select(func.avg(sizes.c.size)))).scalar_one()

    return BookingStats(
        by_status=by_status,
        with_support=int(flags[0]),
        with_fasttrack=int(flags[1]),
        average_passengers=round(float(average), 2) if average is not None else None,
    )


async def recent_bookings(db: AsyncSession, limit: int = 500) -> list[dict]:
    rows = await db.execute(
        select(Booking, Client.username, Flight.flight_no)
        .join(Client, Client.client_id == Booking.client_id)
        .join(Flight, Flight.flight_id == Booking.flight_id)
        .order_by(Booking.created_at.desc(), Booking.booking_id.desc())
        .limit(limit)
    )
    return [
        {
            "booking_id": booking.booking_id,
            "booking_no": booking.booking_no,
            "client": username,
            "flight_no": flight_no,
            "status": booking.status,
            "support": booking.support,
            "fasttrack": booking.fasttrack,
            "created_at": booking.created_at.isoformat(),
        }
        for booking, username, flight_no in rows.all()
    ]


def to_csv(rows: list[dict]) -> str:
    buffer = io.StringIO()
    if rows:
        writer = csv.DictWriter(buffer, fieldnames=list(rows[0]))
        writer.writeheader()
        writer.writerows(rows)
    return buffer.getvalue()


async def export_csv(db: AsyncSession, report_type: str) -> str:
    if report_type == "bookings":
        return to_csv(await recent_bookings(db))
    metrics = await get_metrics(db)
    return to_csv([{"metric": key, "value": value} for key, value in metrics.model_dump().items()])


def render_pdf(metrics: Metrics, bookings: list[dict]) -> bytes:
    """Lay out the summary table and recent bookings. Called in a worker thread."""
    buffer = io.BytesIO()
    doc = SimpleDocTemplate(buffer, pagesize=A4, title="Airline Reservation Report")
    styles = getSampleStyleSheet()
    story = [
        Paragraph("Airline Reservation Report", styles["Title"]),
        Paragraph(f"Generated {utcnow():%Y-%m-%d %H:%M} UTC", styles["Normal"]),
        Spacer(1, 0.3 * inch),
        Paragraph("Summary", styles["Heading2"]),
    ]

    summary = [["Metric", "Value"]] + [
        [key.replace("_", " ").title(), f"{value:,.2f}" if isinstance(value, float) else str(value)]
        for key, value in metrics.model_dump().items()
    ]
    table = Table(summary, colWidths=[3 * inch, 2 * inch])
    table.setStyle(TableStyle([
        ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
        ("BACKGROUND", (0, 0), (-1, 0), colors.lightgrey),
    ]))
    story += [table, Spacer(1, 0.3 * inch), Paragraph("Recent bookings", styles["Heading2"])]

    if bookings:
        header = ["Booking", "Client", "Flight", "Status", "Created"]
        body = [[b["booking_no"], b["client"], b["flight_no"], b["status"], b["created_at"][:10]] for b in bookings]
        table = Table([header] + body, repeatRows=1)
        table.setStyle(TableStyle([
            ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
            ("BACKGROUND", (0, 0), (-1, 0), colors.lightgrey),
            ("FONTSIZE", (0, 0), (-1, -1), 8),
        ]))
        story.append(table)
    else:
        story.append(Paragraph("No bookings yet.", styles["Normal"]))

    doc.build(story)
    return buffer.getvalue()


async def export_pdf(db: AsyncSession) -> bytes:
    metrics = await get_metrics(db)
    bookings = await recent_bookings(db, limit=50)
    return await run_in_threadpool(render_pdf, metrics, bookings)
