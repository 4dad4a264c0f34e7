"""
Bill Switching

Cost projections and switch/stay recommendations for tracked
contracts (energy, broadband, mobile).
"""

from datetime import date, datetime, time, timedelta, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional
from urllib.parse import quote
from uuid import uuid4

import structlog

from lifetracker.models.bill import (
    EnergyProjection,
    EnergyReading,
    RiskPreference,
    SwitchRecommendation,
    TrackedService,
)


logger = structlog.get_logger(__name__)

COMPARISON_URLS: dict[str, dict[str, str]] = {
    "uswitch": {
        "energy": "https://www.uswitch.com/gas-electricity/",
        "broadband": "https://www.uswitch.com/broadband/",
        "mobile": "https://www.uswitch.com/mobiles/",
    },
    "mse": {
        "energy": "https://www.moneysavingexpert.com/cheapenergyclub/",
        "broadband": "https://www.moneysavingexpert.com/broadband-and-tv/",
        "mobile": "https://www.moneysavingexpert.com/phones/",
    },
    "comparemarket": {
        "energy": "https://energy.comparethemarket.com/",
        "broadband": "https://www.comparethemarket.com/broadband/",
        "mobile": "https://www.comparethemarket.com/mobile-phones/",
    },
}
DEFAULT_COMPARISON_URL = "https://www.uswitch.com/"

MAX_DEDUCTION_PER_SERVICE = Decimal("25")
SWITCH_RECOMMENDED_PENALTY = Decimal("10")


def _whole_pounds(amount: Decimal) -> str:
    return str(amount.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def should_switch(
    current_annual_cost: Decimal,
    best_offer_annual_cost: Decimal,
    exit_fee: Decimal,
    savings_threshold: Decimal,
    risk_preference: RiskPreference,
    is_best_offer_fixed: bool,
) -> SwitchRecommendation:
    """
    Recommend a switch when the saving after exit fees clears the threshold.

    A household preferring stable bills is never pushed onto a variable tariff.
    """
    net_savings = current_annual_cost - best_offer_annual_cost - exit_fee
    logger.debug(
        "should_switch",
        net_savings=str(net_savings),
        threshold=str(savings_threshold),
        risk_preference=risk_preference.value,
    )

    if net_savings < savings_threshold:
        return SwitchRecommendation(
            recommend=False,
            reason=(
                f"Net savings (£{_whole_pounds(net_savings)}) below your "
                f"£{savings_threshold} threshold"
            ),
            net_savings=net_savings,
        )

    if risk_preference == RiskPreference.STABLE and not is_best_offer_fixed:
        return SwitchRecommendation(
            recommend=False,
            reason="Variable tariff doesn't match your preference for stable bills",
            net_savings=net_savings,
        )

    return SwitchRecommendation(
        recommend=True,
        reason=f"Switch to save £{_whole_pounds(net_savings)}/year after exit fees",
        net_savings=net_savings,
    )


def calculate_energy_cost(
    consumption_kwh: float,
    unit_rate_pence: Decimal,
    standing_charge_pence: Decimal,
    days: int,
) -> Decimal:
    """GBP cost of usage plus standing charge; rates are in pence."""
    unit_cost = Decimal(str(consumption_kwh)) * unit_rate_pence / 100
    standing_cost = standing_charge_pence * days / 100
    return unit_cost + standing_cost


def project_annual_cost(
    readings: list[EnergyReading],
    unit_rate_pence: Decimal,
    standing_charge_pence: Decimal,
) -> EnergyProjection:
    """Annualise daily readings at the given tariff."""
    if not readings:
        return EnergyProjection(
            monthly_estimate=Decimal("0"),
            annual_estimate=Decimal("0"),
            average_daily_usage=0,
        )

    total_kwh = sum(r.consumption_kwh for r in readings)
    average_daily_usage = total_kwh / len(readings)

    peak = max(readings, key=lambda r: r.consumption_kwh)
    peak_day = peak.reading_date if peak.consumption_kwh > 0 else None

    logger.debug("project_annual_cost", readings=len(readings), average_daily_kwh=average_daily_usage)
    annual = calculate_energy_cost(
        average_daily_usage * 365, unit_rate_pence, standing_charge_pence, 365
    )
    return EnergyProjection(
        monthly_estimate=annual / 12,
        annual_estimate=annual,
        average_daily_usage=average_daily_usage,
        peak_usage_day=peak_day,
    )


def days_until_contract_end(end_date: Optional[date], today: Optional[date] = None) -> Optional[int]:
    if end_date is None:
        return None
    return (end_date - (today or date.today())).days


def calculate_bill_health_score(services: Iterable[TrackedService]) -> int:
    """
    0-100, how competitive the household's current deals are.

    Each service loses up to 25 points for the share of its annual
    cost that could be saved, and 10 more if switching is recommended.
    """
    score = Decimal("100")
    for service in services:
        annual_cost = service.monthly_cost * 12
        savings_percent = (
            service.estimated_savings_annual / annual_cost * 100
            if annual_cost > 0 else Decimal("0")
        )
        score -= min(MAX_DEDUCTION_PER_SERVICE, savings_percent)
        if service.last_recommendation == "switch":
            score -= SWITCH_RECOMMENDED_PENALTY

    return max(0, int(score.quantize(Decimal("1"), rounding=ROUND_HALF_UP)))


def health_score_label(score: int) -> str:
    if score >= 80:
        return "Excellent"
    if score >= 60:
        return "Good"
    if score >= 40:
        return "Fair"
    return "Needs Attention"


def comparison_url(site: str, service_type: str, postcode: Optional[str] = None) -> str:
    """Comparison site landing page; uSwitch energy accepts a postcode."""
    url = COMPARISON_URLS.get(site, {}).get(service_type, DEFAULT_COMPARISON_URL)
    if postcode and site == "uswitch" and service_type == "energy":
        url += f"?postcode={quote(postcode)}"
    return url


def _ics_timestamp(moment: datetime) -> str:
    return moment.strftime("%Y%m%dT%H%M%SZ")


def generate_ics_content(
    service_name: str,
    provider: str,
    end_date: date,
    reminder_days: int = 30,
    now: Optional[datetime] = None,
) -> str:
    """An iCalendar reminder `reminder_days` before the contract ends."""
    now = now or datetime.now(timezone.utc)
    reminder = datetime.combine(end_date - timedelta(days=reminder_days), time.min)

    lines = [
        "BEGIN:VCALENDAR",
        "VERSION:2.0",
        "PRODID:-//Lifehub//Cheaper Bills//EN",
        "BEGIN:VEVENT",
        f"UID:{uuid4()}@lifetracker",
        f"DTSTAMP:{_ics_timestamp(now)}",
        f"DTSTART:{_ics_timestamp(reminder)}",
        f"DTEND:{_ics_timestamp(reminder)}",
        f"SUMMARY:{service_name} contract ending soon - {provider}",
        (
            f"DESCRIPTION:Your {service_name} contract with {provider} ends on "
            f"{end_date:%d/%m/%Y}. Time to compare deals!"
        ),
        "END:VEVENT",
        "END:VCALENDAR",
    ]
    return "\r\n".join(lines)
