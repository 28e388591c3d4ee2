"""Data models for the program pricing engine."""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum

from program_pricing.money import ZERO, clamp_non_negative, to_decimal

logger = logging.getLogger(__name__)

# Card network processing cost, charged on every card transaction
CARD_FEE_PERCENT = Decimal("0.029")
CARD_FEE_FIXED = Decimal("0.30")

# Plan lengths offered for prepaid multi-month plans
ALLOWED_PLAN_MONTHS = (2, 3, 4, 6, 9, 12)


class PlanVariant(str, Enum):
    """Which billing cycle a breakdown describes."""

    STANDARD = "STANDARD"
    MONTH_1 = "MONTH_1"
    MULTI_MONTH = "MULTI_MONTH"


class CardFeeMode(str, Enum):
    """How the card fee is charged for a billing cycle."""

    PER_PERIOD = "PER_PERIOD"  # One charge per month, rounded to cents
    AMORTIZED = "AMORTIZED"  # One upfront charge spread across the plan


@dataclass(frozen=True)
class ProductCost:
    """Cost-of-goods breakdown for one sellable product.

    Costs are stored as non-negative Decimals; negative, missing or
    unparseable amounts become zero.

    Attributes:
        product_cost: Medication/material cost per month.
        shipping_cost: Shipping cost per month.
        telehealth_cost: Consult cost, charged only in month 1.
        product_id: Catalog identifier (optional).
        name: Product display name (optional).
    """

    product_cost: Decimal
    shipping_cost: Decimal = Decimal("0")
    telehealth_cost: Decimal = Decimal("0")
    product_id: str | None = None
    name: str | None = None

    def __post_init__(self) -> None:
        for cost_field in ("product_cost", "shipping_cost", "telehealth_cost"):
            raw = getattr(self, cost_field)
            cost = clamp_non_negative(raw)
            if cost != raw:
                logger.debug(f"{self.product_id}: {cost_field} {raw!r} treated as ${cost}")
            object.__setattr__(self, cost_field, cost)

    @property
    def total_cogs(self) -> Decimal:
        """Monthly COGS. Telehealth is a one-time cost and is excluded."""
        return self.product_cost + self.shipping_cost


@dataclass(frozen=True)
class FeeConfig:
    """Tenant fee percentages, as fractions in [0, 1].

    Attributes:
        platform_fee_percent: Share of the non-medical fee kept by the platform.
        merchant_service_fee_percent: Tenant payment-processing surcharge.
    """

    platform_fee_percent: Decimal
    merchant_service_fee_percent: Decimal

    @property
    def card_fee_percent(self) -> Decimal:
        return CARD_FEE_PERCENT

    @property
    def card_fee_fixed(self) -> Decimal:
        return CARD_FEE_FIXED


@dataclass(frozen=True)
class MultiMonthPlan:
    """A prepaid plan billed once upfront for ``months`` months."""

    months: int
    discount_percent: Decimal = Decimal("0")


@dataclass
class NonMedicalServices:
    """Non-medical services a brand bundles into its fee.

    Only enabled services contribute to the total.
    """

    has_patient_portal: bool = False
    patient_portal_price: Decimal = Decimal("0")
    has_bmi_calculator: bool = False
    bmi_calculator_price: Decimal = Decimal("0")
    has_protein_intake_calculator: bool = False
    protein_intake_calculator_price: Decimal = Decimal("0")
    has_calorie_deficit_calculator: bool = False
    calorie_deficit_calculator_price: Decimal = Decimal("0")
    has_easy_shopping: bool = False
    easy_shopping_price: Decimal = Decimal("0")

    @property
    def total(self) -> Decimal:
        """Sum of the prices of enabled services."""
        pairs = [
            (self.has_patient_portal, self.patient_portal_price),
            (self.has_bmi_calculator, self.bmi_calculator_price),
            (self.has_protein_intake_calculator, self.protein_intake_calculator_price),
            (self.has_calorie_deficit_calculator, self.calorie_deficit_calculator_price),
            (self.has_easy_shopping, self.easy_shopping_price),
        ]
        return sum(
            (clamp_non_negative(price) for enabled, price in pairs if enabled),
            ZERO,
        )

    @classmethod
    def from_persisted_dict(cls, data: dict[str, object]) -> "NonMedicalServices":
        """Build from a stored program template.

        Args:
            data: Payload with ``hasPatientPortal`` / ``patientPortalPrice``
                style flag and price keys. Missing keys mean disabled, $0.

        Returns:
            NonMedicalServices instance.
        """
        return cls(
            has_patient_portal=bool(data.get("hasPatientPortal")),
            patient_portal_price=clamp_non_negative(data.get("patientPortalPrice")),
            has_bmi_calculator=bool(data.get("hasBmiCalculator")),
            bmi_calculator_price=clamp_non_negative(data.get("bmiCalculatorPrice")),
            has_protein_intake_calculator=bool(data.get("hasProteinIntakeCalculator")),
            protein_intake_calculator_price=clamp_non_negative(
                data.get("proteinIntakeCalculatorPrice")
            ),
            has_calorie_deficit_calculator=bool(data.get("hasCalorieDeficitCalculator")),
            calorie_deficit_calculator_price=clamp_non_negative(
                data.get("calorieDeficitCalculatorPrice")
            ),
            has_easy_shopping=bool(data.get("hasEasyShopping")),
            easy_shopping_price=clamp_non_negative(data.get("easyShoppingPrice")),
        )


@dataclass
class PricingInput:
    """Editable pricing state for one product.

    Attributes:
        non_medical_fee: Fee the brand charges on top of COGS.
        monthly_discount_percent: Month-1-only discount, in percent (10 = 10%).
        multi_month_plans: Prepay plans, each with its own discount.
    """

    non_medical_fee: Decimal
    monthly_discount_percent: Decimal = Decimal("0")
    multi_month_plans: list[MultiMonthPlan] = field(default_factory=list)

    # Always true: the standard discount only ever applies to the first month
    MONTHLY_DISCOUNT_MONTH1_ONLY = True

    @classmethod
    def from_services(
        cls,
        services: NonMedicalServices,
        monthly_discount_percent: Decimal = ZERO,
        multi_month_plans: list[MultiMonthPlan] | None = None,
    ) -> "PricingInput":
        """Price a program whose fee is the sum of its enabled services."""
        return cls(
            non_medical_fee=services.total,
            monthly_discount_percent=monthly_discount_percent,
            multi_month_plans=list(multi_month_plans or []),
        )

    def to_persisted_dict(self) -> dict[str, object]:
        """Convert to the shape accepted by the program persistence sink.

        Plans with a non-positive length are dropped.

        Returns:
            Dictionary with camelCase keys and float amounts.
        """
        return {
            "nonMedicalServiceFee": float(self.non_medical_fee),
            "monthlyDiscountPercent": float(self.monthly_discount_percent),
            "monthlyDiscountMonth1Only": self.MONTHLY_DISCOUNT_MONTH1_ONLY,
            "multiMonthPlans": [
                {"months": plan.months, "discountPercent": float(plan.discount_percent)}
                for plan in self.multi_month_plans
                if plan.months > 0
            ],
        }

    @classmethod
    def from_persisted_dict(cls, data: dict[str, object]) -> "PricingInput":
        """Build from a stored program payload.

        Missing, negative or unparseable amounts are treated as zero. Plans
        whose length is not a positive whole number of months are dropped.
        Discounts are not clamped here; the engine clamps them against the
        current fees.

        A program template that stores its services instead of a fee is
        priced at the total of its enabled services.

        Args:
            data: Payload with ``nonMedicalServiceFee``,
                ``monthlyDiscountPercent`` and ``multiMonthPlans`` keys.

        Returns:
            PricingInput instance.
        """
        plans = []
        for raw in data.get("multiMonthPlans") or []:  # type: ignore[union-attr]
            months = _plan_months(raw.get("months"))
            if months is None:
                logger.warning(f"Dropping stored plan with length {raw.get('months')!r}")
                continue
            plans.append(
                MultiMonthPlan(
                    months=months,
                    discount_percent=clamp_non_negative(raw.get("discountPercent")),
                )
            )

        if data.get("nonMedicalServiceFee") is None:
            fee = NonMedicalServices.from_persisted_dict(data).total
        else:
            fee = clamp_non_negative(data.get("nonMedicalServiceFee"))

        return cls(
            non_medical_fee=fee,
            monthly_discount_percent=clamp_non_negative(data.get("monthlyDiscountPercent")),
            multi_month_plans=plans,
        )


@dataclass(frozen=True)
class Deductions:
    """Itemized deductions taken from what the customer pays.

    Attributes:
        cogs: Product plus shipping cost.
        telehealth_month1: Consult cost (month 1 only, otherwise zero).
        card_fee: Card network processing fee.
        merchant_fee: Tenant merchant service fee.
        platform_fee: Platform share of the non-medical fee.
    """

    cogs: Decimal
    telehealth_month1: Decimal
    card_fee: Decimal
    merchant_fee: Decimal
    platform_fee: Decimal

    @property
    def total(self) -> Decimal:
        return sum((amount for _, amount in self.items()), Decimal("0"))

    def items(self) -> list[tuple[str, Decimal]]:
        """Deductions in the order they are shown to a user."""
        return [
            ("cogs", self.cogs),
            ("telehealth_month1", self.telehealth_month1),
            ("card_fee", self.card_fee),
            ("merchant_fee", self.merchant_fee),
            ("platform_fee", self.platform_fee),
        ]


@dataclass(frozen=True)
class PricingBreakdown:
    """Computed figures for one billing variant.

    For multi-month plans ``deductions`` and ``profit`` are per month while
    ``customer_pays_total`` is the single upfront charge.

    Attributes:
        variant: Which billing cycle this describes.
        customer_pays_total: Amount charged to the patient for the cycle.
        deductions: Itemized deductions.
        profit: Net to the brand, floored at zero.
        months: Number of months covered by the charge.
        discount_percent: Effective (clamped) discount in percent.
        month1_profit: Standard variant only; profit after telehealth.
        profit_total: Profit across all covered months.
    """

    variant: PlanVariant
    customer_pays_total: Decimal
    deductions: Deductions
    profit: Decimal
    months: int = 1
    discount_percent: Decimal = Decimal("0")
    month1_profit: Decimal | None = None
    profit_total: Decimal = Decimal("0")

    @property
    def customer_pays_per_month(self) -> Decimal:
        if self.months <= 1:
            return self.customer_pays_total
        return self.customer_pays_total / self.months


@dataclass(frozen=True)
class ProgramPricing:
    """Full pricing analysis for one product.

    Attributes:
        product: Product the analysis was run for.
        fees: Fee configuration used.
        max_discount_percent: Largest discount that keeps month 1 profitable.
        effective_monthly_discount: Month-1 discount after clamping.
        standard: Ongoing monthly breakdown.
        month1: Discounted month-1 breakdown, None if no discount is active.
        plans: One breakdown per multi-month plan, in input order.
    """

    product: ProductCost
    fees: FeeConfig
    max_discount_percent: Decimal
    effective_monthly_discount: Decimal
    standard: PricingBreakdown
    month1: PricingBreakdown | None = None
    plans: tuple[PricingBreakdown, ...] = ()

    @property
    def month1_profit(self) -> Decimal:
        """Profit for the first month, discounted or not."""
        if self.month1 is not None:
            return self.month1.profit
        assert self.standard.month1_profit is not None
        return self.standard.month1_profit

    def price_label(self) -> str:
        """Patient-facing price text.

        Shows "$X mo 1 / $Y/mo after" when a month-1 discount is active.
        """
        monthly = f"${self.standard.customer_pays_total:,.2f}"
        if self.month1 is None:
            return f"{monthly}/mo"
        return f"${self.month1.customer_pays_total:,.2f} mo 1 / {monthly}/mo after"

    def to_display_dict(self) -> dict[str, object]:
        """Convert to dictionary for display.

        Returns:
            Dictionary with all figures as floats.
        """
        return {
            "product_id": self.product.product_id,
            "name": self.product.name,
            "price_label": self.price_label(),
            "customer_pays_monthly": float(self.standard.customer_pays_total),
            "customer_pays_month1": (
                float(self.month1.customer_pays_total) if self.month1 else None
            ),
            "max_discount_percent": float(self.max_discount_percent),
            "monthly_discount_percent": float(self.effective_monthly_discount),
            "profit_monthly": float(self.standard.profit),
            "profit_month1": float(self.month1_profit),
            "deductions": {
                name: float(amount) for name, amount in self.standard.deductions.items()
            },
            "plans": [
                {
                    "months": plan.months,
                    "discount_percent": float(plan.discount_percent),
                    "customer_pays_upfront": float(plan.customer_pays_total),
                    "profit_per_month": float(plan.profit),
                    "profit_total": float(plan.profit_total),
                }
                for plan in self.plans
            ],
        }


def _plan_months(value: object) -> int | None:
    """Parse a stored plan length; None unless it is a positive whole number."""
    months = to_decimal(value)
    if months <= 0 or months != months.to_integral_value():
        return None
    return int(months)
