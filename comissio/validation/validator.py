"""
Commission Intake Validation

DESIGN DECISION: The derivation engine trusts its input. All checks on
what the user typed happen here, at the form boundary:
- Required text fields must be non-empty
- The total value must parse as a positive decimal
- The installment count must be one the form offers
- The sale date defaults to today

If anything fails, the engine is never invoked and the issues are
returned for the form to display.

IMPORTANT: Validation NEVER silently fixes values.
It reports them for the user to correct.
"""

import re
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Optional, Union

from comissio.config import get_settings
from comissio.models.commission import (
    CommissionInput,
    IntakeResult,
    ValidationIssue,
)
from comissio.utils.formatters import to_date

_BR_THOUSANDS = re.compile(r"^-?\d{1,3}(\.\d{3})+(,\d+)?$")

# Matches the CommissionInput field limits
MAX_TEXT_LENGTH = 200


def parse_amount(raw: Union[str, int, float, Decimal, None]) -> Optional[Decimal]:
    """
    Parse a user-entered amount.

    Accepts numbers, "1234.56", "1234,56" and "1.234,56".
    An optional "R$" prefix is ignored. Returns None if unparseable.
    """
    if raw is None:
        return None
    if isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float, Decimal)):
        text = str(raw)
    else:
        text = raw.strip().replace("R$", "").replace(" ", "").replace("\xa0", "")
        if not text:
            return None
        if _BR_THOUSANDS.match(text):
            text = text.replace(".", "").replace(",", ".")
        elif "," in text and "." not in text:
            text = text.replace(",", ".")
    try:
        value = Decimal(text)
    except InvalidOperation:
        return None
    if not value.is_finite():
        return None
    return value


class CommissionIntakeValidator:
    """
    Validates the raw new-commission form.
    """

    def __init__(
        self,
        allowed_installment_counts: Optional[list[int]] = None,
        max_value: Optional[float] = None,
    ):
        """
        Initialize validator.

        Args:
            allowed_installment_counts: Counts the form offers.
                    If None, read from settings.
            max_value: Upper bound for a single commission.
                    If None, read from settings.
        """
        if allowed_installment_counts is None or max_value is None:
            app_settings = get_settings().app
            if allowed_installment_counts is None:
                allowed_installment_counts = app_settings.installment_counts_list
            if max_value is None:
                max_value = app_settings.max_commission_value
        self._allowed_counts = list(allowed_installment_counts)
        self._max_value = Decimal(str(max_value))

    @property
    def allowed_installment_counts(self) -> list[int]:
        return list(self._allowed_counts)

    def validate(
        self,
        description: Optional[str],
        client_name: Optional[str],
        total_value: Union[str, int, float, Decimal, None],
        sale_date: Union[date, str, None] = None,
        installment_count: Union[int, str, None] = 1,
    ) -> IntakeResult:
        """
        Check a raw form submission.

        Returns an IntakeResult with a CommissionInput when every
        field is valid, otherwise with the list of issues.
        """
        issues: list[ValidationIssue] = []

        description = (description or "").strip()
        if not description:
            issues.append(ValidationIssue(
                field="description",
                issue_type="missing",
                message="Informe a descrição da venda",
            ))
        elif len(description) > MAX_TEXT_LENGTH:
            issues.append(ValidationIssue(
                field="description",
                issue_type="too_long",
                message=f"A descrição deve ter no máximo {MAX_TEXT_LENGTH} caracteres",
            ))

        client_name = (client_name or "").strip()
        if not client_name:
            issues.append(ValidationIssue(
                field="client_name",
                issue_type="missing",
                message="Informe o nome do cliente",
            ))
        elif len(client_name) > MAX_TEXT_LENGTH:
            issues.append(ValidationIssue(
                field="client_name",
                issue_type="too_long",
                message=f"O nome do cliente deve ter no máximo {MAX_TEXT_LENGTH} caracteres",
            ))

        amount = parse_amount(total_value)
        if amount is None:
            issues.append(ValidationIssue(
                field="total_value",
                issue_type="invalid_format",
                message="Valor total inválido",
            ))
        elif amount <= 0:
            issues.append(ValidationIssue(
                field="total_value",
                issue_type="invalid_value",
                message="O valor total deve ser maior que zero",
            ))
        elif amount > self._max_value:
            issues.append(ValidationIssue(
                field="total_value",
                issue_type="suspicious_value",
                message="Valor total acima do limite permitido",
            ))

        parsed_date: Optional[date] = None
        if sale_date is None or (isinstance(sale_date, str) and not sale_date.strip()):
            parsed_date = date.today()
        else:
            try:
                parsed_date = to_date(sale_date)
            except (AttributeError, TypeError, ValueError):
                issues.append(ValidationIssue(
                    field="date",
                    issue_type="invalid_format",
                    message="Data da venda inválida",
                ))

        count: Optional[int] = None
        try:
            count = int(installment_count)
        except (TypeError, ValueError):
            issues.append(ValidationIssue(
                field="installment_count",
                issue_type="invalid_format",
                message="Número de parcelas inválido",
            ))
        if count is not None and count not in self._allowed_counts:
            issues.append(ValidationIssue(
                field="installment_count",
                issue_type="not_allowed",
                message=(
                    "Número de parcelas deve ser um de: "
                    + ", ".join(str(n) for n in self._allowed_counts)
                ),
            ))

        if issues:
            return IntakeResult(issues=issues)

        return IntakeResult(
            commission=CommissionInput(
                description=description,
                client_name=client_name,
                total_value=amount,
                sale_date=parsed_date,
                installment_count=count,
            ),
        )

    def get_user_friendly_summary(self, result: IntakeResult) -> str:
        """One message listing what the user needs to fix."""
        if result.is_valid:
            return "Comissão pronta para lançamento."
        return "Corrija os campos: " + "; ".join(i.message for i in result.issues)
