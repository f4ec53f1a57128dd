"""Intake validation package."""

from comissio.validation.validator import CommissionIntakeValidator, parse_amount

__all__ = ["CommissionIntakeValidator", "parse_amount"]
