"""Unit tests for leave balance bookkeeping."""

import pytest

from hr_portal.core.exceptions import BusinessRuleError
from hr_portal.core.models import Employee
from hr_portal.core.workflow.ledger import apply_approval, ensure_sufficient_balance


def test_approval_deducts_exact_duration() -> None:
    employee = Employee(leave_balance=10)
    assert apply_approval(employee, 3) == 7
    assert employee.leave_balance == 7


def test_approval_may_use_the_whole_balance() -> None:
    employee = Employee(leave_balance=3)
    apply_approval(employee, 3)
    assert employee.leave_balance == 0


def test_approval_that_would_underflow_is_rejected() -> None:
    employee = Employee(leave_balance=2)
    with pytest.raises(BusinessRuleError) as exc:
        apply_approval(employee, 3)
    assert exc.value.message == "Insufficient leave balance to approve this request. Available: 2 days."
    assert employee.leave_balance == 2


def test_ensure_sufficient_balance_uses_given_message() -> None:
    with pytest.raises(BusinessRuleError, match="custom"):
        ensure_sufficient_balance(Employee(leave_balance=0), 1, "custom")
    ensure_sufficient_balance(Employee(leave_balance=1), 1, "unused")
