"""
Mandatory rule use cases

Rules belong to the user, not to a month. Deactivating a rule removes it
from the mandatory total and from future rollover accruals without deleting
its history.
"""
from decimal import Decimal

from budgetly.application.common import parse_amount, parse_name
from budgetly.application.errors import LedgerValidationError
from budgetly.domain.mandatory_rule import MandatoryRule
from budgetly.infrastructure.store import LedgerStore, MANDATORY_RULES


class RuleValidationError(LedgerValidationError):
    """Invalid mandatory rule input"""
    pass


def get_active_rules(store: LedgerStore, user_id: str) -> list[MandatoryRule]:
    records = store.query(MANDATORY_RULES, [("user_id", user_id), ("is_active", True)])
    return _sorted([MandatoryRule.from_record(r) for r in records])


def get_all_rules(store: LedgerStore, user_id: str) -> list[MandatoryRule]:
    records = store.query(MANDATORY_RULES, [("user_id", user_id)])
    return _sorted([MandatoryRule.from_record(r) for r in records])


def get_total_mandatory_amount(store: LedgerStore, user_id: str) -> Decimal:
    """Sum of active rule amounts"""
    return sum((rule.amount for rule in get_active_rules(store, user_id)), Decimal("0"))


def _sorted(rules: list[MandatoryRule]) -> list[MandatoryRule]:
    # Oldest first, as entered during setup
    return sorted(rules, key=lambda r: (r.created_at is None, r.created_at or 0, r.name))


class CreateMandatoryRuleUseCase:
    """Use case: create a mandatory rule (active from the start)"""

    def __init__(self, store: LedgerStore):
        self.store = store

    def execute(self, user_id: str, name: str, amount) -> str:
        """
        Args:
            user_id: Owner
            name: Rule name, e.g. "Rent"
            amount: Monthly amount (positive)

        Returns:
            rule_id
        """
        name = parse_name(name, RuleValidationError, "Rule name")
        amount = parse_amount(amount, RuleValidationError)
        return self.store.create(MANDATORY_RULES, MandatoryRule.create(user_id, name, amount))


class UpdateMandatoryRuleUseCase:
    """Use case: rename, change the amount of, or (de)activate a rule"""

    def __init__(self, store: LedgerStore):
        self.store = store

    def execute(
        self,
        rule_id: str,
        name: str | None = None,
        amount=None,
        is_active: bool | None = None,
    ) -> None:
        if name is not None:
            name = parse_name(name, RuleValidationError, "Rule name")
        if amount is not None:
            amount = parse_amount(amount, RuleValidationError)

        changes = MandatoryRule.update(name=name, amount=amount, is_active=is_active)
        if not changes:
            raise RuleValidationError("Nothing to update")
        self.store.update(MANDATORY_RULES, rule_id, changes)


class DeleteMandatoryRuleUseCase:
    """Use case: delete a rule (savings already accrued from it stay)"""

    def __init__(self, store: LedgerStore):
        self.store = store

    def execute(self, rule_id: str) -> None:
        self.store.delete(MANDATORY_RULES, rule_id)
