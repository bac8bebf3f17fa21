"""Three-step checkout wizard: inspection details, inventory checklist, financial summary.

The wizard holds the form state an inspector fills in, enforces the gate on
each step, and hands the finished form to a submit coroutine (normally
``checkout_service.complete_checkout`` bound to a session). It performs no
I/O of its own.

Example::

    wizard = CheckoutWizard(booking.id, booking.guest_id, assignments)
    wizard.inspector = "Jane Doe"
    wizard.next()
    for entry in wizard.entries:
        wizard.inspect(entry.assignment_id, ItemCondition.GOOD)
    wizard.next()
    report = await wizard.submit(lambda data: complete_checkout(db, data))
"""

import logging
import uuid
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import InitVar, dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum, IntEnum
from typing import Any

from pydantic import ValidationError

from rentdesk.models.enums import ItemCondition
from rentdesk.schemas.checkout import CheckoutCreate, CheckoutItemCreate
from rentdesk.schemas.inventory import AssignmentView
from rentdesk.services.exceptions import ServiceError

logger = logging.getLogger(__name__)

INSPECTOR_MIN_LENGTH = 3
INSPECTOR_MAX_LENGTH = 100


class WizardStep(IntEnum):
    INSPECTION_DETAILS = 1
    INVENTORY_CHECKLIST = 2
    FINANCIAL_SUMMARY = 3


class SubmissionState(str, Enum):
    NOT_SUBMITTED = "not_submitted"
    SUBMITTED_SUCCESS = "submitted_success"
    SUBMITTED_ERROR = "submitted_error"


class WizardValidationError(Exception):
    """A step gate failed; ``messages`` lists every problem found."""

    def __init__(self, messages: list[str]) -> None:
        self.messages = messages
        super().__init__("; ".join(messages))


@dataclass
class ChecklistEntry:
    """Inspection state of one assignment on the checklist."""

    assignment_id: uuid.UUID
    item_name: str
    category: str = ""
    checked: bool = False
    condition: ItemCondition = ItemCondition.GOOD
    damage_cost: Decimal = Decimal("0")
    notes: str = ""

    @property
    def needs_damage_cost(self) -> bool:
        return self.condition != ItemCondition.GOOD and self.damage_cost <= 0


@dataclass
class ChecklistSummary:
    checked: int
    total: int
    good: int
    damaged: int
    missing: int
    total_damage_cost: Decimal


@dataclass
class CheckoutWizard:
    """Form state and step machine for checking one booking out."""

    booking_id: uuid.UUID
    guest_id: uuid.UUID
    assignments: InitVar[Iterable[AssignmentView]] = ()
    checkout_date: date | None = field(default_factory=date.today)
    inspector: str = ""
    notes: str = ""
    deposit_deduction: Decimal = Decimal("0")

    step: WizardStep = field(default=WizardStep.INSPECTION_DETAILS, init=False)
    submission: SubmissionState = field(default=SubmissionState.NOT_SUBMITTED, init=False)
    error: str | None = field(default=None, init=False)
    entries: list[ChecklistEntry] = field(default_factory=list, init=False)

    def __post_init__(self, assignments: Iterable[AssignmentView]) -> None:
        self.entries = [
            ChecklistEntry(
                assignment_id=assignment.id,
                item_name=assignment.item_name,
                category=assignment.category,
            )
            for assignment in assignments
        ]

    # ------------------------------------------------------------------
    # Checklist editing
    # ------------------------------------------------------------------

    def entry(self, assignment_id: uuid.UUID) -> ChecklistEntry:
        for entry in self.entries:
            if entry.assignment_id == assignment_id:
                return entry
        raise KeyError(assignment_id)

    def set_condition(self, assignment_id: uuid.UUID, condition: ItemCondition) -> None:
        """Change an entry's condition. Back to good clears its damage cost."""
        entry = self.entry(assignment_id)
        entry.condition = ItemCondition(condition)
        if entry.condition == ItemCondition.GOOD:
            entry.damage_cost = Decimal("0")

    def inspect(
        self,
        assignment_id: uuid.UUID,
        condition: ItemCondition = ItemCondition.GOOD,
        damage_cost: Decimal | int | str = 0,
        notes: str = "",
    ) -> ChecklistEntry:
        """Mark an entry checked with its condition, cost and notes in one call."""
        entry = self.entry(assignment_id)
        entry.checked = True
        self.set_condition(assignment_id, condition)
        if entry.condition != ItemCondition.GOOD:
            entry.damage_cost = Decimal(str(damage_cost))
        entry.notes = notes
        return entry

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------

    @property
    def checked_entries(self) -> list[ChecklistEntry]:
        return [entry for entry in self.entries if entry.checked]

    @property
    def summary(self) -> ChecklistSummary:
        checked = self.checked_entries
        return ChecklistSummary(
            checked=len(checked),
            total=len(self.entries),
            good=sum(1 for e in checked if e.condition == ItemCondition.GOOD),
            damaged=sum(1 for e in checked if e.condition == ItemCondition.DAMAGED),
            missing=sum(1 for e in checked if e.condition == ItemCondition.MISSING),
            total_damage_cost=self.total_damage_cost,
        )

    @property
    def total_damage_cost(self) -> Decimal:
        return sum((e.damage_cost for e in self.checked_entries), Decimal("0"))

    @property
    def deposit_exceeds_damage(self) -> bool:
        """Advisory only; a deduction above the damage total is still submitted."""
        return Decimal(str(self.deposit_deduction)) > self.total_damage_cost

    # ------------------------------------------------------------------
    # Step gates
    # ------------------------------------------------------------------

    def _inspection_details_errors(self) -> list[str]:
        errors = []
        if self.checkout_date is None:
            errors.append("Checkout date is required")
        inspector = self.inspector.strip()
        if len(inspector) < INSPECTOR_MIN_LENGTH:
            errors.append(f"Inspector name must be at least {INSPECTOR_MIN_LENGTH} characters")
        elif len(inspector) > INSPECTOR_MAX_LENGTH:
            errors.append("Inspector name is too long")
        return errors

    def _checklist_errors(self) -> list[str]:
        errors = []
        unchecked = [e for e in self.entries if not e.checked]
        if unchecked:
            errors.append("All items must be inspected before proceeding.")
        for entry in self.entries:
            if entry.checked and entry.needs_damage_cost:
                errors.append(f"Please enter a damage cost for {entry.condition.value} item {entry.item_name}.")
        return errors

    def _ensure_open(self) -> None:
        if self.submission == SubmissionState.SUBMITTED_SUCCESS:
            raise WizardValidationError(["Checkout has already been submitted"])

    def next(self) -> WizardStep:
        """Advance one step if the current step's gate passes."""
        self._ensure_open()
        match self.step:
            case WizardStep.INSPECTION_DETAILS:
                errors = self._inspection_details_errors()
            case WizardStep.INVENTORY_CHECKLIST:
                errors = self._checklist_errors()
            case WizardStep.FINANCIAL_SUMMARY:
                errors = ["Already at the final step; submit the checkout"]
        if errors:
            raise WizardValidationError(errors)
        self.step = WizardStep(self.step + 1)
        return self.step

    def back(self) -> WizardStep:
        self._ensure_open()
        if self.step == WizardStep.INSPECTION_DETAILS:
            raise WizardValidationError(["Already at the first step"])
        self.step = WizardStep(self.step - 1)
        return self.step

    # ------------------------------------------------------------------
    # Submission
    # ------------------------------------------------------------------

    def build_payload(self) -> CheckoutCreate:
        """Assemble the checkout input from the checked entries only."""
        try:
            return CheckoutCreate(
                booking_id=self.booking_id,
                guest_id=self.guest_id,
                checkout_date=self.checkout_date,
                inspector=self.inspector,
                deposit_deduction=self.deposit_deduction,
                notes=self.notes or None,
                checkout_items=[
                    CheckoutItemCreate(
                        assignment_id=entry.assignment_id,
                        condition=entry.condition,
                        damage_cost=entry.damage_cost,
                        notes=entry.notes or None,
                    )
                    for entry in self.checked_entries
                ],
            )
        except ValidationError as exc:
            raise WizardValidationError([error["msg"] for error in exc.errors()]) from None

    async def submit(self, complete: Callable[[CheckoutCreate], Awaitable[Any]]) -> Any:
        """Send the form to ``complete``.

        Returns whatever ``complete`` returns on success, leaving the wizard in
        ``SUBMITTED_SUCCESS``. A failure of ``complete`` leaves the wizard on
        the final step in ``SUBMITTED_ERROR`` with ``error`` set and returns
        None; the form may be corrected and submitted again. Anything other
        than a ``ServiceError`` propagates and leaves the submission state as is.
        """
        self._ensure_open()
        if self.step != WizardStep.FINANCIAL_SUMMARY:
            raise WizardValidationError(["Complete every step before submitting"])

        errors = self._inspection_details_errors() + self._checklist_errors()
        if errors:
            raise WizardValidationError(errors)
        payload = self.build_payload()

        try:
            result = await complete(payload)
        except ServiceError as exc:
            logger.warning("Checkout submission for booking %s failed: %s", self.booking_id, exc)
            self.submission = SubmissionState.SUBMITTED_ERROR
            self.error = str(exc)
            return None

        self.submission = SubmissionState.SUBMITTED_SUCCESS
        self.error = None
        return result
