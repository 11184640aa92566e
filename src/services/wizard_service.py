"""Wizard state machine: step gating and loading/submission phases."""
import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from src.models.form_state import (
    PHASE_LOADING,
    PHASE_NOT_FOUND,
    PHASE_READY,
    PHASE_SUBMITTED,
    PHASE_SUBMITTING,
    FormState,
)
from src.utils.exceptions import InvalidTransitionError

logger = logging.getLogger(__name__)

# Receives the field prefixes of a step, returns {path: message}.
StepValidator = Callable[[Sequence[str]], Dict[str, str]]


@dataclass(frozen=True)
class WizardStep:
    """One screen of the wizard and the record fields it edits."""

    key: str
    title: str
    fields: Tuple[str, ...] = ()
    requires_validation: bool = True
    is_final: bool = False


REGISTRATION_STEPS: Tuple[WizardStep, ...] = (
    WizardStep("welcome", "歡迎參加 HackIT！", requires_validation=False),
    WizardStep("team", "請選擇參賽團隊人數", fields=("teamName", "teamSize")),
    WizardStep("members", "參賽團隊成員資料", fields=("teamMembers",)),
    WizardStep("companions", "陪伴人（家人、老師、教授）最多兩個，可省略", fields=("accompanyingPersons",)),
    WizardStep("exhibitors", "參展人資訊（需填寫姓名和 Email）", fields=("exhibitors",)),
    WizardStep("submit", "確認並送出表單", requires_validation=False, is_final=True),
)


class Wizard:
    """
    Linear wizard over a fixed step sequence.

    The wizard stores nothing itself: the current step and phase live on the
    ``FormState`` and the record is only read through the validator callback.
    Steps are numbered from 1.
    """

    def __init__(self, steps: Sequence[WizardStep] = REGISTRATION_STEPS):
        if not steps:
            raise ValueError("Wizard needs at least one step")
        if not steps[-1].is_final:
            raise ValueError("Last wizard step must be final")
        self.steps: List[WizardStep] = list(steps)

    @property
    def step_count(self) -> int:
        return len(self.steps)

    def current(self, state: FormState) -> WizardStep:
        return self.steps[self._clamp(state.step) - 1]

    def step_index(self, key: str) -> int:
        """1-based position of a step by key."""
        for position, step in enumerate(self.steps, start=1):
            if step.key == key:
                return position
        raise KeyError(f"Unknown wizard step: {key}")

    def is_final(self, state: FormState) -> bool:
        return self.current(state).is_final

    def can_navigate(self, state: FormState) -> bool:
        """Navigation is only allowed while no fetch/submit is in flight."""
        return state.phase == PHASE_READY

    def next(self, state: FormState, validate: StepValidator) -> Tuple[bool, Dict[str, str]]:
        """
        Advance one step if the current step's fields validate.

        Args:
            state: Form session
            validate: Callback validating the given field prefixes

        Returns:
            Tuple of (advanced: bool, errors: dict)
            - (True, {}) and step incremented, scroll flag raised
            - (False, errors) if the step's fields are invalid
            - (False, {}) on the final step or while busy
        """
        if not self.can_navigate(state):
            logger.debug(f"next() ignored in phase {state.phase}")
            return False, {}

        step = self.current(state)
        if step.is_final:
            return False, {}

        errors: Dict[str, str] = {}
        if step.requires_validation and step.fields:
            errors = validate(step.fields)
        if errors:
            return False, errors

        state.step = self._clamp(state.step) + 1
        state.scroll_to_top = True
        return True, {}

    def prev(self, state: FormState) -> bool:
        """
        Go back one step without validating or clearing anything.

        Returns:
            False on the first step or while busy
        """
        if not self.can_navigate(state):
            return False
        current = self._clamp(state.step)
        if current <= 1:
            return False
        state.step = current - 1
        state.scroll_to_top = True
        return True

    def begin_loading(self, state: FormState) -> None:
        """Enter the pre-initial loading phase (edit flow)."""
        if state.phase != PHASE_READY or state.step != 1:
            raise InvalidTransitionError(f"Cannot start loading from phase {state.phase}, step {state.step}")
        state.phase = PHASE_LOADING

    def finish_loading(self, state: FormState, found: bool) -> None:
        """
        Leave the loading phase.

        Args:
            found: True moves to step 1, False to the terminal not-found phase

        Raises:
            InvalidTransitionError: If the state isn't loading
        """
        if state.phase != PHASE_LOADING:
            raise InvalidTransitionError(f"Cannot finish loading from phase {state.phase}")
        state.step = 1
        state.phase = PHASE_READY if found else PHASE_NOT_FOUND

    def begin_submit(self, state: FormState) -> bool:
        """Lock the form for submission; False if not on the final step or busy."""
        if state.phase != PHASE_READY or not self.is_final(state):
            return False
        state.phase = PHASE_SUBMITTING
        return True

    def finish_submit(self, state: FormState, success: bool) -> None:
        """Unlock after submission; success is terminal, failure re-enables submit."""
        if state.phase != PHASE_SUBMITTING:
            raise InvalidTransitionError(f"Cannot finish submit from phase {state.phase}")
        state.phase = PHASE_SUBMITTED if success else PHASE_READY

    def first_invalid_step(self, validate: StepValidator) -> Optional[int]:
        """1-based index of the first step whose fields don't validate, if any."""
        for position, step in enumerate(self.steps, start=1):
            if step.requires_validation and step.fields and validate(step.fields):
                return position
        return None

    def _clamp(self, step: int) -> int:
        return min(max(step, 1), len(self.steps))
