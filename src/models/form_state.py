"""Form state model: the single context object one wizard session owns."""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from src.models.registration import empty_record_values

FLOW_CREATE = "create"
FLOW_EDIT = "edit"

PHASE_READY = "ready"
PHASE_LOADING = "loading"
PHASE_NOT_FOUND = "not_found"
PHASE_SUBMITTING = "submitting"
PHASE_SUBMITTED = "submitted"

BUSY_PHASES = (PHASE_LOADING, PHASE_SUBMITTING)


@dataclass
class FormState:
    """
    In-progress registration for one browser session.

    ``values`` holds the record in wire shape. ``item_keys`` maps each list
    path ("teamMembers", "teamMembers.0.emergencyContacts", ...) to the
    session keys of its items, in the same order as the list. Keys come from
    ``next_item_key`` and are never reused.
    """

    flow: str = FLOW_CREATE
    values: Dict[str, Any] = field(default_factory=empty_record_values)
    step: int = 1
    phase: str = PHASE_READY
    secret: Optional[str] = None
    errors: Dict[str, str] = field(default_factory=dict)
    item_keys: Dict[str, List[int]] = field(default_factory=dict)
    next_item_key: int = 1
    observed_sizes: Dict[str, str] = field(default_factory=dict)
    scroll_to_top: bool = False
    submit_error: bool = False
    submit_message: str = ""
    with_attachments: bool = False

    def allocate_key(self) -> int:
        """Hand out the next session-local item key."""
        key = self.next_item_key
        self.next_item_key += 1
        return key

    @property
    def is_edit(self) -> bool:
        return self.flow == FLOW_EDIT

    @property
    def is_busy(self) -> bool:
        """True while a fetch or submit is in flight."""
        return self.phase in BUSY_PHASES
