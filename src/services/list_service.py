"""Dynamic list controller for the record's variable-length sub-collections."""
import logging
from typing import Any, Callable, Dict, List, Optional

from src.models.accompanying_person import AccompanyingPerson
from src.models.choices import MAX_ACCOMPANYING_PERSONS, MAX_EXHIBITORS, MIN_EMERGENCY_CONTACTS
from src.models.emergency_contact import EmergencyContact
from src.models.exhibitor import Exhibitor
from src.models.form_state import FormState
from src.models.team_member import new_team_member
from src.utils.field_paths import get_value, join_path, set_value

logger = logging.getLogger(__name__)

ItemFactory = Callable[[int], Dict[str, Any]]


class DynamicList:
    """
    Append/remove/resize over one list inside ``FormState.values``.

    Every item gets a session key from ``FormState.allocate_key`` when it
    enters the list. Keys follow their item when later items shift and are
    never handed out again. Appending past ``max_items`` and removing below
    ``min_items`` are rejected without touching the record.
    """

    def __init__(self, path: str, factory: ItemFactory, min_items: int = 0, max_items: Optional[int] = None):
        self.path = path
        self.factory = factory
        self.min_items = min_items
        self.max_items = max_items

    def items(self, state: FormState) -> List[Dict[str, Any]]:
        """Return the live list, creating an empty one if the path is unset."""
        items = get_value(state.values, self.path)
        if not isinstance(items, list):
            items = []
            set_value(state.values, self.path, items)
        return items

    def keys(self, state: FormState) -> List[int]:
        """Session keys in list order; items without one get a key now."""
        items = self.items(state)
        keys = state.item_keys.setdefault(self.path, [])
        while len(keys) < len(items):
            index = len(keys)
            keys.append(state.allocate_key())
            register_nested_keys(state, join_path(self.path, index), items[index])
        del keys[len(items):]
        return keys

    def can_append(self, state: FormState) -> bool:
        return self.max_items is None or len(self.items(state)) < self.max_items

    def can_remove(self, state: FormState) -> bool:
        return len(self.items(state)) > self.min_items

    def append(self, state: FormState, item: Optional[Dict[str, Any]] = None) -> bool:
        """
        Add one item at the end.

        Args:
            state: Form session
            item: Field values; the factory's defaults when None

        Returns:
            True if appended, False if the list is already at max_items
        """
        items = self.items(state)
        keys = self.keys(state)
        if not self.can_append(state):
            logger.debug(f"Append rejected for {self.path}: already {len(items)} items")
            return False

        index = len(items)
        items.append(item if item is not None else self.factory(index))
        keys.append(state.allocate_key())
        register_nested_keys(state, join_path(self.path, index), items[index])
        return True

    def remove(self, state: FormState, index: int) -> bool:
        """
        Remove the item at index; later items shift down one place.

        Returns:
            False if index is out of range or the list is at min_items
        """
        items = self.items(state)
        keys = self.keys(state)
        if index < 0 or index >= len(items):
            return False
        if not self.can_remove(state):
            logger.debug(f"Remove rejected for {self.path}: minimum is {self.min_items}")
            return False

        items.pop(index)
        keys.pop(index)
        _shift_nested_keys(state, self.path, index)
        return True

    def resize(self, state: FormState, target: int) -> int:
        """
        Grow the list to target items; never shrinks.

        Returns:
            Number of items appended (0 when target <= current length)
        """
        appended = 0
        while len(self.items(state)) < target:
            if not self.append(state):
                break
            appended += 1
        return appended

    def resize_on_change(self, state: FormState, controlling_value: Any) -> int:
        """
        Resize once per observed change of the value that drives the length.

        Args:
            state: Form session
            controlling_value: e.g. teamSize; ignored until it parses as an int

        Returns:
            Number of items appended
        """
        if controlling_value is None or str(controlling_value).strip() == "":
            return 0
        try:
            target = int(controlling_value)
        except (TypeError, ValueError):
            return 0

        observed = str(controlling_value)
        if state.observed_sizes.get(self.path) == observed:
            return 0
        state.observed_sizes[self.path] = observed
        return self.resize(state, target)


def register_nested_keys(state: FormState, item_path: str, item: Any) -> None:
    """Allocate keys for lists nested inside a newly tracked item."""
    if not isinstance(item, dict):
        return
    for name, value in item.items():
        if isinstance(value, list) and all(isinstance(entry, dict) for entry in value):
            nested_path = join_path(item_path, name)
            state.item_keys[nested_path] = []
            for index, entry in enumerate(value):
                state.item_keys[nested_path].append(state.allocate_key())
                register_nested_keys(state, join_path(nested_path, index), entry)


def _shift_nested_keys(state: FormState, list_path: str, removed_index: int) -> None:
    """Re-address nested list keys after an item was removed from list_path."""
    prefix = list_path + "."
    shifted: Dict[str, List[int]] = {}
    for path, keys in state.item_keys.items():
        if not path.startswith(prefix):
            shifted[path] = keys
            continue
        head, _, rest = path[len(prefix):].partition(".")
        if not head.isdigit() or not rest:
            shifted[path] = keys
            continue
        index = int(head)
        if index == removed_index:
            continue
        if index > removed_index:
            index -= 1
        shifted[f"{prefix}{index}.{rest}"] = keys
    state.item_keys = shifted


def team_members_list(with_attachments: bool = False) -> DynamicList:
    return DynamicList(
        "teamMembers",
        lambda index: new_team_member(index, with_attachments).to_dict(),
        min_items=1,
    )


def emergency_contacts_list(member_index: int, max_items: int) -> DynamicList:
    return DynamicList(
        join_path("teamMembers", member_index, "emergencyContacts"),
        lambda index: EmergencyContact().to_dict(),
        min_items=MIN_EMERGENCY_CONTACTS,
        max_items=max_items,
    )


def accompanying_persons_list() -> DynamicList:
    return DynamicList(
        "accompanyingPersons",
        lambda index: AccompanyingPerson().to_dict(),
        max_items=MAX_ACCOMPANYING_PERSONS,
    )


def exhibitors_list() -> DynamicList:
    return DynamicList(
        "exhibitors",
        lambda index: Exhibitor().to_dict(),
        max_items=MAX_EXHIBITORS,
    )


def assign_item_keys(state: FormState) -> None:
    """Give keys to every item of a record that arrived from the server."""
    for path in ("teamMembers", "accompanyingPersons", "exhibitors"):
        items = get_value(state.values, path)
        if not isinstance(items, list):
            continue
        state.item_keys[path] = []
        for index, item in enumerate(items):
            state.item_keys[path].append(state.allocate_key())
            register_nested_keys(state, join_path(path, index), item)
