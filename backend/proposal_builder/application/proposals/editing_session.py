"""
Session-scoped editing state around the document engine.

The engine is stateless; everything the editor remembers between actions
(current blocks, the copied element style, the element being dragged and
the current drop target) lives here and is handed to the engine as plain
arguments.
"""
import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from proposal_builder.domain.document import engine
from proposal_builder.domain.document.blocks import Block
from proposal_builder.domain.document.elements import ElementType
from proposal_builder.domain.document.hydration import SavePlan, flatten, hydrate
from proposal_builder.domain.invariants.document import assert_document

from .section_store import SectionStore

logger = logging.getLogger(__name__)

ElementRef = Tuple[str, str]  # (block id, element id)


def _field(command: Mapping[str, Any], name: str):
    try:
        return command[name]
    except KeyError:
        raise ValueError(f"Command '{command.get('op')}' requires '{name}'") from None


def _index(command: Mapping[str, Any], name: str = "after_index") -> Optional[int]:
    value = command.get(name)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"'{name}' must be an integer")
    return value


def _flag(command: Mapping[str, Any], name: str) -> bool:
    value = _field(command, name)
    if not isinstance(value, bool):
        raise ValueError(f"'{name}' must be true or false")
    return value


def _element_type(value) -> ElementType:
    try:
        return ElementType(value)
    except ValueError:
        raise ValueError(f"Unknown element type: {value!r}") from None


class EditingSession:
    def __init__(
        self,
        proposal_id: str,
        blocks: Sequence[Block],
        loaded_ids: Optional[Sequence[str]] = None,
    ):
        self.proposal_id = proposal_id
        self.blocks: List[Block] = list(blocks)
        if loaded_ids is None:
            loaded_ids = [block.id.value for block in self.blocks if not block.is_pending]
        self.loaded_ids: List[str] = list(loaded_ids)

        self.copied_style: Optional[Dict[str, Any]] = None
        self.dragged: Optional[ElementRef] = None
        self.drop_target: Optional[ElementRef] = None

        # A freshly seeded default block has never been stored
        self.has_unsaved_changes = any(block.is_pending for block in self.blocks)

    @classmethod
    def load(cls, proposal_id: str, store: SectionStore) -> "EditingSession":
        records = store.fetch()
        return cls(
            proposal_id,
            hydrate(records),
            loaded_ids=[str(record["id"]) for record in records],
        )

    def _commit(self, blocks: List[Block]) -> List[Block]:
        if blocks != self.blocks:
            self.blocks = blocks
            self.has_unsaved_changes = True
        return self.blocks

    def find_block(self, block_id) -> Optional[Block]:
        for block in self.blocks:
            if str(block.id) == str(block_id):
                return block
        return None

    # -------------------------------------------------
    # Block commands
    # -------------------------------------------------
    def add_block(self, after_index: Optional[int] = None):
        return self._commit(engine.add_block(self.blocks, after_index))

    def move_block(self, block_id, direction: str):
        return self._commit(engine.move_block(self.blocks, block_id, direction))

    def duplicate_block(self, block_id):
        return self._commit(engine.duplicate_block(self.blocks, block_id))

    def delete_block(self, block_id):
        return self._commit(engine.delete_block(self.blocks, block_id))

    def set_block_color(self, block_id, color: str):
        return self._commit(engine.set_block_color(self.blocks, block_id, color))

    def set_block_visibility(self, block_id, visible: bool):
        return self._commit(engine.set_block_visibility(self.blocks, block_id, visible))

    def replace_document(self, blocks: Sequence[Block]):
        return self._commit(list(blocks))

    # -------------------------------------------------
    # Element commands
    # -------------------------------------------------
    def add_element(self, block_id, element_type, after_index=None, style_hint=None):
        return self._commit(engine.add_element_to(
            self.blocks, block_id, _element_type(element_type), after_index, style_hint,
        ))

    def update_element(self, block_id, element_id: str, content: Mapping[str, Any]):
        if not isinstance(content, Mapping):
            raise ValueError("Element content must be an object")
        return self._commit(engine.update_element_in(self.blocks, block_id, element_id, content))

    def delete_element(self, block_id, element_id: str):
        return self._commit(engine.delete_element_from(self.blocks, block_id, element_id))

    def move_element(self, source_block_id, target_block_id, source_element_id, target_element_id):
        return self._commit(engine.transfer_element(
            self.blocks, source_block_id, source_element_id, target_block_id, target_element_id,
        ))

    # -------------------------------------------------
    # Drag and drop
    # -------------------------------------------------
    def start_drag(self, block_id, element_id: str) -> None:
        self.dragged = (str(block_id), element_id)
        self.drop_target = None

    def drag_over(self, block_id, element_id: str) -> None:
        if self.dragged is None or self.dragged == (str(block_id), element_id):
            return
        self.drop_target = (str(block_id), element_id)

    def end_drag(self) -> None:
        self.dragged = None
        self.drop_target = None

    def drop(self, block_id, element_id: str):
        if self.dragged is None:
            return self.blocks
        source_block_id, source_element_id = self.dragged
        try:
            return self.move_element(source_block_id, block_id, source_element_id, element_id)
        finally:
            self.end_drag()

    # -------------------------------------------------
    # Style clipboard
    # -------------------------------------------------
    def copy_style(self, block_id, element_id: str) -> Optional[Dict[str, Any]]:
        block = self.find_block(block_id)
        element = block.find_element(element_id) if block else None
        if element is None:
            return self.copied_style
        self.copied_style = engine.copy_element_style(element)
        return self.copied_style

    def paste_style(self, block_id, element_id: str):
        if not self.copied_style:
            return self.blocks
        return self._commit(engine.paste_element_style_in(
            self.blocks, block_id, element_id, self.copied_style,
        ))

    # -------------------------------------------------
    # Command dispatch
    # -------------------------------------------------
    def apply(self, command: Mapping[str, Any]) -> List[Block]:
        """
        Run one editor command, e.g. {"op": "move_block", "block_id": ..., "direction": "up"}.
        Raises ValueError for malformed commands; unknown ids are no-ops.
        """
        if not isinstance(command, Mapping):
            raise ValueError("Command must be an object")

        handlers: Dict[str, Callable[[Mapping[str, Any]], Any]] = {
            "add_block": lambda c: self.add_block(_index(c)),
            "move_block": lambda c: self.move_block(_field(c, "block_id"), _field(c, "direction")),
            "duplicate_block": lambda c: self.duplicate_block(_field(c, "block_id")),
            "delete_block": lambda c: self.delete_block(_field(c, "block_id")),
            "set_block_color": lambda c: self.set_block_color(_field(c, "block_id"), _field(c, "color")),
            "set_block_visibility": lambda c: self.set_block_visibility(
                _field(c, "block_id"), _flag(c, "visible"),
            ),
            "add_element": lambda c: self.add_element(
                _field(c, "block_id"), _field(c, "type"), _index(c), c.get("style_hint"),
            ),
            "update_element": lambda c: self.update_element(
                _field(c, "block_id"), _field(c, "element_id"), _field(c, "content"),
            ),
            "delete_element": lambda c: self.delete_element(_field(c, "block_id"), _field(c, "element_id")),
            "move_element": lambda c: self.move_element(
                _field(c, "source_block_id"), _field(c, "target_block_id"),
                _field(c, "source_element_id"), _field(c, "target_element_id"),
            ),
            "start_drag": lambda c: self.start_drag(_field(c, "block_id"), _field(c, "element_id")),
            "drag_over": lambda c: self.drag_over(_field(c, "block_id"), _field(c, "element_id")),
            "drop": lambda c: self.drop(_field(c, "block_id"), _field(c, "element_id")),
            "end_drag": lambda c: self.end_drag(),
            "copy_style": lambda c: self.copy_style(_field(c, "block_id"), _field(c, "element_id")),
            "paste_style": lambda c: self.paste_style(_field(c, "block_id"), _field(c, "element_id")),
        }

        op = command.get("op")
        handler = handlers.get(op)
        if handler is None:
            raise ValueError(f"Unknown command: {op!r}")

        handler(command)
        return self.blocks

    # -------------------------------------------------
    # Persistence
    # -------------------------------------------------
    def save(self, store: SectionStore) -> SavePlan:
        """
        Flush the document to storage and reload it.

        Stored ids the session did not load (another proposal's sections,
        or made-up ids) are rejected with ValueError before anything is
        written.

        On failure the store raises PersistenceError and the in-memory
        blocks are left exactly as they were so the save can be retried.
        """
        assert_document(self.blocks)
        plan = flatten(self.blocks, self.loaded_ids)

        unknown = [update["id"] for update in plan.updates if update["id"] not in self.loaded_ids]
        if unknown:
            raise ValueError(f"Unknown section ids for proposal {self.proposal_id}: {unknown}")

        store.apply(plan)

        records = store.fetch()
        self.blocks = hydrate(records)
        self.loaded_ids = [str(record["id"]) for record in records]
        self.has_unsaved_changes = any(block.is_pending for block in self.blocks)
        logger.info(
            "Saved proposal %s: %d inserted, %d updated, %d deleted",
            self.proposal_id, len(plan.inserts), len(plan.updates), len(plan.deletes),
        )
        return plan
