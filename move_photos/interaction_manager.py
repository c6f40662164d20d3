"""
Interaction Manager for the photo mover.
Handles the operator decision points of a batch.

Supports three modes:
- Interactive: Asks the operator on the terminal (or any injected input function)
- Auto-accept: Answers "yes" to every confirmation (never picks a conflict winner)
- Deferred: Answers "no" to everything, so nothing destructive happens and
  every undecided file ends up in the review report
"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, List, Optional, Sequence, Tuple
import logging

logger = logging.getLogger(__name__)


class DecisionType(Enum):
    """Types of decisions that can be requested."""
    DELETE_UNWANTED = "delete_unwanted"       # Remove OS junk files from the source
    DELETE_REDUNDANT = "delete_redundant"     # Remove sources already present at destination
    TRANSFER_FILES = "transfer_files"         # Move/copy the confidently dated files
    RESOLVE_CONFLICT = "resolve_conflict"     # Strategies disagree on a file's date


class DecisionOutcome(Enum):
    """Possible outcomes from a decision."""
    YES = "yes"             # Go ahead
    NO = "no"               # Skip this step, keep going
    ABORT = "abort"         # Stop this step and flag the batch as aborted
    SELECTED = "selected"   # An option was chosen from a list


@dataclass
class DecisionRequest:
    """A request for an operator decision."""
    decision_type: DecisionType
    message: str
    details: List[str] = field(default_factory=list)
    options: List[Tuple[str, Any]] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            'decision_type': self.decision_type.value,
            'message': self.message,
            'details': self.details,
            'options': [name for name, _ in self.options],
            'timestamp': datetime.now().isoformat(),
        }


@dataclass
class DecisionResult:
    """Result of an operator decision."""
    outcome: DecisionOutcome
    value: Any = None

    def to_dict(self) -> dict:
        return {
            'outcome': self.outcome.value,
            'value': str(self.value) if self.value is not None else None,
        }


class InteractionMode(Enum):
    """Mode of operation for the interaction manager."""
    INTERACTIVE = "interactive"
    AUTO_ACCEPT = "auto_accept"
    DEFERRED = "deferred"


class InteractionManager:
    """
    Asks the operator for decisions, one at a time.

    The input and output functions are injectable so a batch can run
    headless with a scripted responder.
    """

    def __init__(
        self,
        mode: InteractionMode = InteractionMode.INTERACTIVE,
        input_func: Callable[[str], str] = input,
        output_func: Callable[[str], None] = print,
        max_details: int = 20,
    ):
        """
        Initialize the interaction manager.

        Args:
            mode: How to answer decision points
            input_func: Reads one answer given a prompt (default: input)
            output_func: Writes one line of text (default: print)
            max_details: Detail lines shown before "r" is needed to see all
        """
        self.mode = mode
        self.input_func = input_func
        self.output_func = output_func
        self.max_details = max_details

        self.decisions_made: List[Tuple[DecisionRequest, DecisionResult]] = []

        self.stats = {
            'interactive_decisions': 0,
            'auto_accepted': 0,
            'auto_deferred': 0,
        }

    def is_interactive(self) -> bool:
        return self.mode == InteractionMode.INTERACTIVE

    def confirm(self, decision_type: DecisionType, message: str,
                details: Optional[Sequence[str]] = None) -> DecisionOutcome:
        """
        Ask a yes/no/abort question.

        Args:
            decision_type: What is being decided
            message: The question
            details: Lines shown before the question (e.g. affected files)

        Returns:
            DecisionOutcome.YES, NO or ABORT
        """
        request = DecisionRequest(decision_type, message, list(details or []))

        if self.mode == InteractionMode.AUTO_ACCEPT:
            result = DecisionResult(DecisionOutcome.YES)
            self.stats['auto_accepted'] += 1
        elif self.mode == InteractionMode.DEFERRED:
            result = DecisionResult(DecisionOutcome.NO)
            self.stats['auto_deferred'] += 1
        else:
            result = self._interactive_confirm(request)
            self.stats['interactive_decisions'] += 1

        self._record(request, result)
        return result.outcome

    def choose(self, decision_type: DecisionType, label: str,
               options: Sequence[Tuple[str, Any]]) -> DecisionResult:
        """
        Ask the operator to pick one of several options.

        Only the interactive mode ever selects an option; the other modes
        answer NO so no choice is made on the operator's behalf.

        Args:
            decision_type: What is being decided
            label: Text shown above the options
            options: (name, value) pairs

        Returns:
            DecisionResult with outcome SELECTED and the chosen value, or
            NO / ABORT
        """
        request = DecisionRequest(decision_type, label, options=list(options))

        if self.mode == InteractionMode.INTERACTIVE:
            result = self._interactive_choose(request)
            self.stats['interactive_decisions'] += 1
        else:
            result = DecisionResult(DecisionOutcome.NO)
            self.stats['auto_deferred'] += 1

        self._record(request, result)
        return result

    def _record(self, request: DecisionRequest, result: DecisionResult):
        self.decisions_made.append((request, result))
        logger.info(f"Decision: {request.decision_type.value} -> {result.outcome.value}")

    def _ask(self, prompt: str) -> Optional[str]:
        """Read one answer; None means the operator bailed out (EOF / Ctrl-C)."""
        try:
            return self.input_func(prompt).strip().lower()
        except (EOFError, KeyboardInterrupt):
            self.output_func("\nInterrupted. Aborting this step.")
            return None

    def _show_details(self, details: Sequence[str], show_all: bool = False):
        shown = details if show_all else details[:self.max_details]
        for line in shown:
            self.output_func(f"  {line}")
        hidden = len(details) - len(shown)
        if hidden > 0:
            self.output_func(f"  ... and {hidden} more (enter 'r' to list all)")

    def _interactive_confirm(self, request: DecisionRequest) -> DecisionResult:
        """Handle a confirmation via the input function."""
        self.output_func("\n" + "=" * 60)
        self.output_func(f"DECISION REQUIRED: {request.decision_type.value}")
        self.output_func("=" * 60)
        if request.details:
            self._show_details(request.details)
        self.output_func(f"\n{request.message}")

        while True:
            choice = self._ask("Enter choice ([y]es, [n]o, [a]bort): ")
            if choice is None:
                return DecisionResult(DecisionOutcome.ABORT)
            if choice == '':
                self.output_func("Please select an option explicitly.")
            elif choice in ('y', 'yes'):
                return DecisionResult(DecisionOutcome.YES)
            elif choice in ('n', 'no'):
                return DecisionResult(DecisionOutcome.NO)
            elif choice in ('a', 'abort', 'q', 'quit'):
                return DecisionResult(DecisionOutcome.ABORT)
            elif choice == 'r':
                self._show_details(request.details, show_all=True)
            else:
                self.output_func("Invalid input. Try again.")

    def _interactive_choose(self, request: DecisionRequest) -> DecisionResult:
        """Handle a multiple-choice question via the input function."""
        self.output_func("\n" + "=" * 60)
        self.output_func(f"DECISION REQUIRED: {request.decision_type.value}")
        self.output_func("=" * 60)
        self.output_func(request.message)

        self.output_func("\nOptions:")
        for i, (name, _) in enumerate(request.options):
            self.output_func(f"  [{i}] {name}")
        self.output_func("  [a] Abort")

        last = len(request.options) - 1
        while True:
            choice = self._ask(f"\nEnter choice (0-{last}, a): ")
            if choice is None or choice in ('a', 'abort'):
                return DecisionResult(DecisionOutcome.ABORT)
            if choice.isdigit() and 0 <= int(choice) <= last:
                return DecisionResult(DecisionOutcome.SELECTED, request.options[int(choice)][1])
            self.output_func(f"Invalid option. Choose 0-{last} or a")


def scripted_input(answers: Sequence[str]) -> Callable[[str], str]:
    """
    Build an input function that replays the given answers.

    Raises EOFError once the answers run out, which the manager treats as an
    abort.
    """
    remaining = list(answers)

    def _input(prompt: str) -> str:
        if not remaining:
            raise EOFError("No scripted answers left")
        return remaining.pop(0)

    return _input
