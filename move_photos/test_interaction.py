"""
Tests for the interaction_manager module.
"""
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from move_photos.interaction_manager import (
    InteractionManager, InteractionMode, DecisionType, DecisionOutcome,
    DecisionRequest, DecisionResult, scripted_input,
)


class OutputCollector:
    """Collects printed lines."""

    def __init__(self):
        self.lines = []

    def __call__(self, line: str):
        self.lines.append(line)

    @property
    def text(self) -> str:
        return "\n".join(self.lines)


def make_manager(answers, max_details=20):
    out = OutputCollector()
    manager = InteractionManager(
        InteractionMode.INTERACTIVE,
        input_func=scripted_input(answers),
        output_func=out,
        max_details=max_details,
    )
    return manager, out


def test_confirm_answers():
    """Test y/n/a answers."""
    print("\nTesting interactive confirm...")
    for answer, expected in [("y", DecisionOutcome.YES), ("YES", DecisionOutcome.YES),
                             ("n", DecisionOutcome.NO), ("a", DecisionOutcome.ABORT),
                             ("q", DecisionOutcome.ABORT)]:
        manager, _ = make_manager([answer])
        outcome = manager.confirm(DecisionType.TRANSFER_FILES, "Move 3 files?", ["a", "b", "c"])
        assert outcome == expected, f"{answer!r} -> {outcome}"
        print(f"  ✓ {answer!r} -> {outcome.value}")


def test_confirm_requires_explicit_answer():
    """Empty and unknown answers ask again."""
    manager, out = make_manager(["", "maybe", "y"])
    outcome = manager.confirm(DecisionType.DELETE_UNWANTED, "Delete 1 unwanted files?", ["Thumbs.db"])
    assert outcome == DecisionOutcome.YES
    assert "Please select an option explicitly." in out.lines
    assert "Invalid input. Try again." in out.lines
    assert manager.stats['interactive_decisions'] == 1


def test_confirm_eof_aborts():
    """Running out of input aborts the step."""
    manager, out = make_manager([])
    outcome = manager.confirm(DecisionType.DELETE_REDUNDANT, "Delete?", [])
    assert outcome == DecisionOutcome.ABORT
    assert "Aborting" in out.text


def test_details_truncated_and_listed():
    """Long detail lists are cut, 'r' lists everything."""
    print("\nTesting detail listing...")
    details = [f"file_{i}.jpg" for i in range(5)]
    manager, out = make_manager(["r", "n"], max_details=2)
    outcome = manager.confirm(DecisionType.TRANSFER_FILES, "Move 5 files?", details)
    assert outcome == DecisionOutcome.NO
    assert "  ... and 3 more (enter 'r' to list all)" in out.lines
    assert "  file_4.jpg" in out.lines
    print("  ✓ truncated then fully listed")


def test_auto_and_deferred_modes():
    """Non-interactive modes never prompt."""
    print("\nTesting auto / deferred modes...")

    def no_input(prompt):
        raise AssertionError("Should not prompt")

    auto = InteractionManager(InteractionMode.AUTO_ACCEPT, input_func=no_input)
    assert auto.confirm(DecisionType.TRANSFER_FILES, "Move?") == DecisionOutcome.YES
    assert auto.choose(DecisionType.RESOLVE_CONFLICT, "Pick", [("a", 1)]).outcome == DecisionOutcome.NO
    assert not auto.is_interactive()
    print("  ✓ auto-accept confirms but never picks a conflict winner")

    deferred = InteractionManager(InteractionMode.DEFERRED, input_func=no_input)
    assert deferred.confirm(DecisionType.DELETE_UNWANTED, "Delete?") == DecisionOutcome.NO
    assert deferred.stats['auto_deferred'] == 1
    print("  ✓ deferred declines")


def test_choose():
    """Test multiple choice."""
    print("\nTesting choose...")
    options = [("2012_08_06", "first"), ("2013_01_01", "second"), ("Skip", None)]

    manager, out = make_manager(["7", "x", "1"])
    result = manager.choose(DecisionType.RESOLVE_CONFLICT, "Which date?", options)
    assert result.outcome == DecisionOutcome.SELECTED
    assert result.value == "second"
    assert "Invalid option. Choose 0-2 or a" in out.lines
    print("  ✓ invalid choices re-asked, option 1 selected")

    manager, _ = make_manager(["2"])
    result = manager.choose(DecisionType.RESOLVE_CONFLICT, "Which date?", options)
    assert result.outcome == DecisionOutcome.SELECTED and result.value is None

    manager, _ = make_manager(["a"])
    assert manager.choose(DecisionType.RESOLVE_CONFLICT, "Which date?", options).outcome == DecisionOutcome.ABORT


def test_decision_history():
    """Decisions are recorded with serialisable views."""
    manager, _ = make_manager(["y", "0"])
    manager.confirm(DecisionType.TRANSFER_FILES, "Move?", ["a"])
    manager.choose(DecisionType.RESOLVE_CONFLICT, "Pick", [("only", 1)])

    assert len(manager.decisions_made) == 2
    request, result = manager.decisions_made[1]
    assert isinstance(request, DecisionRequest) and isinstance(result, DecisionResult)
    assert request.to_dict()['options'] == ["only"]
    assert result.to_dict() == {'outcome': 'selected', 'value': '1'}


if __name__ == "__main__":
    print("INTERACTION MANAGER TESTS")
    print("=" * 60)

    tests = [
        ("Confirm answers", test_confirm_answers),
        ("Explicit answer required", test_confirm_requires_explicit_answer),
        ("EOF aborts", test_confirm_eof_aborts),
        ("Details listing", test_details_truncated_and_listed),
        ("Auto / deferred", test_auto_and_deferred_modes),
        ("Choose", test_choose),
        ("Decision history", test_decision_history),
    ]

    failed = 0
    for name, test in tests:
        try:
            test()
            print(f"{name}: [PASS]")
        except AssertionError as e:
            failed += 1
            print(f"{name}: [FAIL] {e}")

    print(f"\nTotal: {len(tests) - failed} passed, {failed} failed")
    sys.exit(1 if failed else 0)
