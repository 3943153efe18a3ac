import logging
from datetime import date, datetime

from conftest import FailingGateway
from habitgrid.core.registry import HabitRegistry


def test_add_habit_appends_in_order(registry):
    for name in ["Exercise", "Read", "Meditate"]:
        assert registry.add_habit(name) is True
    assert registry.get_habits() == ["Exercise", "Read", "Meditate"]


def test_add_habit_trims_name(registry):
    assert registry.add_habit("  Read  ") is True
    assert registry.get_habits() == ["Read"]


def test_add_blank_habit_rejected(registry, gateway):
    assert registry.add_habit("   ") is False
    assert registry.get_habits() == []
    assert gateway.documents == []


def test_add_duplicate_rejected(registry):
    assert registry.add_habit("Exercise") is True
    assert registry.add_habit("Exercise") is False
    assert registry.add_habit(" Exercise ") is False
    assert registry.get_habits().count("Exercise") == 1


def test_reserved_names_rejected(registry):
    assert registry.add_habit("habits") is False
    assert registry.add_habit("colors") is False
    assert len(registry) == 0


def test_every_successful_mutation_commits_once(registry, gateway):
    registry.add_habit("Exercise")
    registry.toggle_habit("Exercise", "2024-01-01")
    registry.set_color("Exercise", "#0A84FF")
    registry.rename_habit("Exercise", "Workout")
    registry.remove_habit("Workout")
    assert len(gateway.documents) == 5
    assert gateway.documents[-1] == {"habits": [], "colors": {}}


def test_toggle_flips_value(registry):
    registry.add_habit("Exercise")
    assert registry.toggle_habit("Exercise", "2024-01-01") is True
    assert registry.is_completed("Exercise", "2024-01-01") is True
    assert registry.toggle_habit("Exercise", "2024-01-01") is False
    assert registry.is_completed("Exercise", "2024-01-01") is False


def test_toggle_accepts_dates(registry):
    registry.add_habit("Exercise")
    registry.toggle_habit("Exercise", date(2024, 1, 1))
    assert registry.is_completed("Exercise", "2024-01-01")
    assert registry.is_completed("Exercise", datetime(2024, 1, 1, 23, 59))


def test_toggle_unknown_habit_rejected(registry, gateway):
    assert registry.toggle_habit("Ghost", "2024-01-01") is False
    assert "Ghost" not in registry
    assert registry.get_habits() == []
    assert gateway.documents == []


def test_toggle_invalid_date_rejected(registry, gateway):
    registry.add_habit("Exercise")
    assert registry.toggle_habit("Exercise", "2024-13-45") is False
    assert registry.history("Exercise") == {}
    assert len(gateway.documents) == 1


def test_is_completed_unknown_is_false(registry):
    registry.add_habit("Exercise")
    assert registry.is_completed("Ghost", "2024-01-01") is False
    assert registry.is_completed("Exercise", "2024-01-01") is False
    assert registry.is_completed("Exercise", "not-a-date") is False


def test_streak_counts_back_to_first_gap(registry):
    registry.add_habit("Exercise")
    for day in ["2024-03-01", "2024-03-02", "2024-03-03", "2024-02-27"]:
        registry.toggle_habit("Exercise", day)
    assert registry.streak("Exercise", "2024-03-03") == 3
    assert registry.streak("Exercise", "2024-03-02") == 2
    assert registry.streak("Exercise", "2024-03-04") == 0
    assert registry.streak("Ghost", "2024-03-03") == 0


def test_streak_stops_at_horizon():
    registry = HabitRegistry(streak_horizon=10)
    registry.add_habit("Read")
    for day in range(1, 21):
        registry.toggle_habit("Read", date(2024, 1, day))
    assert registry.streak("Read", date(2024, 1, 20)) == 10


def test_streak_spans_leap_day(registry):
    registry.add_habit("Exercise")
    for day in ["2024-02-28", "2024-02-29", "2024-03-01"]:
        registry.toggle_habit("Exercise", day)
    assert registry.streak("Exercise", "2024-03-01") == 3


def test_longest_streak(registry):
    registry.add_habit("Read")
    for day in ["2024-01-01", "2024-01-02", "2024-01-05", "2024-01-06", "2024-01-07"]:
        registry.toggle_habit("Read", day)
    assert registry.longest_streak("Read") == 3
    assert registry.longest_streak("Ghost") == 0


def test_rename_carries_history_and_color(registry):
    registry.add_habit("Exercise")
    registry.add_habit("Read")
    registry.toggle_habit("Exercise", "2024-01-01")
    registry.set_color("Exercise", "#0A84FF")

    assert registry.rename_habit("Exercise", "Workout") is True
    assert registry.get_habits() == ["Workout", "Read"]
    assert registry.is_completed("Workout", "2024-01-01") is True
    assert registry.is_completed("Exercise", "2024-01-01") is False
    assert registry.get_color("Workout") == "#0A84FF"
    assert registry.get_color("Exercise") is None


def test_rename_rejections(registry, gateway):
    registry.add_habit("Exercise")
    registry.add_habit("Read")
    commits = len(gateway.documents)

    assert registry.rename_habit("Exercise", "Read") is False
    assert registry.rename_habit("Exercise", "   ") is False
    assert registry.rename_habit("Ghost", "Other") is False
    assert registry.get_habits() == ["Exercise", "Read"]
    assert len(gateway.documents) == commits


def test_rename_to_same_name_is_noop_success(registry, gateway):
    registry.add_habit("Exercise")
    assert registry.rename_habit("Exercise", " Exercise ") is True
    assert registry.get_habits() == ["Exercise"]
    assert len(gateway.documents) == 1


def test_remove_discards_history_and_color(registry):
    registry.add_habit("Workout")
    registry.toggle_habit("Workout", "2024-01-01")
    registry.set_color("Workout", "#FF0000")

    assert registry.remove_habit("Workout") is True
    assert registry.remove_habit("Workout") is False
    assert registry.is_completed("Workout", "2024-01-01") is False
    assert registry.get_color("Workout") is None

    # Повторно добавленная привычка начинается с пустой истории
    registry.add_habit("Workout")
    assert registry.history("Workout") == {}


def test_set_color_unknown_is_noop(registry, gateway):
    assert registry.set_color("Ghost", "#000000") is False
    assert registry.get_color("Ghost") is None
    assert gateway.documents == []


def test_to_document_shape(registry):
    registry.add_habit("Exercise")
    registry.add_habit("Read")
    registry.toggle_habit("Exercise", "2024-01-01")
    registry.set_color("Exercise", "#0A84FF")

    assert registry.to_document() == {
        "habits": ["Exercise", "Read"],
        "colors": {"Exercise": "#0A84FF"},
        "Exercise": {"2024-01-01": True},
        "Read": {}
    }


def test_from_document_does_not_commit(gateway):
    registry = HabitRegistry.from_document(
        {"habits": ["Read"], "Read": {"2024-01-01": True}}, gateway=gateway
    )
    assert registry.is_completed("Read", "2024-01-01")
    assert gateway.documents == []


def test_import_habits_commits_once(registry, gateway):
    added = registry.import_habits(["Read", "", "Read", "Walk"])
    assert added == 2
    assert registry.get_habits() == ["Read", "Walk"]
    assert len(gateway.documents) == 1


def test_completion_lookup_reads_live_state(registry):
    registry.add_habit("Read")
    lookup = registry.completion_lookup("Read")
    assert lookup("2024-01-01") is False
    registry.toggle_habit("Read", "2024-01-01")
    assert lookup("2024-01-01") is True


def test_completed_dates_sorted(registry):
    registry.add_habit("Read")
    for day in ["2024-01-03", "2024-01-01", "2024-01-02"]:
        registry.toggle_habit("Read", day)
    registry.toggle_habit("Read", "2024-01-02")
    assert registry.completed_dates("Read") == ["2024-01-01", "2024-01-03"]


def test_failing_gateway_does_not_roll_back(caplog):
    gateway = FailingGateway()
    registry = HabitRegistry(gateway=gateway)

    with caplog.at_level(logging.ERROR, logger="habitgrid.core.registry"):
        assert registry.add_habit("Read") is True
        assert registry.toggle_habit("Read", "2024-01-01") is True

    assert registry.is_completed("Read", "2024-01-01")
    assert gateway.calls == 2
    assert any(r.levelno == logging.ERROR for r in caplog.records)


def test_gateway_raising_on_commit_is_contained():
    class BrokenGateway:
        def commit(self, document):
            raise RuntimeError("boom")

    registry = HabitRegistry(gateway=BrokenGateway())
    assert registry.add_habit("Read") is True
    assert registry.get_habits() == ["Read"]


def test_set_color_rejects_non_string(registry, gateway):
    registry.add_habit("Read")
    registry.set_color("Read", "#0A84FF")

    assert registry.set_color("Read", 0x0A84FF) is False
    assert registry.get_color("Read") == "#0A84FF"

    # Последующие изменения по-прежнему сохраняются
    registry.toggle_habit("Read", "2024-01-01")
    assert len(gateway.documents) == 3
    assert gateway.documents[-1]["colors"] == {"Read": "#0A84FF"}


def test_set_color_none_clears(registry, gateway):
    registry.add_habit("Read")
    assert registry.set_color("Read", "#0A84FF") is True
    assert registry.set_color("Read", None) is True
    assert registry.get_color("Read") is None
    assert gateway.documents[-1]["colors"] == {}
