from habitgrid.services.habit_parser import HabitParser

CONTENT = """# My habits

- [ ] Exercise
- [x] Read
* [X] Meditate
- Drink water
* Stretch
1. Journal
12.   Walk the dog

Plain text line
-NoSpace
"""


def test_parse_list_items():
    assert HabitParser().parse(CONTENT) == [
        "Exercise", "Read", "Meditate", "Drink water", "Stretch", "Journal", "Walk the dog"
    ]


def test_parse_ignores_empty_content():
    assert HabitParser().parse("") == []
    assert HabitParser().parse("## Heading\n\n-\n") == []


def test_parse_file(tmp_path):
    path = tmp_path / "habits.md"
    path.write_text(CONTENT, encoding="utf-8")
    assert HabitParser().parse_file(path)[:2] == ["Exercise", "Read"]


def test_parse_missing_file(tmp_path):
    assert HabitParser().parse_file(tmp_path / "missing.md") == []
