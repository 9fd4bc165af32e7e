from wallcal.csv_events import export_events_to_csv, load_events_csv, parse_events_from_csv
from wallcal.models import Event, EventType, NthWeekday, Weekly

HEADER = "Name,Type,Month,Day,Groups\n"


def test_single_birthday_row():
    result = parse_events_from_csv(HEADER + "Amy Holland,B,2,4,Lewis")

    assert result.errors == []
    [event] = result.events
    assert (event.name, event.type, event.month, event.day) == ("Amy Holland", EventType.BIRTHDAY, 2, 4)
    assert event.groups == ("Lewis",)
    assert event.id


def test_quoted_multiple_groups():
    [event] = parse_events_from_csv(HEADER + 'Sam Jones,A,2,19,"Lewis,Hooper"').events

    assert event.groups == ("Lewis", "Hooper")


def test_rows_get_unique_ids():
    events = parse_events_from_csv(
        HEADER + "Amy Holland,B,2,4,Lewis\nSam Jones,A,2,19,Hooper\nTootsie P,B,2,16,Lewis"
    ).events

    assert len(events) == 3
    assert len({e.id for e in events}) == 3


def test_empty_groups():
    [event] = parse_events_from_csv(HEADER + "Amy Holland,B,2,4,").events

    assert event.groups == ()


def test_fields_are_trimmed():
    [event] = parse_events_from_csv(HEADER + " Amy Holland , B , 2 , 4 , Lewis ").events

    assert (event.name, event.type, event.month, event.day) == ("Amy Holland", EventType.BIRTHDAY, 2, 4)
    assert event.groups == ("Lewis",)


def test_duplicates_collapse_and_merge_groups():
    events = parse_events_from_csv(
        HEADER
        + "Amy Holland,B,2,4,Lewis\n"
        + "Amy Holland,B,2,4,Hooper\n"
        + 'Amy Holland,B,2,4,"Lewis,Hooper"\n'
    ).events

    assert len(events) == 1
    assert events[0].groups == ("Lewis", "Hooper")


def test_recurring_rows_with_different_rules_stay_separate():
    result = parse_events_from_csv(
        "Name,Type,Month,Day,Groups,Recurrence\n"
        "Choir,R,,,Lewis,weekly:Sunday\n"
        "Choir,R,,,Hooper,weekly:Wednesday\n"
        "Choir,R,,,Hooper,weekly:Sunday\n"
    )

    assert [(e.recurrence, e.groups) for e in result.events] == [
        (Weekly(0), ("Lewis", "Hooper")),
        (Weekly(3), ("Hooper",)),
    ]


def test_same_name_different_type_is_not_a_duplicate():
    events = parse_events_from_csv(HEADER + "Amy Holland,B,2,4,\nAmy Holland,A,2,4,").events

    assert [e.type for e in events] == [EventType.BIRTHDAY, EventType.ANNIVERSARY]


def test_lowercase_types():
    events = parse_events_from_csv(HEADER + "Amy Holland,b,2,4,Lewis\nSam Jones,a,6,15,Hooper").events

    assert [e.type for e in events] == [EventType.BIRTHDAY, EventType.ANNIVERSARY]


def test_invalid_rows_are_reported():
    result = parse_events_from_csv(
        HEADER
        + ",B,2,4,Lewis\n"
        + "Amy Holland,B,13,4,Lewis\n"
        + "Amy Holland,B,2,0,Lewis\n"
        + "Valid Person,B,6,15,Lewis\n"
        + "Bad Type,X,6,15,\n"
        + "Bad Number,B,six,15,\n"
        + "April Fool,B,4,31,\n"
    )

    assert [e.name for e in result.events] == ["Valid Person"]
    assert [err.line for err in result.errors] == [2, 3, 4, 6, 7, 8]
    assert result.errors[0].message == "missing name"


def test_leap_day_is_accepted():
    [event] = parse_events_from_csv(HEADER + "Leap Baby,B,2,29,").events

    assert (event.month, event.day) == (2, 29)


def test_recurring_rows():
    result = parse_events_from_csv(
        "Name,Type,Month,Day,Groups,Recurrence\n"
        "Church,R,,,Lewis,weekly:Sunday\n"
        "Book Club,r,,,,nth:2:Tuesday\n"
        "Mystery,R,,,,fortnightly:Monday\n"
    )

    assert result.errors == []
    church, club, mystery = result.events
    assert church.recurrence == Weekly(0) and church.groups == ("Lewis",)
    assert club.recurrence == NthWeekday(2, 2)
    assert mystery.is_recurring and mystery.recurrence is None


def test_export_layout():
    events = [
        Event("Amy Holland", EventType.BIRTHDAY, 2, 4, ("Lewis",)),
        Event("Sam Jones", EventType.ANNIVERSARY, 2, 19, ("Lewis", "Hooper")),
        Event("Church", EventType.RECURRING, recurrence=Weekly(0)),
    ]

    text = export_events_to_csv(events)

    lines = text.splitlines()
    assert lines[0] == "Name,Type,Month,Day,Groups,Recurrence"
    assert lines[1] == "Amy Holland,B,2,4,Lewis,"
    assert lines[2] == 'Sam Jones,A,2,19,"Lewis,Hooper",'
    assert lines[3] == "Church,R,,,,weekly:Sunday"


def test_export_then_parse_keeps_content():
    events = [
        Event("Amy Holland", EventType.BIRTHDAY, 2, 4, ("Lewis",)),
        Event("Book Club", EventType.RECURRING, groups=("Hooper",), recurrence=NthWeekday(2, 2)),
    ]

    parsed = parse_events_from_csv(export_events_to_csv(events))

    assert parsed.errors == []
    # ids are regenerated and excluded from equality
    assert parsed.events == events


def test_load_from_file_with_bom(tmp_path):
    path = tmp_path / "events.csv"
    path.write_text(HEADER + "Amy Holland,B,2,4,Lewis\n", encoding="utf-8-sig")

    [event] = load_events_csv(path).events

    assert event.name == "Amy Holland"
