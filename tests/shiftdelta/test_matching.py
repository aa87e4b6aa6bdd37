from __future__ import annotations

from datetime import datetime

from shiftdelta.matching import match_group, match_shifts
from shiftdelta.models import ParsedShift


def shift(hm_in, hm_out, emp="E1", date="2025-01-05", seq=1):
    y, m, d = (int(p) for p in date.split("-"))
    start = datetime(y, m, d, *hm_in)
    end = datetime(y, m, d, *hm_out)
    return ParsedShift(
        employee_id=emp,
        employee_name="Ana Lopez",
        date=date,
        in_time=start,
        out_time=end,
        role="Server",
        location="Main",
        minutes=int((end - start).total_seconds() // 60),
        match_key=f"{emp}-{date.replace('-', '')}-{seq}",
        sequence=seq,
    )


def test_split_shift_pairs_each_to_its_nearest():
    morning = shift((8, 0), (12, 0), seq=1)
    afternoon = shift((14, 0), (18, 0), seq=2)
    worked_am = shift((8, 5), (12, 0), seq=1)
    worked_pm = shift((14, 10), (18, 30), seq=2)

    out = match_shifts([morning, afternoon], [worked_pm, worked_am])

    assert out.no_shows == [] and out.unscheduled == []
    pairs = {p.scheduled.match_key: p for p in out.pairs}
    assert pairs[morning.match_key].worked is worked_am
    assert pairs[morning.match_key].start_time_diff == 5
    assert pairs[afternoon.match_key].worked is worked_pm
    assert pairs[afternoon.match_key].start_time_diff == 10


def test_window_is_inclusive():
    sched = shift((8, 0), (12, 0))
    at_limit = shift((12, 0), (16, 0))
    out = match_group([sched], [at_limit], window_minutes=240)
    assert len(out.pairs) == 1
    assert out.pairs[0].start_time_diff == 240


def test_outside_window_gives_no_show_and_unscheduled():
    sched = shift((8, 0), (12, 0))
    too_far = shift((12, 10), (16, 0))
    out = match_group([sched], [too_far])
    assert out.pairs == []
    assert out.no_shows == [sched]
    assert out.unscheduled == [too_far]


def test_custom_window():
    sched = shift((9, 0), (17, 0))
    late = shift((9, 31), (17, 0))
    assert match_group([sched], [late], window_minutes=30).pairs == []
    assert len(match_group([sched], [late], window_minutes=31).pairs) == 1


def test_each_scheduled_shift_is_claimed_once():
    sched = shift((9, 0), (17, 0))
    first = shift((9, 0), (12, 0))
    second = shift((9, 30), (13, 0), seq=2)
    out = match_group([sched], [second, first])
    assert len(out.pairs) == 1
    assert out.pairs[0].worked is first
    assert out.unscheduled == [second]


def test_ties_go_to_the_earlier_scheduled_shift():
    early = shift((8, 0), (9, 0), seq=1)
    later = shift((10, 0), (11, 0), seq=2)
    worked = shift((9, 0), (10, 0))
    out = match_shifts([later, early], [worked])
    assert out.pairs[0].scheduled is early
    assert out.no_shows == [later]


def test_greedy_does_not_reorder_claims():
    # the 7:00 worked shift is processed first and takes the nearer 8:00 slot,
    # leaving 11:30 with nothing inside the window
    x = shift((8, 0), (12, 0), seq=2)
    y = shift((3, 0), (7, 0), seq=1)
    a = shift((7, 0), (11, 0), seq=1)
    b = shift((11, 30), (15, 0), seq=2)
    out = match_shifts([x, y], [a, b])
    assert [(p.scheduled, p.worked) for p in out.pairs] == [(x, a)]
    assert out.no_shows == [y]
    assert out.unscheduled == [b]


def test_groups_never_cross_employees_or_dates():
    sched = [shift((9, 0), (17, 0), emp="E1"), shift((9, 0), (17, 0), emp="E2")]
    worked = [
        shift((9, 0), (17, 0), emp="E2"),
        shift((9, 0), (17, 0), emp="E1", date="2025-01-06"),
    ]
    out = match_shifts(sched, worked)
    assert [(p.scheduled.employee_id, p.worked.employee_id) for p in out.pairs] == [
        ("E2", "E2")
    ]
    assert [s.employee_id for s in out.no_shows] == ["E1"]
    assert [(w.employee_id, w.date) for w in out.unscheduled] == [
        ("E1", "2025-01-06")
    ]


def test_counts_balance():
    sched = [shift((8, 0), (12, 0)), shift((14, 0), (18, 0), seq=2)]
    worked = [shift((8, 10), (12, 0)), shift((20, 0), (22, 0), seq=2)]
    out = match_shifts(sched, worked)
    assert len(out.pairs) + len(out.no_shows) == len(sched)
    assert len(out.pairs) + len(out.unscheduled) == len(worked)
