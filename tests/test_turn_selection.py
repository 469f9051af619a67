import random

import pytest

from panel_interview.interview.models import InterviewerId
from panel_interview.interview.question_engine import TurnSelector
from panel_interview.interview.testing import ScriptedRandom


@pytest.mark.parametrize("draw, current, answer, expected", [
    (0.71, InterviewerId.LEAD, "I shipped it on time", InterviewerId.OBSERVER),
    (0.70, InterviewerId.LEAD, "I shipped it on time", InterviewerId.LEAD),
    (0.10, InterviewerId.LEAD, "I shipped it on time", InterviewerId.LEAD),
    (0.99, InterviewerId.OBSERVER, "I shipped it on time", InterviewerId.LEAD),
    (0.99, InterviewerId.LEAD, "", InterviewerId.LEAD),
    (0.99, InterviewerId.LEAD, "   ", InterviewerId.LEAD),
])
def test_select_next_speaker(draw, current, answer, expected):
    selector = TurnSelector(ScriptedRandom([draw]), observer_threshold=0.7)
    assert selector.select_next_speaker(current, answer) == expected


def test_one_draw_per_answer():
    rng = ScriptedRandom([0.9, 0.9, 0.9])
    selector = TurnSelector(rng)
    selector.select_next_speaker(InterviewerId.LEAD, "yes")
    selector.select_next_speaker(InterviewerId.OBSERVER, "yes")
    selector.select_next_speaker(InterviewerId.LEAD, "")
    assert rng.draws == 3


def test_interrupter_never_selected():
    selector = TurnSelector(random.Random(1234))
    speaker = InterviewerId.LEAD
    seen = set()
    for _ in range(500):
        speaker = selector.select_next_speaker(speaker, "an answer")
        seen.add(speaker)
    assert seen == {InterviewerId.LEAD, InterviewerId.OBSERVER}


def test_no_two_observer_turns_in_a_row():
    selector = TurnSelector(random.Random(99))
    previous = InterviewerId.LEAD
    for _ in range(500):
        nxt = selector.select_next_speaker(previous, "an answer")
        assert not (previous == InterviewerId.OBSERVER and nxt == InterviewerId.OBSERVER)
        previous = nxt
