import pytest

from panel_interview.interview.orchestrator import PanelStateMachine
from panel_interview.interview.testing import (
    MockOracle, MockSpeechChannel, MockTTSService, MockPersistenceService,
    ScriptedRandom, zero_delay_config
)


@pytest.fixture
def make_panel():
    """Build a PanelStateMachine around mock collaborators.

    Returns a factory so each test can script its own oracle and draws.
    """
    def _make(oracle=None, draws=(), channel=None, persistence=None, config=None, choice_index=0):
        machine = PanelStateMachine(
            oracle=oracle if oracle is not None else MockOracle(),
            speech_channel=channel or MockSpeechChannel(),
            tts_service=MockTTSService(),
            persistence=persistence if persistence is not None else MockPersistenceService(),
            config=config or zero_delay_config(),
            rng=ScriptedRandom(draws, choice_index=choice_index),
        )
        return machine
    return _make
