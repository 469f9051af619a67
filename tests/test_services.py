from unittest.mock import patch

from panel_interview.interview.services import TypedSpeechChannel, TTSService, UnsupportedSpeechChannel

TTS_SAY = "panel_interview.interview.services.tts_say"


def test_typed_channel_accumulates_lines():
    channel = TypedSpeechChannel()
    channel.add_line("ignored before start")
    channel.start()
    channel.add_line("I led a team")
    channel.add_line("   ")
    channel.add_line("of five")
    channel.stop()

    assert channel.final_transcript.strip() == "I led a team of five"
    assert channel.interim_transcript == "I led a team of five"

    channel.reset_transcript()
    assert channel.final_transcript == ""
    assert channel.interim_transcript == ""


def test_unsupported_channel_flag():
    assert not UnsupportedSpeechChannel().is_supported
    assert TypedSpeechChannel().is_supported


@patch(TTS_SAY)
def test_text_mode_prints(mock_say, capsys):
    TTSService(use_tts=False).speak_or_print("Why this company?", "🎤 Sarah:")
    mock_say.assert_not_called()
    assert "🎤 Sarah: Why this company?" in capsys.readouterr().out


@patch(TTS_SAY, return_value=False)
def test_tts_failure_falls_back_to_print(mock_say, capsys):
    TTSService(use_tts=True).speak_or_print("Be specific.", "🎤 Mike:")
    mock_say.assert_called_once()
    assert "Be specific." in capsys.readouterr().out


@patch(TTS_SAY, return_value=True)
def test_tts_success_prints_nothing(mock_say, capsys):
    TTSService(use_tts=True, voice="en-GB-Neural2-A").speak_or_print("Hello there.")
    assert mock_say.call_args.kwargs["voice"] == "en-GB-Neural2-A"
    assert capsys.readouterr().out == ""
