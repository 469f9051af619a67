import json

from panel_interview.interview.schemas import (
    Parsed, ParseFailed, Scorecard, parse_question, parse_scorecard
)
from panel_interview.interview.testing import sample_scorecard_json


class TestParseQuestion:

    def test_first_question_clause_wins(self):
        result = parse_question("Great answer. Now, how did you measure success? And what next?")
        assert result == Parsed("Now, how did you measure success?")

    def test_strips_speaker_label(self):
        result = parse_question("Sarah: What motivates you in your work? I'm curious.")
        assert result == Parsed("What motivates you in your work?")

    def test_strips_code_fences_and_question_label(self):
        result = parse_question("```\nQuestion: How do you handle conflict on a team?\n```")
        assert result == Parsed("How do you handle conflict on a team?")

    def test_imperative_sentence_accepted(self):
        result = parse_question('"Tell me about your biggest failure."')
        assert result == Parsed("Tell me about your biggest failure.")

    def test_empty_response_fails(self):
        assert isinstance(parse_question(""), ParseFailed)
        assert isinstance(parse_question("   \n "), ParseFailed)

    def test_too_short_fails(self):
        result = parse_question("Why?")
        assert isinstance(result, ParseFailed)
        assert result.raw == "Why?"

    def test_unterminated_text_fails(self):
        assert isinstance(parse_question("just some words with no ending"), ParseFailed)


class TestParseScorecard:

    def test_json_wrapped_in_prose(self):
        result = parse_scorecard(sample_scorecard_json(overall=81))
        assert isinstance(result, Parsed)
        card = result.value
        assert card.overall_score == 81
        assert card.weakness_radar.technical_depth == 60
        assert card.interviewer_feedback.interrupter == "Stayed calm under pressure."

    def test_interruptor_spelling_accepted(self):
        raw = sample_scorecard_json()
        data = json.loads(raw[raw.find("{"):raw.rfind("}") + 1])
        data["interviewerFeedback"] = {"lead": "a", "interruptor": "b", "observer": "c"}
        result = parse_scorecard(json.dumps(data))
        assert isinstance(result, Parsed)
        assert result.value.interviewer_feedback.interrupter == "b"

    def test_no_braces(self):
        result = parse_scorecard("I am unable to score this interview.")
        assert result == ParseFailed("No JSON in response", "I am unable to score this interview.")

    def test_broken_json(self):
        result = parse_scorecard("Here: {overallScore: eighty}")
        assert isinstance(result, ParseFailed)
        assert result.reason.startswith("Failed to parse JSON")

    def test_missing_scores(self):
        result = parse_scorecard('{"summary": "fine"}')
        assert isinstance(result, ParseFailed)
        assert result.reason.startswith("Invalid scorecard structure")

    def test_scores_not_range_checked(self):
        result = parse_scorecard(
            '{"overallScore": 140, "confidenceScore": -5, "communicationScore": 0, "technicalScore": 0}'
        )
        assert isinstance(result, Parsed)
        assert result.value.overall_score == 140
        assert result.value.strengths == []


def test_scorecard_wire_names_are_camel_case():
    card = Scorecard(overall_score=50, confidence_score=40, communication_score=30, technical_score=20)
    wire = card.to_wire()
    assert wire["overallScore"] == 50
    assert "technicalDepth" in wire["weaknessRadar"]
    assert set(wire["interviewerFeedback"]) == {"lead", "interrupter", "observer"}
