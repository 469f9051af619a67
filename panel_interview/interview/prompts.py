"""
Panel prompt templates and canned fallbacks.

This module contains all the prompt templates used by the panel, keeping them
separate from the turn-taking logic for easier maintenance and editing.
"""
from typing import Dict, List, Sequence

from ..config import InterviewSettings
from .models import PANEL, Turn


class PanelPrompts:
    """Collection of all panel-related prompts."""

    @staticmethod
    def opening_question(settings: InterviewSettings) -> str:
        """Prompt for the Lead's first question. No prior Q&A context."""
        return f"""
You are Sarah, the lead interviewer on a three-person interview panel.
This is a {settings.type_label} interview at {settings.difficulty} difficulty.

Ask the candidate your opening question. It should:
1. Fit a {settings.type_label} round
2. Match {settings.difficulty} difficulty
3. Be a single question, one or two sentences long

Respond with ONLY the question - no greeting, no explanations, no quotes.
        """.strip()

    @staticmethod
    def lead_continuation(settings: InterviewSettings, previous_question: str, answer: str) -> str:
        """Prompt for the Lead's next primary question after an answer."""
        answer_text = answer.strip() or "(no answer given)"
        return f"""
You are Sarah, the lead interviewer on a three-person interview panel.
This is a {settings.type_label} interview at {settings.difficulty} difficulty.

You just asked: {previous_question}
The candidate answered: {answer_text}

Continue the interview with your next primary question. Move to a new topic
appropriate for a {settings.type_label} round; do not repeat the question above.

Respond with ONLY the question - no feedback on the answer, no quotes.
        """.strip()

    @staticmethod
    def observer_follow_up(answer: str) -> str:
        """Prompt for Lisa's clarifying question, seeded only by the last answer."""
        return f"""
You are Lisa, the observer on an interview panel. You listen carefully and ask
short clarifying questions about details the candidate just mentioned.

The candidate just said: {answer.strip()}

Ask ONE short follow-up question about something specific in what they just said.

Respond with ONLY the question.
        """.strip()

    @staticmethod
    def feedback(history: Sequence[Turn], interruption_count: int) -> str:
        """Prompt asking for the full panel scorecard as JSON."""
        transcript = PromptFormatter.format_transcript(history)
        panel_lines = "\n".join(f"- {p.name} ({p.id.value}): {p.description}" for p in PANEL)
        return f"""
You are an expert interview coach analyzing a panel interview.

PANEL:
{panel_lines}

INTERVIEW TRANSCRIPT:
{transcript}

Additional context:
- Number of interruptions from panel: {interruption_count}

Analyze this interview performance based on the ACTUAL answers provided above.
Be specific and reference what the candidate actually said.

Respond with ONLY valid JSON (no markdown, no extra text):
{{
  "overallScore": <number 0-100>,
  "confidenceScore": <number 0-100>,
  "communicationScore": <number 0-100>,
  "technicalScore": <number 0-100>,
  "strengths": ["specific strength from answers", "another strength"],
  "improvements": ["specific improvement needed", "another improvement"],
  "summary": "2-3 sentences mentioning specific things they said",
  "weaknessRadar": {{
    "clarity": <number 0-100>,
    "structure": <number 0-100>,
    "technicalDepth": <number 0-100>,
    "confidence": <number 0-100>,
    "relevance": <number 0-100>
  }},
  "interviewerFeedback": {{
    "lead": "feedback about their main answers",
    "interrupter": "feedback about handling pressure",
    "observer": "feedback about details provided"
  }}
}}
        """.strip()

    @staticmethod
    def fallback_messages() -> Dict[str, List[str]]:
        """Canned text for when the oracle fails."""
        return {
            "opening_questions": [
                "Tell me about a time when you faced a significant challenge and how you overcame it."
            ],
            "lead_questions": [
                "Can you walk me through a project you are particularly proud of?",
                "Describe a situation where you had to work with a difficult team member.",
                "Tell me about a decision you made that turned out to be wrong. What did you learn?",
                "How do you prioritize when everything on your plate feels urgent?",
                "Where do you see yourself growing in the next two years?",
            ],
            "observer_questions": [
                "Could you give me a specific example of what you just described?",
            ],
            "interruptions": [
                "Hold on - can you be more specific about that?",
                "Wait, what was YOUR role in that, exactly?",
                "That sounds vague. What were the actual numbers?",
                "Let me stop you there. Why didn't you choose a different approach?",
                "Sorry to interrupt, but how do you know that actually worked?",
                "Are you sure that's the whole story?",
            ],
        }


class PromptFormatter:
    """Helpers for rendering session data into prompt text."""

    @staticmethod
    def format_transcript(history: Sequence[Turn]) -> str:
        """Render history as enumerated ``Q{n}: ...`` / ``A{n}: ...`` pairs."""
        if not history:
            return "(no questions were answered)"
        return "\n\n".join(
            f"Q{i}: {turn.question}\nA{i}: {turn.answer or 'No answer provided'}"
            for i, turn in enumerate(history, start=1)
        )
