#!/usr/bin/env python3
"""
Main entry point for the panel interview.
Allows running the package with: python -m panel_interview
"""
import sys
import asyncio
import random
from typing import Optional

from .config import get_config, Config, InterviewSettings, INTERVIEW_TYPES, DIFFICULTY_LEVELS
from .infrastructure.llm import OllamaClient, build_oracle
from .infrastructure.data import InterviewStore
from .interview.orchestrator import PanelStateMachine
from .interview.schemas import Scorecard
from .interview.services import TypedSpeechChannel, TTSService, PersistenceService
from .interview.models import PANEL
from .utils import setup_logging

END_COMMAND = "/end"


def print_scorecard(scorecard: Scorecard) -> None:
    print("\n" + "=" * 50)
    print("📊 PANEL FEEDBACK")
    print("=" * 50)
    print(f"Overall:        {scorecard.overall_score:.0f}")
    print(f"Confidence:     {scorecard.confidence_score:.0f}")
    print(f"Communication:  {scorecard.communication_score:.0f}")
    print(f"Technical:      {scorecard.technical_score:.0f}")

    radar = scorecard.weakness_radar
    print(f"\nRadar: clarity {radar.clarity:.0f} | structure {radar.structure:.0f} | "
          f"depth {radar.technical_depth:.0f} | confidence {radar.confidence:.0f} | "
          f"relevance {radar.relevance:.0f}")

    if scorecard.strengths:
        print("\n✅ Strengths:")
        for s in scorecard.strengths:
            print(f"   - {s}")
    if scorecard.improvements:
        print("\n🔧 Improvements:")
        for s in scorecard.improvements:
            print(f"   - {s}")

    print(f"\n📝 {scorecard.summary}")
    fb = scorecard.interviewer_feedback
    print(f"\n   Sarah: {fb.lead}")
    print(f"   Mike:  {fb.interrupter}")
    print(f"   Lisa:  {fb.observer}")


def check_oracle(config: Config) -> int:
    """Report whether the configured oracle backend is reachable."""
    if config.oracle_backend != "ollama":
        print(f"ℹ️  Backend '{config.oracle_backend}' (project {config.google_cloud_project}) - nothing to check")
        return 0

    client = OllamaClient(base_url=config.ollama_url, model=config.ollama_model)
    if not client.check_connection():
        print(f"❌ Ollama is not reachable at {config.ollama_url}")
        print("   Run 'ollama serve' in a terminal, then try again")
        return 1

    models = client.list_models()
    print(f"✅ Ollama is running at {config.ollama_url}")
    print(f"   Models: {', '.join(models) if models else '(none)'}")
    if config.ollama_model not in models:
        print(f"⚠️  Model {config.ollama_model} not found, run 'ollama pull {config.ollama_model}'")
    return 0


async def run_console(machine: PanelStateMachine, channel: TypedSpeechChannel) -> Scorecard:
    """Text-mode panel: typed lines stand in for speech."""
    await machine.start()
    await machine.wait_background()

    while True:
        await machine.toggle_capture()
        print(f"   (answer below, empty line to submit, {END_COMMAND} to finish)")

        finished = False
        while True:
            try:
                line = await asyncio.to_thread(input, "> ")
            except EOFError:
                finished = True
                break
            if line.strip() == END_COMMAND:
                finished = True
                break
            if not line.strip():
                break
            channel.add_line(line)

        if finished:
            print("\n⏳ The panel is discussing your interview...")
            scorecard = await machine.end()
            await machine.wait_background()
            return scorecard

        await machine.toggle_capture()
        await machine.wait_background()


def main():
    """Command-line interface for the panel interview."""

    # Load configuration from environment
    try:
        config = get_config()
    except ValueError as e:
        print(f"❌ Configuration Error: {e}")
        sys.exit(1)

    if "--check" in sys.argv:
        sys.exit(check_oracle(config))

    # TTS configuration with explicit flags taking precedence
    if "--text" in sys.argv or "--no-tts" in sys.argv:
        use_tts = False
    elif "--tts" in sys.argv or "--speech" in sys.argv:
        use_tts = True
    else:
        use_tts = config.enable_tts

    interview_type = config.panel.settings.interview_type
    difficulty = config.panel.settings.difficulty
    seed: Optional[int] = None
    for arg in sys.argv:
        if arg.startswith("--type="):
            interview_type = arg.split("=", 1)[1]
        elif arg.startswith("--difficulty="):
            difficulty = arg.split("=", 1)[1]
        elif arg.startswith("--seed="):
            try:
                seed = int(arg.split("=", 1)[1])
            except ValueError:
                print("❌ Invalid seed value. Use --seed=<integer>")
                sys.exit(1)

    try:
        config.panel.settings = InterviewSettings(interview_type, difficulty)
    except ValueError as e:
        print(f"❌ {e}")
        print(f"   Types: {', '.join(INTERVIEW_TYPES)}")
        print(f"   Difficulties: {', '.join(DIFFICULTY_LEVELS)}")
        sys.exit(1)

    log_path = setup_logging(config.log_file, level=config.log_level)

    persistence = None
    if config.save_sessions and "--no-save" not in sys.argv:
        persistence = PersistenceService(InterviewStore(config.api_url), config.user_id)

    channel = TypedSpeechChannel()
    machine = PanelStateMachine(
        oracle=build_oracle(config),
        speech_channel=channel,
        tts_service=TTSService(use_tts=use_tts, voice=config.tts_voice, language_code=config.language_code),
        persistence=persistence,
        config=config.panel,
        rng=random.Random(seed),
    )

    settings = config.panel.settings
    print(f"\n🎙️  Panel interview - {settings.difficulty} {settings.type_label}")
    for member in PANEL:
        print(f"   {member.name} ({member.title}): {member.description}")
    print(f"🔊 TTS: {'on' if use_tts else 'off'} (use --tts or --text)")
    print(f"📝 Detailed logs: {log_path}")
    print("=" * 50)

    try:
        scorecard = asyncio.run(run_console(machine, channel))
    except KeyboardInterrupt:
        print("\n👋 Interview abandoned")
        sys.exit(130)

    print_scorecard(scorecard)

    status = machine.get_status()
    duration = machine.session.duration_seconds or 0.0
    print(f"\n⏱️  {status['turns']} answers, {status['interruptions']} interruptions in {duration / 60:.1f} min")
    metrics = machine.get_metrics()
    if metrics["fallback_questions"] or metrics["degraded_feedback"]:
        print(f"⚠️  {metrics['fallback_questions']} canned questions used; see {log_path}")


if __name__ == "__main__":
    main()
