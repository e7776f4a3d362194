"""
Command line entry point: generate study notes for one video.
"""

import argparse
import asyncio
import json
from pathlib import Path
from typing import Optional

from notetube.config import config
from notetube.db.database import init_db
from notetube.models.schemas import EventType, NoteRequest, StatusEvent
from notetube.services import build_services
from notetube.utils.helpers import extract_video_id
from notetube.utils.logger import logging


def save_notes(event: StatusEvent, output_file: Optional[str] = None) -> Path:
    """Save the final event (video and notes) to a JSON file."""
    if output_file is None:
        output_dir = config.DATA_DIR / "notes"
        output_dir.mkdir(parents=True, exist_ok=True)
        output_file = output_dir / f"{event.video.id}_notes.json"
    else:
        output_file = Path(output_file)

    with open(output_file, "w", encoding="utf-8") as f:
        json.dump(event.payload(), f, indent=2, ensure_ascii=False)

    logging.info(f"Notes saved to: {output_file}")
    return output_file


async def generate_notes_for_video(
    video_id: str,
    user_id: int,
    manual_transcript: Optional[str] = None,
) -> Optional[StatusEvent]:
    """
    Run the note pipeline for a video, printing progress.

    Returns:
        The terminal event
    """
    init_db()
    services = build_services()
    request = NoteRequest(video_id=video_id, user_id=user_id, manual_transcript=manual_transcript)

    last_event = None
    try:
        async for event in services.pipeline.run(request):
            if event.type == EventType.STATUS:
                print(f"... {event.message}")
            last_event = event
    finally:
        await services.aclose()
    return last_event


def main():
    """Main function to run the application from command line."""
    parser = argparse.ArgumentParser(description="NoteTube AI study notes")
    parser.add_argument("url", help="YouTube video URL or ID")
    parser.add_argument("--user-id", type=int, default=1, help="Library the notes are saved to")
    parser.add_argument("--transcript", help="Path to a transcript file to use instead of fetching one")
    parser.add_argument("--output", help="Output file path for the notes")

    args = parser.parse_args()

    video_id = extract_video_id(args.url)
    if not video_id:
        parser.error(f"Not a YouTube URL or video ID: {args.url}")

    manual_transcript = None
    if args.transcript:
        manual_transcript = Path(args.transcript).read_text(encoding="utf-8")

    event = asyncio.run(generate_notes_for_video(video_id, args.user_id, manual_transcript))

    if event is None or event.type == EventType.ERROR:
        message = event.message if event else "no result"
        print(f"Error: {message}")
        raise SystemExit(1)

    save_notes(event, args.output)

    print("\n" + "=" * 80)
    print(f"Notes for '{event.video.title}' by {event.video.channel_title}")
    print("=" * 80)
    print(event.notes)
    print("=" * 80)


if __name__ == "__main__":
    main()
