"""
Generate Daily Ripple audio with ElevenLabs.

Run with:
    python scripts/generate_daily_ripple.py            # all five weekday episodes
    python scripts/generate_daily_ripple.py --test     # Monday only
    python scripts/generate_daily_ripple.py --day Friday
    python scripts/generate_daily_ripple.py --voices   # list account voices
"""

import argparse
import asyncio
import sys

from askapril.core.errors import AprilError
from askapril.core.logging import get_logger
from askapril.services.daily_ripple import DailyRippleGenerator
from askapril.services.elevenlabs_service import find_april_voice

logger = get_logger(__name__)


async def show_voices(generator: DailyRippleGenerator) -> None:
    """Print voices on the account and suggest one for April."""
    voices = await generator.client.list_voices()
    print(f"Found {len(voices)} voices:\n")
    for index, voice in enumerate(voices, start=1):
        print(f"{index}. Name: {voice.get('name')}")
        print(f"   ID: {voice.get('voice_id')}")
        print(f"   Category: {voice.get('category')}")
        print(f"   Description: {voice.get('description') or 'No description'}\n")

    april = find_april_voice(voices)
    if april:
        print(f"Found April voice: {april.get('name')}")
        print("Update your .env file with this Voice ID:")
        print(f"ELEVENLABS_VOICE_ID={april.get('voice_id')}")
    else:
        print('No voice with "april" in name found.')
        print("Choose a voice ID from the list above and update your .env file.")


async def run(args: argparse.Namespace) -> int:
    generator = DailyRippleGenerator()

    if args.voices:
        await show_voices(generator)
        return 0

    day = "Monday" if args.test else args.day
    if day:
        result = await generator.generate_single(day)
        if not result["success"]:
            return 1
        logger.info(f"Single episode ready: {result['episode']['filename']}")
        return 0

    summary = await generator.generate_week()
    logger.info("=" * 60)
    logger.info(f"GENERATION COMPLETE - {summary['successful']} successful, {summary['failed']} failed")
    logger.info("=" * 60)
    return 0 if summary["successful"] else 1


def main():
    parser = argparse.ArgumentParser(description="Generate Daily Ripple episode audio")
    group = parser.add_mutually_exclusive_group()
    group.add_argument("--test", action="store_true", help="Generate Monday's episode only")
    group.add_argument("--day", type=str, help="Generate a single weekday episode (e.g. Friday)")
    group.add_argument("--voices", action="store_true", help="List available ElevenLabs voices")

    args = parser.parse_args()

    try:
        sys.exit(asyncio.run(run(args)))
    except AprilError as e:
        logger.error(f"Daily Ripple generation failed: {e.message}")
        sys.exit(1)


if __name__ == "__main__":
    main()
