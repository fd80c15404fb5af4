import argparse
import json
from pathlib import Path
from typing import Optional

from config.settings import RecapSettings, build_enhancement_config
from core.errors import EnhancementError
from core.pipeline import EnhancementPipeline
from features.session.event_log import load_session
from models.results import EnhancementResult
from models.serde import to_jsonable
from models.session import OutputFormat
from models.state import ProgressUpdate
from utils.truncation import truncate_large_lists


def print_summary(result: EnhancementResult) -> None:
    print("\n" + "=" * 80)
    print("SUMMARY")
    print("=" * 80)

    print(f"Output:          {result.output_path}")
    print(f"Format:          {result.output_format.display_name}")
    print(f"Size:            {result.size_mb:.2f} MB")
    print(f"Frames:          {result.frame_count}")
    print(f"Duration:        {result.duration_seconds:.1f}s")

    if result.source_duration_seconds:
        print(f"Source duration: {result.source_duration_seconds:.1f}s")

    if result.speed_map:
        dead = sum(r.duration for r in result.speed_map.ranges)
        print(f"Dead time:       {dead:.1f}s in {len(result.speed_map)} ranges")

    print(f"Steps:           {len(result.steps)}")
    print(f"Total time:      {result.processing_time_seconds:.2f}s")


def print_progress(update: ProgressUpdate) -> None:
    print(f"  {update.progress * 100:5.1f}%  {update.status}")


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Turn a screen recording into a shareable GIF")
    parser.add_argument("video_path", help="Путь к сырой записи экрана.")
    parser.add_argument("events_path", nargs="?", help="JSON / JSON lines лог событий указателя.")
    parser.add_argument("-o", "--output", type=Path, help="Путь для сохранения результата")
    parser.add_argument(
        "--format",
        choices=[f.value for f in OutputFormat],
        help="Формат результата (по умолчанию из RECAP_OUTPUT_FORMAT).",
    )
    parser.add_argument("--display-width", type=float, help="Ширина экрана в точках")
    parser.add_argument("--display-height", type=float, help="Высота экрана в точках")
    return parser.parse_args()


def main() -> None:
    args = parse_args()

    settings = RecapSettings()
    if args.format:
        settings = settings.model_copy(update={"output_format": OutputFormat(args.format)})
    config = build_enhancement_config(settings)

    display_size: Optional[tuple[float, float]] = None
    if args.display_width and args.display_height:
        if args.display_width < 0 or args.display_height < 0:
            parser.error("--display-width/--display-height must be positive")
        display_size = (args.display_width, args.display_height)

    session = load_session(args.video_path, args.events_path, display_size=display_size)
    output_path = args.output or Path(args.video_path).with_suffix(f".{config.output_format.file_extension}")
    if output_path.resolve() == Path(args.video_path).resolve():
        output_path = output_path.with_name(f"{output_path.stem}_recap{output_path.suffix}")

    print(f"Session:         {session.display_name} ({session.formatted_duration})")
    print(f"Pointer events:  {len(session.pointer_events)} ({session.click_count} clicks)")
    print("Starting enhancement pipeline...")
    print("-" * 50)

    pipeline = EnhancementPipeline(config, on_progress=print_progress)
    try:
        result = pipeline.run(session, str(output_path))
    except EnhancementError as exc:
        print(f"\nPipeline failed: {exc.reason}")
        raise SystemExit(1) from exc

    print("\nPipeline completed successfully!")
    print_summary(result)

    print("\n" + "=" * 80)
    print("RESULT (JSON)")
    print("=" * 80)
    truncated = truncate_large_lists(to_jsonable(result), keep_keys=("steps",))
    print(json.dumps(truncated, indent=2, ensure_ascii=False))


if __name__ == "__main__":
    main()
