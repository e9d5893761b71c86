from __future__ import annotations

import argparse
import logging
import threading
import time

from adapters.time import SystemSleeperPort
from domain.errors import CaptureFailed, NoScreensFound, ScrollCaptureError
from domain.session import CycleResult
from domain.types import CropSpec
from pydantic import ValidationError
from shared.config.loader import load_capture_settings
from shared.contracts.v1.progress import CropEdges

from apps.capture.compose import CaptureApp


def _parse_ints(raw: str, n: int, what: str) -> tuple[int, ...]:
    parts = [p.strip() for p in raw.split(",")]
    if len(parts) != n:
        raise argparse.ArgumentTypeError(f"{what} needs {n} comma-separated values")
    try:
        return tuple(int(p) for p in parts)
    except ValueError as ex:
        raise argparse.ArgumentTypeError(f"bad {what}: {raw!r}") from ex


def _region_arg(raw: str) -> tuple[int, int, int, int]:
    x, y, w, h = _parse_ints(raw, 4, "region")
    return x, y, w, h


def _crop_arg(raw: str) -> CropSpec:
    parts = [p.strip() for p in raw.split(",")]
    if len(parts) != 4:
        raise argparse.ArgumentTypeError("crop needs top,bottom,left,right percentages")
    try:
        top, bottom, left, right = (float(p) for p in parts)
        return CropEdges(top=top, bottom=bottom, left=left, right=right).to_spec()
    except (ValueError, ValidationError) as ex:
        raise argparse.ArgumentTypeError(f"bad crop: {raw!r}") from ex


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(prog="scrollstitch-capture")
    ap.add_argument("--region", type=_region_arg, help="x,y,w,h in logical pixels.")
    ap.add_argument("--out", help="Output image path (default: output_dir/scroll-<ts>.png).")
    ap.add_argument("--crop", type=_crop_arg, help="top,bottom,left,right edge percentages.")
    ap.add_argument("--auto", action="store_true", help="Capture on global scroll events.")
    ap.add_argument("--interval-ms", type=int, help="Polling period when not in --auto mode.")
    ap.add_argument("--max-frames", type=int, default=0, help="Finish after N frames (0 = no cap).")
    ap.add_argument("--profile", help="Settings profile (configs/profiles/<name>.toml).")
    ap.add_argument(
        "--cancel-on-error", action="store_true", help="Discard the image on a fatal error."
    )
    ap.add_argument("--quiet", action="store_true", help="Reduce console output.")
    ap.add_argument("--verbose", action="store_true", help="Debug logging.")
    args = ap.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING if args.quiet else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    settings = load_capture_settings(profile=args.profile)
    if args.region:
        settings = settings.model_copy(update={"region": args.region})

    def say(msg: str) -> None:
        if not args.quiet:
            print(f"[capture] {msg}")

    app = CaptureApp(settings)
    try:
        progress = app.start()
    except ScrollCaptureError as ex:
        print(f"[capture] cannot start: {ex}")
        app.close()
        return 2
    say(f"started: {progress.preview.width}x{progress.total_height}; Ctrl+C to finish")

    fatal: list[ScrollCaptureError] = []
    done = threading.Event()

    def on_result(result: CycleResult) -> None:
        if result.progress is None:
            return
        say(
            f"frame {result.progress.frame_count} delta={result.delta:+d} "
            f"height={result.progress.total_height}"
        )
        if result.sink_error is not None:
            say(f"progress not delivered: {result.sink_error!r}")
        if args.max_frames and result.progress.frame_count >= args.max_frames:
            done.set()

    def on_error(ex: ScrollCaptureError) -> None:
        if ex.recoverable:
            say(f"retrying after: {ex}")
            return
        fatal.append(ex)
        app.publish_state("FAULTED", ex)
        done.set()

    listener = None
    try:
        if args.auto:
            from adapters.scroll_input import PynputScrollEventPort

            listener = PynputScrollEventPort(bounds=app.region)
            listener.subscribe(app.build_trigger(on_result=on_result, on_error=on_error))
            listener.start()
            while not done.wait(0.2):
                pass
        else:
            sleeper = SystemSleeperPort()
            period = (args.interval_ms or settings.poll_interval_ms) / 1000.0
            while not done.is_set():
                sleeper.sleep(period)
                try:
                    result = app.cycle_once()
                except (CaptureFailed, NoScreensFound) as ex:
                    on_error(ex)
                    continue
                except ScrollCaptureError as ex:
                    on_error(ex)
                    break
                if result.updated:
                    on_result(result)
    except KeyboardInterrupt:
        say("stopping...")
    finally:
        if listener is not None:
            listener.stop()

    app.stop()
    try:
        if fatal and args.cancel_on_error:
            app.cancel()
            print(f"[capture] aborted: {fatal[0]}")
            return 1
        t0 = time.perf_counter()
        written = app.finish(args.out, args.crop)
        say(f"saved {written} in {(time.perf_counter() - t0) * 1000:.0f}ms")
        return 1 if fatal else 0
    except ScrollCaptureError as ex:
        print(f"[capture] cannot finish: {ex}")
        return 2
    finally:
        app.close()


if __name__ == "__main__":
    raise SystemExit(main())
