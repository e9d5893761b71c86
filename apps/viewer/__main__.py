from __future__ import annotations

import argparse
import time

from shared.config.loader import load_viewer_settings

from apps.viewer.compose import build_sub


def _summarize(msg: dict) -> str:
    topic = msg.get("topic")
    if "error" in msg and "data" not in msg:
        return f"{topic}: <{msg['error'].get('code')}>"
    data = msg.get("data", {}) or {}
    if topic == "progress":
        return (
            f"progress: frames={data.get('frame_count')} height={data.get('total_height')} "
            f"preview={data.get('preview_width')}x{data.get('preview_height')}"
        )
    if topic == "state":
        err = data.get("error") or {}
        suffix = f" ({err.get('code')})" if err else ""
        return f"state: {data.get('state')}{suffix}"
    return f"{topic}: {data}"


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(prog="scrollstitch-viewer")
    ap.add_argument("--watch", action="store_true", help="Print capture events until Ctrl+C.")
    ap.add_argument("--tui", action="store_true", help="Run the Textual TUI.")
    ap.add_argument("--profile", help="Settings profile (configs/profiles/<name>.toml).")
    ap.add_argument("--quiet", action="store_true", help="Reduce console output.")
    ap.add_argument(
        "--connect-wait-ms", type=int, default=100, help="PUB/SUB settle time before first recv."
    )
    ap.add_argument(
        "--topics", default="", help="Comma-separated list of topic filters (e.g., progress,state)."
    )
    args = ap.parse_args(argv)
    topics = {t.strip() for t in args.topics.split(",") if t.strip()}

    settings = load_viewer_settings(profile=args.profile)

    if args.tui:
        from apps.viewer.tui import ProgressViewerTUI

        ProgressViewerTUI(settings=settings).run()
        return 0

    if not args.watch:
        ap.print_help()
        return 0

    sub = build_sub(settings)
    if not args.quiet:
        print(f"[viewer] progress_sub={settings.progress_sub}")
    time.sleep(max(args.connect_wait_ms, 0) / 1000.0)

    try:
        while True:
            msg = sub.recv(timeout_ms=250)
            if not msg:
                continue
            if topics and msg.get("topic") not in topics:
                continue
            print(f"[viewer] {_summarize(msg)}")
    except KeyboardInterrupt:
        if not args.quiet:
            print("\n[viewer] exiting.")
        return 0
    finally:
        sub.close()


if __name__ == "__main__":
    raise SystemExit(main())
