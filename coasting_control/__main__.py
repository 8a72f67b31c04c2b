# coasting_control/__main__.py
import argparse, logging, math
from pathlib import Path

from coasting_decay import DecayEnvironment, coast_table, resistance_to_end_after
from common.logging_config import setup_logging
from .session import CoastingSession, CoastObserver
from .scheduling import ManualFrameScheduler


class PrintingObserver(CoastObserver):
    def on_progress(self, elapsed, velocity, distance):
        print(f"t = {elapsed:.4f}  v = {velocity:.6f}  d = {distance:.6f}")

    def on_completed(self, elapsed):
        print(f"completed at t = {elapsed:.4f}")


def simulate(env, v0, frame_rate=60.0):
    scheduler = ManualFrameScheduler(frame_rate=frame_rate)
    session = CoastingSession(env, v0, scheduler=scheduler, observer=PrintingObserver(), clock=scheduler.clock)
    session.start()
    scheduler.run_until_idle()
    return session


def main(argv=None):
    p = argparse.ArgumentParser(description="Exponential-decay coasting: stopping time and distance of a fling.")
    p.add_argument("--v0", type=float, help="initial speed (magnitude, > 0)")
    p.add_argument("--r", type=float, default=0.95, help="decay ratio per second, 0 < r < 1 (default: 0.95)")
    p.add_argument("--vmin", type=float, default=0.1, help="speed floor, > 0 (default: 0.1)")
    p.add_argument("--distance", type=float, help="also print the time needed to travel this distance")
    p.add_argument("--end-after", type=float, dest="end_after", metavar="T",
                   help="print the decay ratio that stops a coast from --v0 (or --max-speed) after T seconds")
    p.add_argument("--max-speed", type=float, dest="max_speed",
                   help="fling speed used by --end-after when --v0 is not given")
    p.add_argument("--simulate", action="store_true", help="replay the coast frame by frame at 60 Hz")
    p.add_argument("--points", type=int, default=50, help="samples for --save-csv (default: 50)")
    p.add_argument("--save-csv", type=str, default=None, dest="save_csv", help="write t, velocity, distance to CSV")
    p.add_argument("--verbose", action="store_true", help="debug logging")
    args = p.parse_args(argv)

    setup_logging(logging.DEBUG if args.verbose else logging.WARNING)

    if args.end_after is not None:
        speed = args.v0 if args.v0 is not None else args.max_speed
        if speed is None:
            p.error("--end-after needs --v0 or --max-speed")
        r = resistance_to_end_after(args.end_after, speed, args.vmin)
        if math.isnan(r):
            raise SystemExit("no decay ratio in (0, 1) stops that coast in that time")
        print(f"r = {r:.6f}")
        return

    if args.v0 is None:
        p.error("--v0 is required")

    try:
        env = DecayEnvironment(r=args.r, vmin=args.vmin)
    except ValueError as e:
        p.error(str(e))

    session = CoastingSession(env, args.v0)
    print(f"t_stop = {session.t_stop:.6f}  |  distance_stop = {session.distance_stop:.6f}")
    if args.distance is not None:
        print(f"t(distance={args.distance:g}) = {session.time_for_distance(args.distance):.6f}")

    if args.simulate:
        simulate(env, args.v0)

    if args.save_csv:
        try:
            df = coast_table(args.v0, env, num_points=args.points)
        except ValueError as e:
            raise SystemExit(f"--save-csv: {e}")
        out = Path(args.save_csv); out.parent.mkdir(parents=True, exist_ok=True)
        df.to_csv(out, index=False)
        print(f"[OK] wrote {len(df)} rows -> {out}")


if __name__ == "__main__":
    main()
