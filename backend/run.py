"""
Development launcher for the portal API.

    python run.py                 # 127.0.0.1:8000
    python run.py --reload        # auto-reload on code changes
    python run.py --seed          # seed the service catalog first
"""
import argparse
import uvicorn


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="E-Government Portal Core API")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8000)
    parser.add_argument("--reload", action="store_true", help="restart on code changes")
    parser.add_argument("--workers", type=int, default=1, help="ignored with --reload")
    parser.add_argument("--seed", action="store_true", help="create services and sample holders before serving")
    return parser.parse_args()


def main():
    args = parse_args()

    if args.seed:
        from scripts.seed_data import main as seed
        seed()

    workers = 1 if args.reload else args.workers
    print(f"Serving portal API on http://{args.host}:{args.port} (reload={args.reload}, workers={workers})")
    uvicorn.run("portal.main:app", host=args.host, port=args.port, reload=args.reload, workers=workers)


if __name__ == "__main__":
    main()
