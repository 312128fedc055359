"""Mais Maze launcher

Loads configuration, builds the game session and serves the HTTP API.
"""

import sys
from pathlib import Path

import uvicorn
import yaml
from dotenv import load_dotenv

from maismaze.core.state import Settings
from maismaze.server.api import create_app
from maismaze.server.controller import build_controller

# environment overrides (.env)
load_dotenv()


def load_config(path: str = "config.yaml") -> dict:
    """Load the YAML config file, falling back to defaults."""
    config_path = Path(path)
    if not config_path.exists():
        print(f"Warning: {path} not found, using default config")
        return {}

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            return yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as exc:
        print(f"Warning: Failed to load config ({exc}), using default config")
        return {}


def main(argv: list[str] | None = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    config_file = argv[0] if argv else "config.yaml"

    print("=" * 60)
    print("Mais Maze")
    print("=" * 60)

    print("Loading configuration...")
    settings = Settings()
    config = load_config(config_file)
    if config:
        settings.load_from_dict(config)
    print(f"[OK] Steering: {settings.steering_method}, labyrinth size: {settings.labyrinth_size}")

    try:
        controller = build_controller(settings=settings)
    except (OSError, ValueError) as exc:
        print(f"[!] Could not set up the game: {exc}")
        return 1

    app = create_app(controller)

    url = f"http://{settings.server_host}:{settings.server_port}"
    print("=" * 60)
    print(f"Server running at: {url}")
    print(f"API docs: {url}/docs")
    print("=" * 60)

    server = uvicorn.Server(
        uvicorn.Config(
            app,
            host=settings.server_host,
            port=settings.server_port,
            log_level="info",
        )
    )
    try:
        server.run()
    except KeyboardInterrupt:
        print("\nServer interrupted")
    finally:
        controller.stop_game()
    return 0


if __name__ == "__main__":
    sys.exit(main())
