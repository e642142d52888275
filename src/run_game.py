import argparse
import logging
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv

from src.audio.effects import SoundEffects
from src.frontend.pygame_app import HanoiApp
from src.game.session import GameSession
from src.utils.config_loader import LOG_LEVELS, ConfigError, load_and_validate_config
from src.utils.templates import TemplateError, load_templates

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Interactive Tower of Hanoi (drag and drop)")
    parser.add_argument("-c", "--config", default="configs/default.py", help="Configuration file (default: configs/default.py)")
    parser.add_argument("-n", "--disks", type=int, default=None, help="Number of disks, clamped to the configured range")
    parser.add_argument("--muted", action="store_true", help="Start with sound muted")
    parser.add_argument("--log-level", default=None, type=str.upper, choices=LOG_LEVELS, help="Logging level, overrides the config")
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> Dict[str, Any]:
    """Load the configuration file, then apply .env and command line overrides.

    Raises:
        ConfigError: If the file is missing or the resulting settings are invalid
    """
    load_dotenv()
    config = load_and_validate_config(args.config)

    if args.disks is not None:
        config["disk_count"] = args.disks
    if args.muted:
        config["muted"] = True
    if args.log_level:
        config["log_level"] = args.log_level

    return config


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=args.log_level or "INFO", format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    try:
        config = build_config(args)
        templates = load_templates(config["template_dir"])
    except (ConfigError, TemplateError) as e:
        logger.error(str(e))
        return 1

    logging.getLogger().setLevel(config.get("log_level", "INFO").upper())

    template_errors = templates.validate_templates()
    if template_errors:
        logger.error(f"Invalid templates: {'; '.join(template_errors)}")
        return 1

    sound_effects = SoundEffects.from_config(config)
    session = GameSession(config, listeners=[sound_effects], templates=templates)
    logger.info(f"Starting game: disks={session.disk_count}, muted={sound_effects.muted}")

    HanoiApp(session, sound_effects, templates, config).run()

    logger.info(f"Final position:\n{session.describe()}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
