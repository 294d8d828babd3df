# main.py
"""Main entry point for the trading journal."""
import asyncio
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from src.config.settings import Settings
from src.dashboard.runtime import start_controller

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='[%(asctime)s] %(levelname)s: %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)
logger = logging.getLogger(__name__)

CONFIG_PATH = Path("config/settings.yaml")
DASHBOARD_PATH = Path(__file__).parent / "src" / "dashboard" / "Home.py"


def validate_env_vars(settings: Settings) -> None:
    """Check the credentials the configured features need.

    Raises:
        SystemExit: If the selected storage backend has no credentials.
    """
    if settings.storage.backend == "supabase" and not settings.supabase.is_configured:
        logger.error("Missing required environment variables: SUPABASE_URL, SUPABASE_ANON_KEY")
        logger.error("Please check your .env file")
        sys.exit(1)

    if settings.coach.enabled and not settings.anthropic.is_configured:
        logger.warning("ANTHROPIC_API_KEY not set, the AI coach is disabled")
    if not settings.github.token:
        logger.info("GITHUB_TOKEN not set, gist backups need a token in the settings page")


def create_data_dirs(settings: Settings) -> None:
    """Create required data directories if they don't exist."""
    Path(settings.journal.data_dir).mkdir(parents=True, exist_ok=True)
    logger.info("Data directories verified")


def print_startup_banner(settings: Settings) -> None:
    """Print system startup banner."""
    logger.info("=" * 60)
    logger.info(f"Starting {settings.system.name}")
    logger.info(f"Storage: {settings.storage.backend}")
    logger.info(f"Version: {settings.system.version}")
    logger.info("=" * 60)


def load_and_validate_config(config_path: Path = CONFIG_PATH) -> Settings:
    """Load and validate configuration.

    Returns:
        Settings object loaded from YAML.

    Raises:
        SystemExit: If config file missing, env vars invalid, or YAML parsing fails.
    """
    load_dotenv()
    logger.info("✓ Loaded environment variables")

    if not config_path.exists():
        logger.error(f"{config_path} not found")
        sys.exit(1)

    try:
        settings = Settings.from_yaml(config_path)
        logger.info(f"✓ Settings loaded from {config_path}")
    except Exception as e:
        logger.error(f"Failed to parse {config_path}: {e}")
        sys.exit(1)

    logging.getLogger().setLevel(settings.system.log_level)
    validate_env_vars(settings)
    logger.info("✓ Environment variables validated")

    create_data_dirs(settings)
    return settings


async def prepare_journal(settings: Settings) -> None:
    """Finish interrupted deletes and create the first admin if needed."""
    controller = await start_controller(settings)
    if controller.state.notices:
        for notice in controller.state.notices:
            logger.warning(f"{notice.title}: {notice.message}")
    else:
        logger.info("✓ Journal storage ready")


def main() -> None:
    settings = load_and_validate_config()
    print_startup_banner(settings)
    asyncio.run(prepare_journal(settings))

    from streamlit.web import cli as stcli

    sys.argv = ["streamlit", "run", str(DASHBOARD_PATH)]
    sys.exit(stcli.main())


if __name__ == "__main__":
    main()
