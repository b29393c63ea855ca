"""
Configuration settings for the scheduling engine.
Load configuration from environment variables or a .env file.
"""
import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables from .env file
env_file = Path(__file__).parent.parent.parent / '.env'
if env_file.exists():
    load_dotenv(env_file)


class Settings:
    """Application settings loaded from environment variables."""

    # Project paths
    PROJECT_ROOT = Path(__file__).parent.parent.parent
    DATA_DIR = Path(os.getenv('SCHEDULING_DATA_DIR', str(PROJECT_ROOT / 'data')))
    OUTPUT_DATA_DIR = DATA_DIR / 'output'

    # Logging
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
    LOG_DIR = Path(os.getenv('LOG_DIR', str(PROJECT_ROOT / 'logs')))
    LOG_TO_FILE = os.getenv('LOG_TO_FILE', 'false').lower() in ('1', 'true', 'yes')

    # ============================================================================
    # Critical Path Analysis
    # ============================================================================
    NEAR_CRITICAL_THRESHOLD_DAYS = int(os.getenv('NEAR_CRITICAL_THRESHOLD_DAYS', '5'))

    # Input file names (mirror the tasks / task_dependencies tables)
    TASKS_FILE = os.getenv('TASKS_FILE', 'tasks.csv')
    DEPENDENCIES_FILE = os.getenv('DEPENDENCIES_FILE', 'task_dependencies.csv')

    @classmethod
    def validate_required_settings(cls) -> list[str]:
        """
        Validate that settings hold usable values.
        Returns list of problems found.
        """
        problems = []

        if cls.NEAR_CRITICAL_THRESHOLD_DAYS < 0:
            problems.append('NEAR_CRITICAL_THRESHOLD_DAYS must be >= 0')

        return problems


# Create settings instance
settings = Settings()
