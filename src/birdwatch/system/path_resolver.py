import os
from pathlib import Path


class PathResolver:
    """Central authority for all file path resolution in Birdwatch.

    Uses environment variables for configuration with sensible defaults.
    """

    def __init__(self) -> None:
        """Initialize PathResolver with environment-based configuration."""
        self.app_dir = Path(os.getenv("BIRDWATCH_APP", "/opt/birdwatch"))
        self.data_dir = Path(os.getenv("BIRDWATCH_DATA", "/var/lib/birdwatch"))

    def get_birdwatch_config_path(self) -> Path:
        """Get the path to the main configuration file.

        Checks BIRDWATCH_CONFIG environment variable first, then falls back to default.
        """
        config_path = os.getenv("BIRDWATCH_CONFIG")
        if config_path:
            return Path(config_path)

        return self.data_dir / "config" / "birdwatch.yaml"

    def get_repo_path(self) -> Path:
        """Get the path to the Birdwatch repository root."""
        return self.app_dir

    def get_data_dir(self) -> Path:
        """Get the data directory where all runtime data is stored."""
        return self.data_dir

    def get_database_dir(self) -> Path:
        """Get the directory for database files."""
        return self.data_dir / "database"

    def get_database_path(self) -> Path:
        """Get the path to the main SQLite database."""
        return self.data_dir / "database" / "birdwatch.db"
