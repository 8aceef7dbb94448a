from datetime import datetime
from pathlib import Path
from typing import Any

import pytest
from dependency_injector import providers

from birdwatch.birds.manager import BirdManager
from birdwatch.birds.models import Bird, BirdCreate
from birdwatch.config import ConfigManager
from birdwatch.database.core import CoreDatabaseService
from birdwatch.database.store import EntityStore
from birdwatch.sightings.manager import SightingManager
from birdwatch.sightings.models import Sighting, SightingCreate
from birdwatch.system.path_resolver import PathResolver
from birdwatch.web.core.container import Container
from birdwatch.web.core.factory import create_app


@pytest.fixture(scope="session")
def repo_root() -> Path:
    """Get the absolute path to the repository root."""
    return Path(__file__).parent.parent.resolve()


@pytest.fixture
def path_resolver(tmp_path: Path, repo_root: Path) -> PathResolver:
    """Provide a PathResolver whose writable paths all live under tmp_path.

    Tests must never touch /var/lib/birdwatch, so both the attribute and the
    getter methods are redirected.
    """
    resolver = PathResolver()

    temp_database_dir = tmp_path / "database"
    temp_database_dir.mkdir(parents=True)
    temp_config_dir = tmp_path / "config"
    temp_config_dir.mkdir(parents=True)
    temp_data_dir = tmp_path / "data"
    temp_data_dir.mkdir(parents=True)

    resolver.data_dir = temp_data_dir
    resolver.app_dir = repo_root
    resolver.get_data_dir = lambda: temp_data_dir
    resolver.get_database_dir = lambda: temp_database_dir
    resolver.get_database_path = lambda: temp_database_dir / "birdwatch.db"
    resolver.get_birdwatch_config_path = lambda: temp_config_dir / "birdwatch.yaml"
    resolver.get_repo_path = lambda: repo_root
    return resolver


@pytest.fixture
async def core_database(path_resolver):
    """Provide an initialized database in the temp directory, disposed afterwards."""
    service = CoreDatabaseService(path_resolver.get_database_path())
    await service.initialize()
    yield service
    await service.dispose()


@pytest.fixture
def bird_store(core_database) -> EntityStore[Bird]:
    """Provide a store over the birds table."""
    return EntityStore(core_database, Bird)


@pytest.fixture
def sighting_store(core_database) -> EntityStore[Sighting]:
    """Provide a store over the sightings table."""
    return EntityStore(core_database, Sighting)


@pytest.fixture
def bird_manager(bird_store) -> BirdManager:
    """Provide a BirdManager backed by the temp database."""
    return BirdManager(bird_store)


@pytest.fixture
def sighting_manager(sighting_store, bird_store) -> SightingManager:
    """Provide a SightingManager backed by the temp database."""
    return SightingManager(sighting_store, bird_store)


@pytest.fixture
async def app_with_temp_data(path_resolver):
    """Create FastAPI app with properly isolated paths.

    The Container's providers are overridden at class level BEFORE the app is
    created so nothing is built against the default /var/lib/birdwatch paths.
    ASGITransport does not run the lifespan, so the database is initialized
    here.
    """
    Container.path_resolver.override(providers.Singleton(lambda: path_resolver))
    Container.database_path.override(providers.Factory(lambda: path_resolver.get_database_path()))

    manager = ConfigManager(path_resolver)
    test_config = manager.load()
    Container.config.override(providers.Singleton(lambda: test_config))

    temp_db_service = CoreDatabaseService(path_resolver.get_database_path())
    await temp_db_service.initialize()
    Container.core_database.override(providers.Singleton(lambda: temp_db_service))

    app = create_app()

    yield app

    await temp_db_service.dispose()

    Container.path_resolver.reset_override()
    Container.database_path.reset_override()
    Container.config.reset_override()
    Container.core_database.reset_override()


@pytest.fixture
def model_factory():
    """Create a factory for test model instances with sensible defaults."""

    class ModelFactory:
        """Factory class for creating test model instances."""

        @staticmethod
        def create_bird(**kwargs: Any) -> Bird:
            """Create a Bird table record (no id unless given)."""
            defaults = {
                "name": "Sparrow",
                "color": "Brown",
                "weight": 24.0,
                "height": 15.0,
            }
            defaults.update(kwargs)
            return Bird(**defaults)

        @staticmethod
        def create_bird_payload(**kwargs: Any) -> BirdCreate:
            """Create a validated BirdCreate payload."""
            defaults = {
                "name": "Sparrow",
                "color": "Brown",
                "weight": 24.0,
                "height": 15.0,
            }
            defaults.update(kwargs)
            return BirdCreate(**defaults)

        @staticmethod
        def create_sighting(**kwargs: Any) -> Sighting:
            """Create a Sighting table record (no id unless given)."""
            defaults = {
                "bird_id": 1,
                "location": "Central Park",
                "observed_at": datetime(2024, 5, 1, 8, 30, 0),
            }
            defaults.update(kwargs)
            return Sighting(**defaults)

        @staticmethod
        def create_sighting_payload(**kwargs: Any) -> SightingCreate:
            """Create a validated SightingCreate payload."""
            defaults = {
                "bird_id": 1,
                "location": "Central Park",
                "observed_at": datetime(2024, 5, 1, 8, 30, 0),
            }
            defaults.update(kwargs)
            return SightingCreate(**defaults)

    return ModelFactory()
