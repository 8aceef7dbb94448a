"""Dependency injection container for the Birdwatch application."""

from dependency_injector import containers, providers

from birdwatch.birds.manager import BirdManager
from birdwatch.birds.models import Bird
from birdwatch.database.core import CoreDatabaseService
from birdwatch.database.store import EntityStore
from birdwatch.sightings.manager import SightingManager
from birdwatch.sightings.models import Sighting
from birdwatch.system.path_resolver import PathResolver
from birdwatch.web.core.config import get_config


class Container(containers.DeclarativeContainer):
    """Application dependency injection container.

    Every service is a singleton within one container instance; each call to
    ``create_app`` builds its own container, so separate apps never share a
    database engine or a store write lock.
    """

    # Core infrastructure services - singletons
    path_resolver = providers.Singleton(PathResolver)

    config = providers.Singleton(
        get_config,
        path_resolver=path_resolver,
    )

    database_path = providers.Factory(
        lambda resolver: resolver.get_database_path(),
        resolver=path_resolver,
    )

    core_database = providers.Singleton(
        CoreDatabaseService,
        db_path=database_path,
    )

    # Record stores - one per table
    bird_store = providers.Singleton(
        EntityStore,
        database_service=core_database,
        model=Bird,
    )

    sighting_store = providers.Singleton(
        EntityStore,
        database_service=core_database,
        model=Sighting,
    )

    # Query facades used by the routers
    bird_manager = providers.Singleton(
        BirdManager,
        store=bird_store,
    )

    sighting_manager = providers.Singleton(
        SightingManager,
        store=sighting_store,
        bird_store=bird_store,
    )
