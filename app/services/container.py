from __future__ import annotations

import logging
from dataclasses import dataclass

from app.config import AppConfig
from app.domain.photoperiod import Photoperiod
from app.services.application.gallery_service import GalleryService
from app.services.application.history_service import HistoryService
from app.services.application.monitoring_service import FarmMonitoringService
from app.services.application.notifications_service import EventBusRefreshSink, NotificationsService
from app.services.application.reading_service import BackendReadingSource
from app.services.application.vegetation_service import VegetationService
from app.utils.event_bus import EventBus
from infrastructure.database.postgrest_handler import PostgRESTHandler
from infrastructure.database.repositories.history import GalleryRepository, HistoryRepository
from infrastructure.database.repositories.readings import ReadingRepository
from infrastructure.database.repositories.vegetation import VegetationRepository

logger = logging.getLogger(__name__)


@dataclass
class ServiceContainer:
    """Aggregate and manage core backend services."""

    config: AppConfig
    backend: PostgRESTHandler
    event_bus: EventBus
    reading_repo: ReadingRepository
    vegetation_repo: VegetationRepository
    history_repo: HistoryRepository
    gallery_repo: GalleryRepository
    notifications_service: NotificationsService
    refresh_sink: EventBusRefreshSink
    vegetation_service: VegetationService
    monitoring_service: FarmMonitoringService
    history_service: HistoryService
    gallery_service: GalleryService

    @classmethod
    def build(cls, config: AppConfig, *, start_monitoring: bool = False) -> "ServiceContainer":
        """Construct the service container with all dependencies.

        Args:
            config: Application configuration
            start_monitoring: Whether to start the polling thread right away

        Raises:
            ConfigurationError: The Supabase URL or key is missing
        """
        logger.info("Building ServiceContainer...")
        backend = PostgRESTHandler(config.supabase_url, config.supabase_key, timeout=config.backend_timeout_s)
        event_bus = EventBus()

        reading_repo = ReadingRepository(backend, user_id=config.readings_user_id)
        vegetation_repo = VegetationRepository(backend)
        history_repo = HistoryRepository(backend)
        gallery_repo = GalleryRepository(backend)

        notifications_service = NotificationsService(event_bus, inbox_size=config.notification_inbox_size)
        refresh_sink = EventBusRefreshSink(event_bus)
        vegetation_service = VegetationService(vegetation_repo, config.user_id, event_bus=event_bus)
        monitoring_service = FarmMonitoringService(
            reading_source=BackendReadingSource(reading_repo),
            profile_store=vegetation_service,
            alert_sink=notifications_service,
            refresh_sink=refresh_sink,
            poll_interval_s=config.poll_interval_s,
            photoperiod=Photoperiod(config.day_start_hour, config.day_end_hour),
        )

        container = cls(
            config=config,
            backend=backend,
            event_bus=event_bus,
            reading_repo=reading_repo,
            vegetation_repo=vegetation_repo,
            history_repo=history_repo,
            gallery_repo=gallery_repo,
            notifications_service=notifications_service,
            refresh_sink=refresh_sink,
            vegetation_service=vegetation_service,
            monitoring_service=monitoring_service,
            history_service=HistoryService(history_repo, monitoring_service, event_bus=event_bus),
            gallery_service=GalleryService(gallery_repo, config.user_id),
        )

        if start_monitoring:
            monitoring_service.start()

        logger.info("ServiceContainer built successfully.")
        return container

    def shutdown(self) -> None:
        """Release external resources before process exit."""
        self.monitoring_service.stop()
        self.backend.close()
        logger.info("ServiceContainer shutdown complete.")
