from app.services.protocols import AlertSink, ProfileStore, ReadingSource, RefreshSink


def test_monitor_wired_to_backend_adapters(container):
    monitor = container.monitoring_service

    assert isinstance(monitor.reading_source, ReadingSource)
    assert isinstance(monitor.profile_store, ProfileStore)
    assert isinstance(monitor.alert_sink, AlertSink)
    assert isinstance(monitor.refresh_sink, RefreshSink)
    assert monitor.profile_store is container.vegetation_service
    assert monitor.alert_sink is container.notifications_service


def test_monitor_not_started_by_default(container):
    assert container.monitoring_service.is_running is False


def test_shutdown_is_repeatable(container):
    container.monitoring_service.start()
    container.shutdown()
    container.shutdown()
    assert container.monitoring_service.is_running is False
