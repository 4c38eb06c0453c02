from app.enums import MonitoringEvent, NotificationSeverity
from app.schemas.events import AlertRaisedPayload, DataRefreshedPayload, FetchFailedPayload
from app.services.application.notifications_service import EventBusRefreshSink, NotificationsService


def test_emit_alert_stores_and_publishes(mock_event_bus):
    service = NotificationsService(mock_event_bus)

    service.emit_alert("Farm Alert", "Temperature is too high by 3.0°C. ", "Tomato")

    [message] = service.list_messages()
    assert message["kind"] == "alert"
    assert message["profile_name"] == "Tomato"
    assert message["severity"] == NotificationSeverity.WARNING.value

    event, payload = mock_event_bus.publish.call_args[0]
    assert event is MonitoringEvent.ALERT_RAISED
    assert isinstance(payload, AlertRaisedPayload)
    assert payload.body == "Temperature is too high by 3.0°C. "


def test_fetch_failure_is_info_message(mock_event_bus):
    service = NotificationsService(mock_event_bus)

    service.report_fetch_failure("backend down")

    [message] = service.list_messages(kind="fetch_failure")
    assert message["severity"] == "info"
    event, payload = mock_event_bus.publish.call_args[0]
    assert event is MonitoringEvent.FETCH_FAILED
    assert isinstance(payload, FetchFailedPayload)


def test_inbox_is_bounded_and_newest_first(mock_event_bus):
    service = NotificationsService(mock_event_bus, inbox_size=3)

    for i in range(5):
        service.emit_alert("t", f"body {i}", "Tomato")

    assert [m["message"] for m in service.list_messages()] == ["body 4", "body 3", "body 2"]
    assert len(service.list_messages(limit=1)) == 1
    assert service.clear() == 3
    assert service.list_messages() == []


def test_refresh_sink_publishes_each_signal(mock_event_bus):
    sink = EventBusRefreshSink(mock_event_bus)

    sink.signal_data_refreshed()
    sink.signal_data_refreshed()

    assert sink.refresh_count == 2
    event, payload = mock_event_bus.publish.call_args[0]
    assert event is MonitoringEvent.DATA_REFRESHED
    assert isinstance(payload, DataRefreshedPayload)
    assert payload.refresh_count == 2
