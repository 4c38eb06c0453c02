from app.domain.alert_state import AlertState


def test_new_timestamp_reopens_window():
    state = AlertState()

    assert state.observe("2024-06-01T14:00:00") is True
    assert state.should_alert(True)
    state.mark_notified()

    assert state.observe("2024-06-01T14:00:00") is False
    assert not state.should_alert(True)

    assert state.observe("2024-06-01T14:00:10") is True
    assert state.notified is False


def test_no_alert_without_deviations():
    state = AlertState()
    state.observe("t1")
    assert not state.should_alert(False)


def test_to_dict():
    state = AlertState(last_seen_timestamp="t1", notified=True)
    assert state.to_dict() == {"last_seen_timestamp": "t1", "notified": True}
