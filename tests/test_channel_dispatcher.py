"""Tests for per-recipient channel delivery."""

from __future__ import annotations

from datetime import datetime
from functools import partial

import anyio
import pytest

from app.application.use_cases.notifications import (
    ChannelDispatcher,
    build_notification,
    consolidate,
    group_by_user,
)
from app.domain.entities import LOG_STATUS_FAIL, LOG_STATUS_SUCCESS, NotificationType, Recipient
from app.infrastructure.email_templates import EmailContent

CREATED_AT = datetime(2024, 5, 1, 12, 0)


def _record(user_id: str, description: str, *, title: str = "Update", type=NotificationType.ANNOUNCEMENT):
    return build_notification(
        user_id=user_id,
        type=type,
        action_token="notifications.actions.notificationActionAnnouncementPublished",
        title=title,
        description=description,
        created_at=CREATED_AT,
    )


def _contact(user_id: str, **overrides) -> Recipient:
    values = {
        "user_id": user_id,
        "email": f"{user_id}@example.com",
        "phone_number": "+381641234567",
        "sms_opt_in": True,
        "email_opt_in": True,
    }
    values.update(overrides)
    return Recipient(**values)


def _fan_out(dispatcher, records, **kwargs):
    return anyio.run(partial(dispatcher.fan_out, records, **kwargs))


def test_group_by_user_keeps_first_seen_order():
    records = [_record("b", "1"), _record("a", "2"), _record("b", "3")]

    grouped = group_by_user(records)

    assert list(grouped) == ["b", "a"]
    assert [item.description for item in grouped["b"]] == ["1", "3"]


def test_single_notification_keeps_its_own_fields():
    message = consolidate([_record("a", "<p>Water off</p>", title="Maintenance", type="alert")])

    assert message.title == "Maintenance"
    assert message.body == "Water off"
    assert message.type is NotificationType.ALERT


def test_multiple_notifications_are_consolidated_into_digest(
    contact_resolver_factory, operation_log, message_transport
):
    """Three records for one user produce a single digest message."""

    records = [
        _record("ana", "<p>First</p>", type=NotificationType.REMINDER),
        _record("ana", "Second &amp; more"),
        _record("ana", "<b>Third</b>", type=NotificationType.ALERT),
    ]
    dispatcher = ChannelDispatcher(
        contact_resolver_factory({"ana": _contact("ana")}),
        operation_log,
        message_transport=message_transport,
    )

    report = _fan_out(dispatcher, records)

    assert report.users == 1
    assert report.sms_sent == 1
    assert len(message_transport.sent) == 1
    sent = message_transport.sent[0]
    assert sent["title"] == "3 new notifications"
    assert sent["body"] == "First\nSecond & more\nThird"
    assert sent["type"] is NotificationType.REMINDER


def test_contacts_are_loaded_in_one_batch(contact_resolver_factory, operation_log, message_transport):
    resolver = contact_resolver_factory({"a": _contact("a"), "b": _contact("b")})
    dispatcher = ChannelDispatcher(resolver, operation_log, message_transport=message_transport)

    _fan_out(dispatcher, [_record("a", "x"), _record("b", "y"), _record("a", "z")])

    assert resolver.calls == [["a", "b"]]


def test_opted_out_and_phoneless_recipients_get_no_sms(
    contact_resolver_factory, operation_log, message_transport
):
    contacts = {
        "out": _contact("out", sms_opt_in=False),
        "nophone": _contact("nophone", phone_number=None),
        "in": _contact("in"),
    }
    records = [_record("out", "1"), _record("out", "2"), _record("nophone", "3"), _record("in", "4")]
    dispatcher = ChannelDispatcher(
        contact_resolver_factory(contacts), operation_log, message_transport=message_transport
    )

    report = _fan_out(dispatcher, records, channels={"sms"})

    assert [sent["to"] for sent in message_transport.sent] == ["+381641234567"]
    assert report.sms_sent == 1
    assert report.sms_skipped == 2
    assert report.sms_errors == 0


def test_unknown_recipient_is_skipped(contact_resolver_factory, operation_log, message_transport):
    dispatcher = ChannelDispatcher(
        contact_resolver_factory({}), operation_log, message_transport=message_transport
    )

    report = _fan_out(dispatcher, [_record("ghost", "boo")])

    assert message_transport.sent == []
    assert report.sms_skipped == 1


def test_one_failing_recipient_does_not_block_others(
    contact_resolver_factory, operation_log, log_sink, message_transport
):
    contacts = {
        "broken": _contact("broken", phone_number="+381600000000"),
        "fine": _contact("fine"),
    }
    message_transport.fail_for.add("+381600000000")
    dispatcher = ChannelDispatcher(
        contact_resolver_factory(contacts), operation_log, message_transport=message_transport
    )

    report = _fan_out(dispatcher, [_record("broken", "a"), _record("fine", "b")])

    assert report.sms_sent == 1
    assert report.sms_errors == 1
    assert [sent["to"] for sent in message_transport.sent] == ["+381641234567"]
    assert "fanOutSms" in log_sink.actions(LOG_STATUS_FAIL)
    assert "fanOutSms" in log_sink.actions(LOG_STATUS_SUCCESS)
    assert any("provider rejected" in error for error in report.errors)


def test_malformed_phone_number_is_a_counted_failure(
    contact_resolver_factory, operation_log, log_sink, message_transport
):
    contacts = {"bad": _contact("bad", phone_number="064-123-456"), "good": _contact("good")}
    dispatcher = ChannelDispatcher(
        contact_resolver_factory(contacts), operation_log, message_transport=message_transport
    )

    report = _fan_out(dispatcher, [_record("bad", "a"), _record("good", "b")], channels={"sms"})

    assert report.sms_errors == 1
    assert report.sms_sent == 1
    failure = next(entry for entry in log_sink.entries if entry.status == LOG_STATUS_FAIL)
    assert failure.action == "fanOutSms"
    assert failure.user_id == "bad"


def test_phone_number_is_normalized_before_sending(
    contact_resolver_factory, operation_log, message_transport
):
    contacts = {"ana": _contact("ana", phone_number=" +381 64 111 2222 ")}
    dispatcher = ChannelDispatcher(
        contact_resolver_factory(contacts), operation_log, message_transport=message_transport
    )

    _fan_out(dispatcher, [_record("ana", "hello")])

    assert message_transport.sent[0]["to"] == "+381641112222"


def test_successful_send_logs_provider_id(
    contact_resolver_factory, operation_log, log_sink, message_transport
):
    dispatcher = ChannelDispatcher(
        contact_resolver_factory({"ana": _contact("ana")}),
        operation_log,
        message_transport=message_transport,
    )

    _fan_out(dispatcher, [_record("ana", "hello")])

    entry = next(entry for entry in log_sink.entries if entry.action == "fanOutSms")
    assert entry.payload["provider_id"] == "SM1"
    assert entry.type == "external"
    summary = next(entry for entry in log_sink.entries if entry.action == "fanOutNotifications")
    assert summary.payload["sms_sent"] == 1


def test_email_channel_sends_digest_to_opted_in_address(
    contact_resolver_factory, operation_log, email_transport, message_transport
):
    contacts = {"ana": _contact("ana"), "ben": _contact("ben", email_opt_in=False)}
    dispatcher = ChannelDispatcher(
        contact_resolver_factory(contacts),
        operation_log,
        email_transport=email_transport,
        message_transport=message_transport,
    )

    report = _fan_out(
        dispatcher, [_record("ana", "one"), _record("ana", "two"), _record("ben", "three")]
    )

    assert report.email_sent == 1
    assert report.email_skipped == 1
    assert email_transport.sent[0]["to"] == ["ana@example.com"]
    assert email_transport.sent[0]["subject"] == "2 new notifications"


def test_sms_only_fan_out_sends_no_email(
    contact_resolver_factory, operation_log, email_transport, message_transport
):
    dispatcher = ChannelDispatcher(
        contact_resolver_factory({"ana": _contact("ana")}),
        operation_log,
        email_transport=email_transport,
        message_transport=message_transport,
    )

    report = _fan_out(dispatcher, [_record("ana", "one")], channels={"sms"})

    assert email_transport.sent == []
    assert report.email_sent == 0
    assert report.sms_sent == 1


def test_disabled_channels_are_not_counted(contact_resolver_factory, operation_log):
    dispatcher = ChannelDispatcher(contact_resolver_factory({"ana": _contact("ana")}), operation_log)

    report = _fan_out(dispatcher, [_record("ana", "one")])

    assert report.as_payload() == {
        "users": 1,
        "sms_sent": 0,
        "sms_errors": 0,
        "sms_skipped": 0,
        "email_sent": 0,
        "email_errors": 0,
        "email_skipped": 0,
    }


def test_contact_lookup_failure_is_reported_not_raised(operation_log, log_sink, message_transport):
    class BrokenResolver:
        def lookup_contacts_by_user_ids(self, user_ids):
            raise RuntimeError("database is down")

    dispatcher = ChannelDispatcher(BrokenResolver(), operation_log, message_transport=message_transport)

    report = _fan_out(dispatcher, [_record("ana", "one")])

    assert report.errors == ["database is down"]
    assert message_transport.sent == []
    assert log_sink.actions(LOG_STATUS_FAIL) == ["fanOutNotifications"]


def test_fan_out_survives_failing_log_sink(
    contact_resolver_factory, failing_operation_log, message_transport
):
    message_transport.fail_for.add("+381600000000")
    contacts = {"a": _contact("a"), "b": _contact("b", phone_number="+381600000000")}
    dispatcher = ChannelDispatcher(
        contact_resolver_factory(contacts), failing_operation_log, message_transport=message_transport
    )

    report = _fan_out(dispatcher, [_record("a", "x"), _record("b", "y")])

    assert report.sms_sent == 1
    assert report.sms_errors == 1


def test_fan_out_with_no_records_does_nothing(contact_resolver_factory, operation_log, log_sink):
    resolver = contact_resolver_factory({})
    dispatcher = ChannelDispatcher(resolver, operation_log)

    report = _fan_out(dispatcher, [])

    assert report.users == 0
    assert resolver.calls == []
    assert log_sink.entries == []


def test_send_bulk_email_isolates_failures(
    contact_resolver_factory, operation_log, log_sink, email_transport
):
    email_transport.fail_for.add("broken@example.com")
    dispatcher = ChannelDispatcher(
        contact_resolver_factory({}), operation_log, email_transport=email_transport
    )
    content = EmailContent(subject="New poll has been published", html="<p>Vote</p>")

    report = anyio.run(
        dispatcher.send_bulk_email,
        ["one@example.com", "broken@example.com", "two@example.com"],
        content,
    )

    assert report.email_sent == 2
    assert report.email_errors == 1
    assert sorted(sent["to"][0] for sent in email_transport.sent) == [
        "one@example.com",
        "two@example.com",
    ]
    entry = log_sink.entries[-1]
    assert entry.action == "sendBulkEmail"
    assert entry.payload["errors"] == 1


def test_send_bulk_email_logs_every_address(
    contact_resolver_factory, operation_log, log_sink, email_transport
):
    email_transport.fail_for.add("broken@example.com")
    dispatcher = ChannelDispatcher(
        contact_resolver_factory({}), operation_log, email_transport=email_transport
    )
    content = EmailContent(subject="New announcement: Water", html="<p>Water off</p>")

    anyio.run(dispatcher.send_bulk_email, ["one@example.com", "broken@example.com"], content)

    failures = [entry for entry in log_sink.entries if entry.status == LOG_STATUS_FAIL]
    assert [(entry.action, entry.payload["to"], entry.error) for entry in failures] == [
        ("sendEmail", "broken@example.com", "mailbox unavailable")
    ]
    delivered = [
        entry
        for entry in log_sink.entries
        if entry.action == "sendEmail" and entry.status == LOG_STATUS_SUCCESS
    ]
    assert [(entry.payload["to"], entry.payload["provider_id"]) for entry in delivered] == [
        ("one@example.com", "email-1")
    ]
    assert log_sink.entries[-1].action == "sendBulkEmail"


def test_fan_out_rejects_a_bare_channel_string(contact_resolver_factory, operation_log, message_transport):
    dispatcher = ChannelDispatcher(
        contact_resolver_factory({"ana": _contact("ana")}),
        operation_log,
        message_transport=message_transport,
    )

    with pytest.raises(TypeError):
        _fan_out(dispatcher, [_record("ana", "one")], channels="sms")

    assert message_transport.sent == []
