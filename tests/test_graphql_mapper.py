from __future__ import annotations

from adapters.graphql_mapper import (
    parse_alert,
    parse_configuration,
    parse_target_group,
    parse_topic,
    parse_user,
    to_key_value_list,
)


def test_parse_user_with_token_and_roles() -> None:
    user = parse_user(
        {
            "email": "a@example.com",
            "emailConfirmed": True,
            "roles": ["UserMessenger"],
            "authorization": {"token": "jwt", "expiry": "2030-01-01T00:00:00Z"},
        }
    )
    assert user.authorization.token == "jwt"
    assert user.roles == ("UserMessenger",)
    assert user.email_confirmed is True


def test_parse_user_without_token() -> None:
    user = parse_user({"authorization": {"token": None}, "roles": None})
    assert user.authorization is None
    assert user.roles is None


def test_parse_target_group_treats_null_lists_as_empty() -> None:
    group = parse_target_group(
        {
            "id": "TG1",
            "name": "watch",
            "emailTargets": None,
            "smsTargets": [{"id": "P1", "name": "+1", "phoneNumber": "+1", "isConfirmed": True}],
            "telegramTargets": [
                {"id": "T1", "telegramId": "tg", "confirmationUrl": "https://t.me/x"}
            ],
        }
    )
    assert group.email_targets == ()
    assert group.sms_targets[0].is_confirmed is True
    assert group.telegram_targets[0].confirmation_url == "https://t.me/x"
    assert group.telegram_targets[0].is_confirmed is False


def test_parse_alert_defaults_filter_options() -> None:
    alert = parse_alert(
        {
            "id": "A1",
            "name": "watch",
            "groupName": "default",
            "filterOptions": None,
            "filter": {"id": "F1", "filterType": "BALANCE"},
            "sourceGroup": {"id": "SG1", "name": "watch", "sources": []},
            "targetGroup": {"id": "TG1", "name": "watch"},
        }
    )
    assert alert.filter_options == "{}"
    assert alert.filter.filter_type == "BALANCE"
    assert alert.source_group.id == "SG1"
    assert alert.target_group.email_targets == ()


def test_parse_topic_and_configuration() -> None:
    topic = parse_topic({"topicName": "news", "targetCollections": ["c1"], "targetTemplate": None})
    assert topic.target_collections == ("c1",)
    assert topic.target_template is None

    configuration = parse_configuration({"supportedSmsCountryCodes": None})
    assert configuration.supported_sms_country_codes == ()


def test_to_key_value_list_keeps_order() -> None:
    assert to_key_value_list({"b": "2", "a": "1"}) == [
        {"key": "b", "value": "2"},
        {"key": "a", "value": "1"},
    ]
    assert to_key_value_list(None) is None
