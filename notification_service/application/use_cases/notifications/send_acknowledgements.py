"""Channels that acknowledge a request without delivering anything yet."""

from collections.abc import Mapping
from typing import Any

from notification_service.domain.entities import SendAcknowledgement

_ACKNOWLEDGEMENT = SendAcknowledgement(acknowledged=True, status="OK", transaction_id="test")


def send_text(_data: Mapping[str, Any]) -> SendAcknowledgement:
    return _ACKNOWLEDGEMENT


def send_in_app(_data: Mapping[str, Any]) -> SendAcknowledgement:
    return _ACKNOWLEDGEMENT
