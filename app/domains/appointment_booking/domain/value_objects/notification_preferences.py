"""Notification Preferences Value Object."""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from app.core.domain.value_objects import ValueObject


class NotificationChannel(str, Enum):
    """Channel used to deliver appointment notifications."""

    EMAIL = "email"
    SMS = "sms"


@dataclass(frozen=True)
class NotificationPreferences(ValueObject):
    """Independent email/SMS flags. Both may be off."""

    email: bool = True
    sms: bool = False

    @property
    def active_channels(self) -> list[NotificationChannel]:
        """Channels enabled by the patient, email first."""
        channels: list[NotificationChannel] = []
        if self.email:
            channels.append(NotificationChannel.EMAIL)
        if self.sms:
            channels.append(NotificationChannel.SMS)
        return channels

    @property
    def channel_description(self) -> str:
        """Human readable destination, e.g. "email and phone".

        SMS goes to the patient's phone, hence "phone" rather than "sms".
        """
        if self.email and self.sms:
            return "email and phone"
        if self.sms:
            return "phone"
        if self.email:
            return "email"
        return ""

    def to_dict(self) -> dict[str, Any]:
        return {"email": self.email, "sms": self.sms}
