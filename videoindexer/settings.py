import os
from dataclasses import dataclass
from typing import Optional

from videoindexer.errors import ConfigurationError
from videoindexer.models import CaptionFormat

# environment variable -> settings attribute
_ENV_NAMES = {
    "storage_connection_string": "AzureWebJobsStorage",
    "container_name": "ContainerName",
    "callback_url": "FunctionCallbackUrl",
    "subscription_id": "SubscriptionId",
    "resource_group": "ResourceGroup",
    "account_name": "AccountName",
}

VIDEO_PRIVACY_VALUES = ("Private", "Public")


@dataclass(frozen=True)
class Settings:
    storage_connection_string: Optional[str] = None
    container_name: str = "videos"
    callback_url: Optional[str] = None
    subscription_id: Optional[str] = None
    resource_group: Optional[str] = None
    account_name: Optional[str] = None
    captions_container_name: Optional[str] = None
    captions_format: CaptionFormat = CaptionFormat.VTT
    captions_language: str = "English"
    video_privacy: str = "Private"
    sas_expiry_hours: int = 24

    @classmethod
    def from_env(cls) -> "Settings":
        captions_format = os.getenv("CaptionsFormat", CaptionFormat.VTT.value)
        try:
            captions_format = CaptionFormat(captions_format)
        except ValueError:
            allowed = ", ".join(f.value for f in CaptionFormat)
            raise ConfigurationError(f"CaptionsFormat must be one of {allowed}, got '{captions_format}'")

        expiry = os.getenv("SasExpiryHours", "24")
        try:
            sas_expiry_hours = int(expiry)
        except ValueError:
            raise ConfigurationError(f"SasExpiryHours must be an integer, got '{expiry}'")
        if sas_expiry_hours <= 0:
            raise ConfigurationError("SasExpiryHours must be positive")

        video_privacy = os.getenv("VideoPrivacy") or "Private"
        if video_privacy not in VIDEO_PRIVACY_VALUES:
            raise ConfigurationError(f"VideoPrivacy must be one of {', '.join(VIDEO_PRIVACY_VALUES)}, got '{video_privacy}'")

        return cls(
            storage_connection_string=os.getenv("AzureWebJobsStorage"),
            container_name=os.getenv("ContainerName") or "videos",
            callback_url=os.getenv("FunctionCallbackUrl"),
            subscription_id=os.getenv("SubscriptionId"),
            resource_group=os.getenv("ResourceGroup"),
            account_name=os.getenv("AccountName"),
            captions_container_name=os.getenv("CaptionsContainerName") or None,
            captions_format=captions_format,
            captions_language=os.getenv("CaptionsLanguage") or "English",
            video_privacy=video_privacy,
            sas_expiry_hours=sas_expiry_hours,
        )

    def require(self, *attributes):
        missing = [_ENV_NAMES.get(a, a) for a in attributes if not getattr(self, a)]
        if missing:
            raise ConfigurationError(f"Missing required setting(s): {', '.join(missing)}")
        return self
