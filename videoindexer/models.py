from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ArmAccessTokenPermission(str, Enum):
    READER = "Reader"
    CONTRIBUTOR = "Contributor"
    MY_ACCESS_ADMINISTRATOR = "MyAccessAdministrator"
    OWNER = "Owner"


class ArmAccessTokenScope(str, Enum):
    ACCOUNT = "Account"
    PROJECT = "Project"
    VIDEO = "Video"


class ProcessingState(str, Enum):
    UPLOADED = "Uploaded"
    PROCESSING = "Processing"
    PROCESSED = "Processed"
    FAILED = "Failed"


class CaptionFormat(str, Enum):
    VTT = "Vtt"
    TTML = "Ttml"
    SRT = "Srt"
    TXT = "Txt"
    CSV = "Csv"

    @property
    def extension(self):
        return self.value.lower()


@dataclass(frozen=True)
class Account:
    account_id: str
    location: str

    @classmethod
    def from_json(cls, payload: dict) -> "Account":
        properties = payload.get("properties") or {}
        return cls(account_id=properties.get("accountId") or "", location=payload.get("location") or "")

    def is_valid(self) -> bool:
        return bool(self.location.strip()) and bool(self.account_id.strip())


@dataclass(frozen=True)
class Video:
    id: str
    name: Optional[str] = None
    state: Optional[str] = None

    @classmethod
    def from_json(cls, payload: dict) -> "Video":
        return cls(id=payload["id"], name=payload.get("name"), state=payload.get("state"))


@dataclass(frozen=True)
class AccessTokenRequest:
    permission_type: ArmAccessTokenPermission
    scope: ArmAccessTokenScope
    video_id: Optional[str] = None
    project_id: Optional[str] = None

    def to_json(self) -> dict:
        body = {"permissionType": self.permission_type.value, "scope": self.scope.value}
        if self.video_id:
            body["videoId"] = self.video_id
        if self.project_id:
            body["projectId"] = self.project_id
        return body
