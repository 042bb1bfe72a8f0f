import logging
from datetime import datetime, timedelta, timezone

from azure.core.exceptions import ResourceExistsError
from azure.storage.blob import BlobSasPermissions, BlobServiceClient, ContentSettings, generate_blob_sas

from videoindexer.errors import ConfigurationError
from videoindexer.models import CaptionFormat
from videoindexer.settings import Settings

CAPTION_CONTENT_TYPES = {
    CaptionFormat.VTT: "text/vtt",
    CaptionFormat.TTML: "application/ttml+xml",
    CaptionFormat.SRT: "application/x-subrip",
    CaptionFormat.TXT: "text/plain",
    CaptionFormat.CSV: "text/csv",
}


class VideoStorage:

    def __init__(self, settings: Settings, blob_service: BlobServiceClient = None):
        self.settings = settings.require("storage_connection_string")
        self.blob_service = blob_service or BlobServiceClient.from_connection_string(settings.storage_connection_string)

    def generate_sas_uri(self, name: str) -> str:
        """Returns a read-only URL for the video blob that expires after SasExpiryHours."""
        account_key = getattr(self.blob_service.credential, "account_key", None)
        if not account_key:
            raise ConfigurationError("AzureWebJobsStorage must contain an AccountKey to sign SAS URIs")

        blob_client = self.blob_service.get_blob_client(self.settings.container_name, name)
        expiry = datetime.now(timezone.utc) + timedelta(hours=self.settings.sas_expiry_hours)
        sas = generate_blob_sas(
            account_name=self.blob_service.account_name,
            container_name=self.settings.container_name,
            blob_name=name,
            account_key=account_key,
            permission=BlobSasPermissions(read=True),
            expiry=expiry,
        )
        return f"{blob_client.url}?{sas}"

    def list_video_names(self):
        container = self.blob_service.get_container_client(self.settings.container_name)
        return list(container.list_blob_names())

    def save_captions(self, video_id: str, captions: str, caption_format: CaptionFormat) -> str:
        container = self.blob_service.get_container_client(self.settings.captions_container_name)
        try:
            container.create_container()
        except ResourceExistsError:
            pass

        blob_name = f"{video_id}.{caption_format.extension}"
        container.upload_blob(
            blob_name,
            captions.encode("utf-8"),
            overwrite=True,
            content_settings=ContentSettings(content_type=CAPTION_CONTENT_TYPES[caption_format]),
        )
        logging.info(f"Saved captions for video ID {video_id} to {self.settings.captions_container_name}/{blob_name}")
        return blob_name
