import logging
from contextlib import contextmanager
from typing import Optional

from videoindexer import http
from videoindexer.client import VideoIndexerClient
from videoindexer.models import ArmAccessTokenPermission, ArmAccessTokenScope, ProcessingState, Video
from videoindexer.resource_provider import VideoIndexerResourceProviderClient
from videoindexer.settings import Settings
from videoindexer.storage import VideoStorage


@contextmanager
def _http_client(http_client=None):
    # injected clients belong to the caller
    if http_client is not None:
        yield http_client
        return
    with http.new_client() as client:
        yield client


def connect(settings: Settings, credential=None, http_client=None) -> VideoIndexerClient:
    """Resolves the account through ARM and returns a client holding an account level token."""
    provider = VideoIndexerResourceProviderClient.build(settings, credential=credential, http_client=http_client)
    account = provider.get_account()
    access_token = provider.get_access_token(ArmAccessTokenPermission.CONTRIBUTOR, ArmAccessTokenScope.ACCOUNT)
    return VideoIndexerClient(account, access_token, http_client=provider.http_client)


def process_blob_trigger(name: str, settings: Optional[Settings] = None, credential=None, http_client=None, storage=None) -> Video:
    """
    Hands a newly uploaded video to Video Indexer.

    Video Indexer downloads the blob itself through a read-only SAS URI, so the
    video bytes never pass through the function.
    """
    settings = settings or Settings.from_env()
    settings.require("callback_url")
    storage = storage or VideoStorage(settings)

    video_url = storage.generate_sas_uri(name)
    with _http_client(http_client) as client:
        indexer = connect(settings, credential=credential, http_client=client)
        return indexer.upload_video(name, video_url, callback_url=settings.callback_url, privacy=settings.video_privacy)


def get_video_captions(video_id: str, settings: Optional[Settings] = None, credential=None, http_client=None, storage=None) -> str:
    settings = settings or Settings.from_env()
    with _http_client(http_client) as client:
        indexer = connect(settings, credential=credential, http_client=client)
        captions = indexer.get_captions(video_id, settings.captions_format, settings.captions_language)
    logging.info(f"Captions of the video for video ID {video_id}: \n{captions}")

    if settings.captions_container_name:
        storage = storage or VideoStorage(settings)
        storage.save_captions(video_id, captions, settings.captions_format)
    return captions


def handle_state_update(video_id: str, state: str, **kwargs) -> Optional[str]:
    logging.info(f"Received Video Indexer status update - Video ID: {video_id} \t Processing State: {state}")

    if state == ProcessingState.PROCESSED.value:
        return get_video_captions(video_id, **kwargs)
    if state == ProcessingState.FAILED.value:
        logging.warning(f"The video index failed for video ID {video_id}.")
    return None
