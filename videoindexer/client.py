import logging
from typing import Optional

import httpx

from videoindexer import http
from videoindexer.models import Account, CaptionFormat, Video

API_URL = "https://api.videoindexer.ai"


class VideoIndexerClient:
    """Calls the Video Indexer API for one account with an account level access token."""

    def __init__(self, account: Account, access_token: str, http_client: Optional[httpx.Client] = None):
        self.account = account
        self.access_token = access_token
        self.http_client = http_client or http.new_client()

    @property
    def videos_url(self) -> str:
        return f"{API_URL}/{self.account.location}/Accounts/{self.account.account_id}/Videos"

    def upload_video(self, name: str, video_url: str, callback_url: Optional[str] = None, privacy: str = "Private") -> Video:
        """
        Asks Video Indexer to pull the video from video_url and index it.

        Video Indexer posts to callback_url with the video id and its processing
        state once indexing is done, so nothing here polls for completion.
        """
        logging.info(f"Video is starting to upload with video name: {name}, videoUri: {http.redact(video_url)}")
        params = {
            "accessToken": self.access_token,
            "name": name,
            "privacy": privacy,
            "videoUrl": video_url,
        }
        if callback_url:
            params["callbackUrl"] = callback_url

        response = http.send_once(self.http_client, "POST", self.videos_url, params=params)
        video = Video.from_json(response.json())
        logging.info(f"Video ID {video.id} was uploaded successfully")
        return video

    def get_captions(self, video_id: str, caption_format: CaptionFormat = CaptionFormat.VTT, language: str = "English") -> str:
        params = {
            "accessToken": self.access_token,
            "format": caption_format.value,
            "language": language,
        }
        response = http.send(self.http_client, "GET", f"{self.videos_url}/{video_id}/Captions", params=params)
        return response.text
