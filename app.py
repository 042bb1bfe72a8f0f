from dotenv import load_dotenv

from videoindexer.pipeline import process_blob_trigger
from videoindexer.settings import Settings
from videoindexer.storage import VideoStorage

import logging

load_dotenv()


def main():
    """Submits every video already in the container, for videos uploaded before the function was deployed."""
    logging.basicConfig(level=logging.INFO)

    settings = Settings.from_env()
    storage = VideoStorage(settings)

    failed = []
    for name in storage.list_video_names():
        print(name)
        try:
            video = process_blob_trigger(name, settings=settings, storage=storage)
        except Exception:
            logging.exception(f"Error submitting '{name}'")
            failed.append(name)
            continue
        print(f"\tSubmitted as video ID {video.id}")

    if failed:
        print(f"{len(failed)} video(s) failed: {', '.join(failed)}")
    return 1 if failed else 0


if __name__ == "__main__":
    raise SystemExit(main())
