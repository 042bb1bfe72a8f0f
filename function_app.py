import azure.functions as func
import logging

from videoindexer import pipeline

app = func.FunctionApp()


def blob_name_in_container(path):
    # trigger names come as "<container>/<blob path>"
    return path.split("/", 1)[1] if "/" in path else path


@app.function_name(name="VideoUploadTrigger")
@app.blob_trigger(arg_name="myblob", path="%ContainerName%/{name}",
                               connection="AzureWebJobsStorage")
def video_upload_trigger(myblob: func.InputStream):
    logging.info(f"Python blob trigger function processed blob "
                f"Name: {myblob.name} "
                f"Blob Size: {myblob.length} bytes")
    pipeline.process_blob_trigger(blob_name_in_container(myblob.name))


@app.function_name(name="GetVideoStatus")
@app.route(route="GetVideoStatus", methods=["POST"], auth_level=func.AuthLevel.FUNCTION)
def get_video_status(req: func.HttpRequest) -> func.HttpResponse:
    """
    Callback Video Indexer posts to once a video changes state, so the upload
    never has to be polled. The video id and state come in the query string.
    """
    video_id = req.params.get("id")
    state = req.params.get("state")
    if not video_id or not state:
        return func.HttpResponse("Query parameters 'id' and 'state' are required.", status_code=400)

    try:
        pipeline.handle_state_update(video_id, state)
    except Exception:
        logging.exception(f"Failed to handle state update for video ID {video_id}")
        raise
    return func.HttpResponse(status_code=200)
