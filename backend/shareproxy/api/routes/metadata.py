"""Share page metadata routes."""
import traceback
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from shareproxy.api.deps import get_extractor
from shareproxy.schemas import ExtractFilesRequest, MetadataRequest
from shareproxy.services.extractor import MetadataExtractor
from shareproxy.services.normalizer import normalize_file_list

router = APIRouter(tags=["metadata"])


@router.post("/metadata")
async def extract_metadata(
    body: MetadataRequest,
    extractor: MetadataExtractor = Depends(get_extractor),
):
    """Fetch a share page and extract its file manifest."""
    if not body.url:
        return JSONResponse(status_code=400, content={"error": "Missing url in body"})

    try:
        result = await extractor.extract(body.url)
    except Exception as e:
        print(f"ERROR: metadata fetch failed for {body.url}: {e}")
        traceback.print_exc()
        return JSONResponse(status_code=500, content={"error": str(e) or type(e).__name__})

    return result.to_response()


@router.post("/extract-files")
async def extract_files(body: ExtractFilesRequest):
    """Normalize previously extracted metadata into a file list."""
    if body.metadata is None:
        return JSONResponse(status_code=400, content={"error": "Missing metadata in body"})
    if not isinstance(body.metadata, dict):
        return JSONResponse(status_code=400, content={"error": "metadata must be a JSON object"})

    return normalize_file_list(body.metadata, body.share_url).to_response()
