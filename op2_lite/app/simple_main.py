#!/usr/bin/env python3
from fastapi import FastAPI, UploadFile, File, HTTPException
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse, Response
from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
import io, logging, tempfile, os
from typing import Tuple
from pathlib import Path
from jsonl_worker import DEFAULT_COMMENT_PREFIXES, JSONLError, ReadError, Writer, iter_values

app = FastAPI(title="JSONL-Lite OP2")
logger = logging.getLogger(__name__)

request_counter = Counter("jsonl_requests_total", "Total JSONL uploads", ["endpoint"])
records_counter = Counter("jsonl_records_total", "JSONL records decoded")
process_duration = Histogram("jsonl_process_seconds", "Time spent processing")

DEFAULT_CHUNK_SIZE = 8*1024*1024  # 8 MB


def chunk_size() -> int:
    return int(os.environ.get("JSONL_CHUNK_SIZE", DEFAULT_CHUNK_SIZE))


async def spool(file: UploadFile) -> Tuple[str, int]:
    """Copy the upload to a temp file chunk by chunk; return its path and size."""
    size = chunk_size()
    with tempfile.NamedTemporaryFile(suffix=".jsonl", delete=False) as tmp:
        total = 0
        while True:
            chunk = await file.read(size)
            if not chunk:
                break
            tmp.write(chunk)
            total += len(chunk)
        return tmp.name, total


def scan_file(path: str, skip_blank: bool, comments: bool, sink=None) -> int:
    """Decode every record of ``path``, re-encoding into ``sink`` when given."""
    prefixes = DEFAULT_COMMENT_PREFIXES if comments else ()
    writer = Writer(sink) if sink is not None else None
    recs = 0
    with open(path, 'rb') as f:
        for value in iter_values(f, skip_blank=skip_blank, comment_prefixes=prefixes):
            if writer is not None:
                writer.write(value)
            recs += 1
    records_counter.inc(recs)
    return recs


@app.get("/health", tags=["ops"])
def health():
    return {"status": "healthy"}

@app.get("/metrics", tags=["ops"])
def metrics():
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)

@app.post("/process/file", tags=["process"])
async def process_file(file: UploadFile = File(...), skip_blank: bool = True, comments: bool = True):
    request_counter.labels(endpoint="process").inc()
    tmp_path, total = await spool(file)
    try:
        with process_duration.time():
            recs = await run_in_threadpool(scan_file, tmp_path, skip_blank, comments)
        logger.info(f"{file.filename}: {recs} records ({total} bytes)")
        return JSONResponse({"filename": file.filename, "bytes": total, "records": recs})
    except ReadError as e:
        raise HTTPException(status_code=422, detail={"error": str(e), "line": e.position})
    except JSONLError as e:
        raise HTTPException(status_code=500, detail=str(e))
    finally:
        Path(tmp_path).unlink()

@app.post("/normalize/file", tags=["process"])
async def normalize_file(file: UploadFile = File(...), skip_blank: bool = True, comments: bool = True):
    request_counter.labels(endpoint="normalize").inc()
    tmp_path, total = await spool(file)
    try:
        out = io.BytesIO()
        with process_duration.time():
            recs = await run_in_threadpool(scan_file, tmp_path, skip_blank, comments, sink=out)
        logger.info(f"{file.filename}: normalized {recs} records ({total} -> {out.tell()} bytes)")
        return Response(out.getvalue(), media_type="application/x-ndjson")
    except ReadError as e:
        raise HTTPException(status_code=422, detail={"error": str(e), "line": e.position})
    except JSONLError as e:
        raise HTTPException(status_code=500, detail=str(e))
    finally:
        Path(tmp_path).unlink()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=int(os.environ.get("PORT", "8000")))
