import base64

from fastapi import FastAPI, File, HTTPException, Query, Response, UploadFile

from .errors import PipelineError
from .models import HWINFO_COLUMNS, ColumnMap, HealthResponse, NormalizedCsv, NormalizeResponse
from .normalize import transcode_to_utf8
from .pipeline import render_csv_bytes
from .rules import TARGET_ENCODING

app = FastAPI(
    title="sensorchart",
    description="Render sensor log CSV exports as a RAM/CPU/GPU usage chart",
    version="0.1.0",
)


def _require_csv(file: UploadFile) -> None:
    if not (file.filename or "").lower().endswith(".csv"):
        raise HTTPException(status_code=422, detail="Only CSV files are supported")


@app.get("/health", response_model=HealthResponse)
def health():
    return {"ok": True}


@app.post("/normalize", response_model=NormalizeResponse)
async def normalize_csv(file: UploadFile = File(...)):
    _require_csv(file)

    raw = await file.read()
    encoded, report = transcode_to_utf8(raw)
    return NormalizeResponse(
        normalized_csv=NormalizedCsv(
            sha256=report.sha256,
            encoding=TARGET_ENCODING,
            content_b64=base64.b64encode(encoded).decode("ascii"),
        ),
        report=report,
    )


@app.post("/chart", response_class=Response)
async def chart(
    file: UploadFile = File(...),
    time: int = Query(HWINFO_COLUMNS.time, ge=0),
    ram: int = Query(HWINFO_COLUMNS.ram, ge=0),
    cpu: int = Query(HWINFO_COLUMNS.cpu, ge=0),
    gpu: int = Query(HWINFO_COLUMNS.gpu, ge=0),
):
    _require_csv(file)

    raw = await file.read()
    columns = ColumnMap(time=time, ram=ram, cpu=cpu, gpu=gpu)
    try:
        png = render_csv_bytes(raw, columns)
    except PipelineError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return Response(content=png, media_type="image/png")
