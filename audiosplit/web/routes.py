"""HTTP routes: split a source, then download segments one by one or zipped."""

import logging
import re
import tempfile
import zipfile
from pathlib import Path

from flask import (
    Blueprint,
    current_app,
    jsonify,
    request,
    send_file,
)

from audiosplit import ffutil
from audiosplit.engine import process
from audiosplit.errors import FFmpegNotFoundError, InvalidInputError
from audiosplit.fetchers.base import is_remote
from audiosplit.manifest import Manifest

logger = logging.getLogger(__name__)

bp = Blueprint("api", __name__)

_JOB_ID = re.compile(r"^[0-9a-f]{12}$")
# Names the extractor produces: slug alphabet, ordinal, extension.
_SEGMENT_NAME = re.compile(r"[a-z0-9_]*_segment_\d+\.[a-z0-9]+")


def _error(message: str, status: int):
    return jsonify({"error": True, "message": message}), status


def _job_dir(job_id: str) -> Path | None:
    if not _JOB_ID.match(job_id or ""):
        return None
    job_dir = Path(current_app.config["WORK_DIR"]) / job_id
    return job_dir if job_dir.is_dir() else None


def _job_file(job_dir: Path, filename: str) -> Path | None:
    if not filename or not _SEGMENT_NAME.fullmatch(filename):
        return None
    path = job_dir / filename
    return path if path.is_file() else None


def _remove_if_empty(job_dir: Path) -> None:
    try:
        job_dir.rmdir()
    except OSError:
        pass


@bp.route("/health")
def health():
    try:
        ffutil.check_ffmpeg(current_app.config["SETTINGS"])
    except FFmpegNotFoundError as e:
        return jsonify({"status": "degraded", "ffmpeg": False, "message": str(e)}), 503
    return jsonify({"status": "ok", "ffmpeg": True})


@bp.route("/split-video", methods=["POST"])
def split_video():
    body = request.get_json(silent=True) or {}
    source = body.get("sourceUrl") or body.get("youtubeUrl")
    timestamps = body.get("timestamps")

    if not isinstance(source, str) or not is_remote(source):
        raise InvalidInputError("A valid http(s) source URL is required")
    if not isinstance(timestamps, list):
        raise InvalidInputError("'timestamps' must be a list")

    result = process(
        Manifest(source=source, timestamps=timestamps),
        current_app.config["SETTINGS"],
    )
    logger.info("Job %s produced %d segment(s)", result.job_id, len(result.segments))
    return jsonify({
        "success": True,
        "jobId": result.job_id,
        "title": result.title,
        "segments": [s.name for s in result.segments],
    })


@bp.route("/download/<job_id>/<filename>")
def download(job_id: str, filename: str):
    job_dir = _job_dir(job_id)
    path = _job_file(job_dir, filename) if job_dir else None
    if path is None:
        return _error("File not found", 404)

    response = send_file(path, as_attachment=True, download_name=filename)

    def cleanup():
        path.unlink(missing_ok=True)
        _remove_if_empty(job_dir)

    response.call_on_close(cleanup)
    return response


@bp.route("/download-zip")
def download_zip():
    job_id = request.args.get("job", "")
    files = request.args.get("files", "")
    if not job_id or not files:
        return _error("No files specified", 400)

    job_dir = _job_dir(job_id)
    if job_dir is None:
        return _error("Job not found", 404)

    names = list(dict.fromkeys(f.strip() for f in files.split(",") if f.strip()))
    paths = [p for p in (_job_file(job_dir, n) for n in names) if p is not None]
    if not paths:
        return _error("None of the requested files exist", 404)

    archive = tempfile.SpooledTemporaryFile(max_size=32 * 1024 * 1024)
    with zipfile.ZipFile(archive, "w", compression=zipfile.ZIP_DEFLATED, compresslevel=9) as zf:
        for path in paths:
            zf.write(path, arcname=path.name)
    archive.seek(0)

    response = send_file(
        archive,
        mimetype="application/zip",
        as_attachment=True,
        download_name="segments.zip",
    )

    def cleanup():
        archive.close()
        for path in paths:
            path.unlink(missing_ok=True)
        _remove_if_empty(job_dir)

    response.call_on_close(cleanup)
    return response

