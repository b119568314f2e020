import re
from pathlib import Path
from typing import List

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from .. import main as logo_main
from ..config import OUTPUT_DIR

app = FastAPI(
    title="Site Logo API",
    description="API for extracting logos from websites",
    version="1.0.0"
)


class LogoExtractionRequest(BaseModel):
    url: str = Field(..., description="URL of the website to extract logos from")


@app.get("/")
async def root():
    """Root endpoint returning API information"""
    return {
        "name": "Site Logo API",
        "version": "1.0.0",
        "description": "API for extracting logos from websites",
        "documentation": "/docs"
    }


@app.post("/extract", response_model=dict)
def extract_logo(request: LogoExtractionRequest):
    """
    Extract logos from a website

    Returns the result record of the run. Failures are reported with
    success set to false rather than as HTTP errors.
    """
    result = logo_main.extract_logo(request.url, OUTPUT_DIR)
    return result.to_dict()


LOGO_FILE_PATTERN = re.compile(r"^(?P<domain>.+)-logo(?:-\d+|-fallback)?\.[a-z]+$")


def _logo_domain(file_name):
    """Domain a saved logo file belongs to, or None for other files"""
    match = LOGO_FILE_PATTERN.match(file_name)
    return match.group("domain") if match else None


def _logo_files(domain=None):
    output_dir = Path(OUTPUT_DIR)
    if not output_dir.is_dir():
        return []

    files = []
    for path in output_dir.iterdir():
        file_domain = _logo_domain(path.name)
        if file_domain and path.is_file() and (domain is None or file_domain == domain):
            files.append(path)
    return sorted(files)


@app.get("/logos", response_model=List[dict])
def list_logos():
    """
    List all downloaded logos
    """
    logos = []

    for file_path in _logo_files():
        stat = file_path.stat()
        logos.append({
            "domain": _logo_domain(file_path.name),
            "file_name": file_path.name,
            "file_path": str(file_path),
            "file_size": stat.st_size,
            "file_modified": stat.st_mtime
        })

    return logos


@app.delete("/logos/{domain}")
def delete_logo(domain: str):
    """
    Delete every downloaded logo of a domain
    """
    files = _logo_files(domain)
    if not files:
        raise HTTPException(status_code=404, detail=f"No logo found for domain: {domain}")

    for file_path in files:
        file_path.unlink()

    return {
        "success": True,
        "message": f"Deleted {len(files)} logo file(s) for {domain}"
    }
