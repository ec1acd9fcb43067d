from __future__ import annotations
import io, csv
import re
import unicodedata
from typing import Dict, List
from urllib.parse import quote

from fastapi.responses import StreamingResponse

from .service import EXPORT_COLUMNS


def export_filename(title: str) -> str:
    safe = re.sub(r"[^\w\-]+", "_", (title or "").strip()).strip("_") or "project"
    return f"{safe}_equipment.csv"


def ascii_filename(name: str) -> str:
    """Latin-1 safe fallback for clients that ignore filename*: accents stripped, the rest replaced."""
    stripped = "".join(ch for ch in unicodedata.normalize("NFKD", name) if not unicodedata.combining(ch))
    return re.sub(r"[^\w\-.]+", "_", stripped, flags=re.ASCII)


def content_disposition(title: str) -> str:
    name = export_filename(title)
    return f"attachment; filename=\"{ascii_filename(name)}\"; filename*=UTF-8''{quote(name)}"


def stream_csv_equipment(rows: List[Dict[str, str]], title: str) -> StreamingResponse:
    """
    Stream a project's equipment list as CSV.
    Columns: Category, Equipment, Brand, Model, Serial No, Notes
    """
    # build CSV once (equipment lists are small)
    buf = io.StringIO()
    w = csv.DictWriter(buf, fieldnames=EXPORT_COLUMNS)
    w.writeheader()
    w.writerows(rows)

    return StreamingResponse(
        iter([buf.getvalue()]),
        media_type="text/csv",
        headers={"Content-Disposition": content_disposition(title)},
    )
