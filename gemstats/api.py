from typing import Optional

from fastapi import APIRouter, Depends, Request

from .renderer import Format, negotiate, render, split_format_suffix
from .services import StatsService, get_stats_service

router = APIRouter()

VERSION_FORMATS = (Format.json, Format.xml)


def _ext_format(ext: Optional[str], allowed=tuple(Format)) -> Optional[Format]:
    if not ext:
        return None
    _, fmt = split_format_suffix(f"_.{ext}", allowed)
    return fmt


@router.get("/health")
async def health():
    return {"status": "ok"}


@router.get("/api/v1/downloads")
@router.get("/api/v1/downloads.{ext}")
async def downloads_index(request: Request, ext: Optional[str] = None, service: StatsService = Depends(get_stats_service)):
    fmt = negotiate(request, _ext_format(ext))
    result = await service.total()
    if fmt is Format.text:
        return render(result["total"], fmt)
    return render(result, fmt)


@router.get("/api/v1/downloads/top")
@router.get("/api/v1/downloads/top.{ext}")
async def downloads_top(request: Request, ext: Optional[str] = None, service: StatsService = Depends(get_stats_service)):
    fmt = negotiate(request, _ext_format(ext))
    return render(await service.top(), fmt)


@router.get("/api/v1/downloads/{full_name}")
async def downloads_show(request: Request, full_name: str, service: StatsService = Depends(get_stats_service)):
    full_name, ext_fmt = split_format_suffix(full_name)
    fmt = negotiate(request, ext_fmt)
    return render(await service.version_stats(full_name), fmt)


@router.get("/api/v1/versions/{name}")
async def versions_show(request: Request, name: str, service: StatsService = Depends(get_stats_service)):
    # Only .json/.xml are stripped; any other suffix stays part of the name
    name, ext_fmt = split_format_suffix(name, VERSION_FORMATS)
    fmt = negotiate(request, ext_fmt, VERSION_FORMATS)
    return render(await service.public_versions(name), fmt, root="versions")
