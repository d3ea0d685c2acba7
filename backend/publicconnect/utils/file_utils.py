"""
文件存储工具
---------------------------------
功能：
- 保存前端上传的文件到 Settings.upload_dir 目录（媒体资源、投诉附件共用）。
- 返回对外访问地址 `/uploads/<文件名>`，由 main.py 挂载的静态目录提供下载。

后续扩展：
- 可接入对象存储（如 S3、OSS），在此处替换落盘逻辑即可。
"""

from pathlib import Path
from uuid import uuid4

from fastapi import UploadFile

from .errors import AppError, ErrorKind

UPLOAD_URL_PREFIX = "/uploads"


def save_upload_file(upload_dir: Path, file: UploadFile, max_bytes: int) -> str:
    """保存上传文件，返回访问地址。

    命名策略：`<uuid>_<原文件名>`，避免重名覆盖。
    超过 max_bytes 时不落盘，直接返回 400。
    """

    original_name = Path(file.filename or "upload.bin").name
    content = file.file.read(max_bytes + 1)
    if len(content) > max_bytes:
        raise AppError(
            ErrorKind.VALIDATION,
            "File too large",
            [{"path": [original_name], "message": f"File exceeds {max_bytes} bytes"}],
        )

    upload_dir.mkdir(parents=True, exist_ok=True)
    safe_name = f"{uuid4().hex}_{original_name}"
    save_path = upload_dir / safe_name

    with save_path.open("wb") as out:
        out.write(content)

    return f"{UPLOAD_URL_PREFIX}/{safe_name}"


def remove_upload(upload_dir: Path, url: str) -> None:
    """删除 save_upload_file 保存的文件（用于后续步骤失败时清理）"""
    if not url.startswith(f"{UPLOAD_URL_PREFIX}/"):
        return
    path = upload_dir / Path(url).name
    path.unlink(missing_ok=True)
