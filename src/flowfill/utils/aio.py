"""
This module is explicitly for anything related to asyncio and I/O

This includes

async management,
logging,
downloading files,
fetching data from the web or the file system,

"""

import asyncio
import binascii
import errno
import logging
import mimetypes
import os
import re
import uuid
from contextlib import asynccontextmanager, contextmanager, redirect_stdout
from dataclasses import dataclass
from enum import auto
from functools import cache, wraps
from typing import Callable, Literal
from urllib.parse import unquote, urlparse

import flowfill.config as config
from flowfill.types import Enum, OpenMode, OpenModeReading, OpenModeWriting
from flowfill.utils.func import group_by_bool

mimetypes.init()


# better aiofiles replacement
def _wrap(func):
    @wraps(func)
    async def inner(*args, **kwargs):
        return await asyncio.to_thread(func, *args, **kwargs)

    return inner


a_isfile = _wrap(os.path.isfile)
aos_remove = _wrap(os.remove)


############################## Tasks #################################
class Task(asyncio.Task):
    def __init__(self, sync: bool = False, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.sync = sync

    @classmethod
    def create(
        cls,
        coro,
        sync: bool = False,
        callback: Callable[[asyncio.Future], None] | None = None,
        **kwargs,
    ):
        loop = config.event_loop or asyncio.get_running_loop()
        task = cls(sync, coro, loop=loop, **kwargs)
        if callback is not None:
            task.add_done_callback(callback)
        return task


def create_task(
    coro,
    sync: bool = False,
    callback: Callable[[asyncio.Future], None] | None = None,
    **kwargs,
):
    """
    This creates a task and adds it to the global task queue
    """
    task = Task.create(coro, sync, callback, **kwargs)
    config.tasks.append(task)
    return task


async def gather_tasks(tasks: list[Task]):
    """
    Waits for all tasks that are marked as sync and drops them from the list.
    Finished tasks are dropped as well
    """
    syncs, nosyncs = group_by_bool(tasks, lambda task: task.sync)
    tasks[:] = [task for task in nosyncs if not task.done()]
    if syncs:
        return await asyncio.wait(syncs)


############################## I/O #################################
@dataclass(frozen=True, slots=True)
class File:
    """
    A File object can be used to read and write to a file while saving its encoding and mime-type
    """

    name: str
    mime_type: str | None = None
    encoding: str | None = "utf-8"

    @property
    def ext(self) -> str:
        # if you need both name and ext then use splitext directly
        return os.path.splitext(self.name)[1]

    @contextmanager
    def open(self, mode: OpenMode, *args, **kwargs):
        if self.encoding and "b" not in mode:
            kwargs.setdefault("encoding", self.encoding)
        with open(self.name, mode, *args, **kwargs) as f:
            yield f

    @asynccontextmanager
    async def aopen(self, mode: OpenMode, *args, **kwargs):
        if self.encoding and "b" not in mode:
            kwargs.setdefault("encoding", self.encoding)
        with await asyncio.to_thread(open, self.name, mode, *args, **kwargs) as f:
            yield f

    def read(self, mode: OpenModeReading = "r", *args, **kwargs):
        with self.open(mode, *args, **kwargs) as f:
            return f.read()

    aread = _wrap(read)

    def write(self, content: str | bytes, mode: OpenModeWriting = "w", *args, **kwargs):
        with self.open(mode, *args, **kwargs) as f:
            return f.write(content)

    awrite = _wrap(write)


created_files: set[str] = set()

_counter_re = re.compile(r"\((\d+)\)(?=[^()/\\]*$)")


def _make_new_filename(name: str) -> str:
    """
    example.png -> example (2).png
    example (2).png -> example (3).png
    """
    matches = list(_counter_re.finditer(name))
    if matches:
        last = matches[-1]
        return f"{name[:last.start()]}({int(last.group(1)) + 1}){name[last.end():]}"
    name, ext = os.path.splitext(name)
    return f"{name} (2){ext}"


def create_file(file_name: str) -> str:
    """
    Definitely create a new file
    """
    file_name = os.path.abspath(file_name)
    try:
        with open(file_name, "x") as _:
            created_files.add(file_name)
            return file_name
    except FileExistsError:
        return create_file(_make_new_filename(file_name))


async def delete_created_files():
    if created_files:
        logging.info(f"Deleting: {created_files}")
        await asyncio.gather(
            *(aos_remove(file) for file in created_files),
            return_exceptions=True,
        )
        created_files.clear()


save_dir = os.environ.get("TEMP") or "."


class ResponseType(Enum):
    HTTP = auto()
    Data = auto()
    File = auto()


@dataclass
class Response:
    url: str
    content: str | bytes
    type: ResponseType
    status: int = 200
    _mime_type: str = ""

    @property
    def mime_type(self):
        if not self._mime_type:
            self._mime_type = mimetypes.guess_type(self.url, strict=False)[0] or ""
        return self._mime_type


# https://www.rfc-editor.org/rfc/rfc2397#section-2
# dataurl    := "data:" [ mediatype ] [ ";base64" ] "," data
data_url_pattern = re.compile(
    r"data:(?P<media_type>[\w\-]+\/[\w\-\.\+]+(?:;[\w\-]+=[\w\-]+)*)?(?P<base64>;base64)?,(?P<data>.*)",
    re.DOTALL,
)


def parse_mime_type(media_type: str, default: str = "") -> str:
    """
    `"text/html; charset=utf-8"` -> `"text/html"`
    """
    return media_type.partition(";")[0].strip() or default


async def fetch(url: str, raw: bool = False) -> Response:
    """
    Fetch an url (into memory)

    Returns a Response or raises a ValueError if the url passed was invalid

    Also it might raise an aiohttp error
    """
    if url.startswith("http"):
        async with config.aiosession.get(url) as response:
            content_type = response.headers.get("content-type", "")
            mime_type = parse_mime_type(content_type)
            return Response(
                url=response.url.human_repr(),
                content=await response.read(),
                type=ResponseType.HTTP,
                status=response.status,
                _mime_type=mime_type,
            )
    elif url.startswith("data:"):
        match = data_url_pattern.fullmatch(re.sub(r"\s*", "", url))
        if match is None:
            raise ValueError(f"Invalid data url: {url[:30]!r}")
        mime_type = parse_mime_type(match["media_type"] or "", "text/plain")
        content: str | bytes = unquote(match["data"])
        if match["base64"]:
            # From https://stackoverflow.com/a/39210134/15046005
            content = binascii.a2b_base64(content)
        return Response(
            url,
            content,
            type=ResponseType.Data,
            _mime_type=mime_type,
        )
    else:
        try:
            mode: Literal["rb", "r"] = "rb" if raw else "r"
            content = await File(url).aread(mode)
            return Response(url, content, ResponseType.File)
        except IOError as e:
            code: int = (
                403
                if e.errno == errno.EACCES
                else 404
                if e.errno == errno.ENOENT
                else 400
            )
            return Response(url, "", ResponseType.File, code)


async def download(url: str) -> str:
    """
    Instead of fetching the url into memory, the data is downloaded to a file
    """
    if url.startswith("http"):
        async with config.aiosession.get(url) as resp:
            resp.raise_for_status()
            name = os.path.basename(urlparse(url).path) or uuid.uuid4().hex
            new_file = create_file(os.path.join(save_dir, name))
            async with File(new_file).aopen("wb") as f:
                async for chunk in resp.content.iter_any():
                    await asyncio.to_thread(f.write, chunk)
        return new_file
    elif url.startswith("data:"):
        response = await fetch(url)
        ext = mimetypes.guess_extension(response.mime_type) or ""
        new_file = create_file(os.path.join(save_dir, uuid.uuid4().hex + ext))
        await File(new_file).awrite(
            response.content, "wb" if isinstance(response.content, bytes) else "w"
        )
        return new_file
    else:
        if await a_isfile(url):
            return url
        else:
            raise ValueError(f"Invalid Path: {url!r}")


_error_logfile = File("error.log", encoding="utf-8")


@contextmanager
def clog_error():
    """
    yields a context to print to the error logfile
    """
    with _error_logfile.open("a") as file:
        with redirect_stdout(file):
            yield


log_error = clog_error()(print)
log_error_once = cache(log_error)
