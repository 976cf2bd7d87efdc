import os
import re
import subprocess

import requests

from tubebatch.config import T, E

FFMPEG_BINARY = "ffmpeg"
SHORTS_WIDTH, SHORTS_HEIGHT = 720, 1280
DOWNLOAD_CHUNK_SIZE = 1024 * 1024

def sanitize_title(title):
    """Lower-cased title with every non-alphanumeric character replaced by '_'."""
    return re.sub(r'[^a-z0-9]', '_', str(title), flags=re.IGNORECASE).lower()

def download_file(url, destination, translator):
    """Streams `url` to `destination`; a partial file is removed on failure."""
    directory = os.path.dirname(destination)
    if directory:
        os.makedirs(directory, exist_ok=True)
    print(translator.get('media.downloading', T_INFO=T.INFO, E_DOWNLOAD=E.DOWNLOAD, url=url))
    try:
        with requests.get(url, stream=True) as response:
            response.raise_for_status()
            with open(destination, 'wb') as f:
                for chunk in response.iter_content(chunk_size=DOWNLOAD_CHUNK_SIZE):
                    if chunk:
                        f.write(chunk)
    except Exception:
        if os.path.exists(destination):
            os.remove(destination)
        raise
    print(translator.get('media.download_complete', T_OK=T.OK, E_SUCCESS=E.SUCCESS, path=destination))
    return destination


class MediaFile:
    def __init__(self, path, downloaded):
        self.path = path
        self.downloaded = downloaded


class MediaAcquirer:
    """Finds a row's media in the local cache or downloads it there."""

    def __init__(self, download_dir, translator, cleanup=True):
        self.download_dir = download_dir
        self.translator = translator
        self.cleanup = cleanup

    def media_path(self, title):
        return os.path.join(self.download_dir, f"{sanitize_title(title)}.mp4")

    def acquire(self, url, title):
        path = self.media_path(title)
        if os.path.exists(path):
            print(self.translator.get('media.cache_hit', T_INFO=T.INFO, E_INFO=E.INFO, path=path))
            return MediaFile(path, downloaded=False)
        download_file(url, path, self.translator)
        return MediaFile(path, downloaded=True)

    def release(self, media):
        """Deletes media fetched during this run; cached files stay."""
        if not media or not media.downloaded or not self.cleanup:
            return
        remove_file(media.path, self.translator)

def remove_file(path, translator):
    try:
        os.remove(path)
        print(translator.get('media.cleaned_up', T_INFO=T.INFO, E_TRASH=E.TRASH, path=path))
    except OSError as e:
        print(translator.get('media.cleanup_failed', T_WARN=T.WARN, E_WARN=E.WARN, path=path, e=e))

def short_output_path(original_path):
    root, ext = os.path.splitext(original_path)
    return f"{root}_short{ext or '.mp4'}"

def build_short_command(original_path, output_path, max_seconds):
    video_filter = (
        f"scale={SHORTS_WIDTH}:{SHORTS_HEIGHT}:force_original_aspect_ratio=decrease,"
        f"pad={SHORTS_WIDTH}:{SHORTS_HEIGHT}:(ow-iw)/2:(oh-ih)/2"
    )
    return [
        FFMPEG_BINARY, '-y', '-loglevel', 'error', '-i', original_path,
        '-vf', video_filter,
        '-c:v', 'libx264', '-profile:v', 'high', '-level', '4.0', '-pix_fmt', 'yuv420p',
        '-c:a', 'aac', '-b:a', '128k',
        '-t', str(max_seconds),
        '-f', 'mp4', output_path,
    ]

def prepare_short(original_path, translator, max_seconds=59):
    """Trims to `max_seconds` and letter-boxes to vertical 9:16 with ffmpeg. Returns the new path."""
    output_path = short_output_path(original_path)
    command = build_short_command(original_path, output_path, max_seconds)
    print(translator.get('media.preparing_short', T_INFO=T.INFO, E_PROCESS=E.PROCESS, path=original_path, max_seconds=max_seconds))
    subprocess.run(command, check=True, stdout=subprocess.DEVNULL, stderr=subprocess.PIPE)
    print(translator.get('media.short_ready', T_OK=T.OK, E_SUCCESS=E.SUCCESS, path=output_path))
    return output_path
