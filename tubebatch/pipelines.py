from tubebatch.config import (
    T, E,
    COL_TITLE, COL_YT_TITLE, COL_YT_DESCRIPTION, COL_YT_TAGS, COL_YT_URL,
    COL_CATEGORY, COL_PRIVACY, COL_MADE_FOR_KIDS, COL_MEDIA_URL,
)
from tubebatch.batch import BatchDriver, RowSkipped
from tubebatch.dataset import load_or_fetch_dataset
from tubebatch.media import MediaAcquirer, prepare_short, remove_file
from tubebatch.progress import ProgressRecorder, filter_unprocessed
from tubebatch.youtube_api import build_video_metadata, as_short, extract_video_id, UPDATED

PUBLISH, UPDATE_DESCRIPTIONS = "publish", "update-descriptions"

def title_of(row):
    return row.get(COL_TITLE)

def youtube_url_of(row):
    """The row's YouTube URL; falls back to a trailing unnamed cell that holds one."""
    url = row.get(COL_YT_URL)
    if url:
        return str(url).strip()
    unnamed = row.unnamed_cells()
    if unnamed and isinstance(unnamed[-1], str) and 'youtube.com' in unnamed[-1]:
        return unnamed[-1].strip()
    return ""

def metadata_from_row(row, config):
    return build_video_metadata(
        title=str(row.get(COL_YT_TITLE) or row.get(COL_TITLE)),
        description=str(row.get(COL_YT_DESCRIPTION)),
        tags=row.get(COL_YT_TAGS),
        category_id=row.get(COL_CATEGORY) or config.default_category,
        privacy_status=row.get(COL_PRIVACY) or config.default_privacy,
        made_for_kids=row.get(COL_MADE_FOR_KIDS, default=False),
    )

def _pending_rows_loader(config, marker_column, translator):
    def load_rows():
        dataset = load_or_fetch_dataset(config, translator)
        return filter_unprocessed(dataset.records(), marker_column)
    return load_rows


def run_publish_pipeline(config, executor, translator, acquirer=None):
    """Uploads every row not yet marked in the publish marker column."""
    print(translator.get('pipelines.publish_header', T_HEADER=T.HEADER, E_ROCKET=E.ROCKET, path=config.dataset_path))
    acquirer = acquirer or MediaAcquirer(config.download_dir, translator, cleanup=config.cleanup_downloads)
    recorder = ProgressRecorder(config.dataset_path, config.publish_marker, translator, dry_run=config.dry_run)

    def act(row):
        title, media_url = title_of(row), row.get(COL_MEDIA_URL)
        if not title or not media_url:
            raise RowSkipped(translator.get('pipelines.missing_title_or_media'))

        metadata = metadata_from_row(row, config)
        media = acquirer.acquire(str(media_url), str(title))
        try:
            upload_path = media.path
            if config.shorts:
                metadata = as_short(metadata)
                upload_path = prepare_short(media.path, translator, config.shorts_max_seconds)
            try:
                executor.publish(metadata, upload_path)
            finally:
                if upload_path != media.path:
                    remove_file(upload_path, translator)
        finally:
            acquirer.release(media)

    def record(row):
        return recorder.record_by_key(title_of(row), title_of)

    driver = BatchDriver(
        _pending_rows_loader(config, config.publish_marker, translator), act, record, translator,
        describe=lambda row: str(title_of(row) or f"#{row.position + 1}"),
    )
    return driver.run()


def run_update_pipeline(config, executor, translator):
    """Pushes the spreadsheet description of every unmarked row to its video."""
    print(translator.get('pipelines.update_header', T_HEADER=T.HEADER, E_PROCESS=E.PROCESS, path=config.dataset_path))
    recorder = ProgressRecorder(config.dataset_path, config.update_marker, translator, dry_run=config.dry_run)
    if config.update_match_by == "position":
        print(translator.get('pipelines.position_match_deprecated', T_WARN=T.WARN, E_WARN=E.WARN))

    def act(row):
        url = youtube_url_of(row)
        if not url:
            raise RowSkipped(translator.get('pipelines.missing_youtube_url'))
        video_id = extract_video_id(url)
        if not video_id:
            raise RowSkipped(translator.get('pipelines.invalid_youtube_url', url=url))
        description = row.get(COL_YT_DESCRIPTION)
        if not description:
            raise RowSkipped(translator.get('pipelines.missing_description', video_id=video_id))

        print(translator.get('pipelines.processing_video', T_INFO=T.INFO, E_PROCESS=E.PROCESS, video_id=video_id))
        outcome = executor.update_description(video_id, str(description))
        if outcome != UPDATED:
            raise RowSkipped(translator.get(f'pipelines.outcome_{outcome}', video_id=video_id))

    def record(row):
        if config.update_match_by == "position":
            return recorder.record_by_position(row.position)
        return recorder.record_by_key(youtube_url_of(row), youtube_url_of)

    driver = BatchDriver(
        _pending_rows_loader(config, config.update_marker, translator), act, record, translator,
        describe=lambda row: youtube_url_of(row) or f"#{row.position + 1}",
    )
    return driver.run()


PIPELINES = {
    PUBLISH: run_publish_pipeline,
    UPDATE_DESCRIPTIONS: run_update_pipeline,
}

def run_pipeline(name, config, executor, translator):
    return PIPELINES[name](config, executor, translator)
