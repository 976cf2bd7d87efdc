import re
from googleapiclient.discovery import build
from googleapiclient.http import MediaFileUpload

from tubebatch.config import T, E, API_SERVICE_NAME, API_VERSION
from tubebatch.quota import increment_quota

VIDEO_ID_PATTERN = re.compile(r'(?:v=|/)([0-9A-Za-z_-]{11})')
SHORTS_TAG = '#shorts'
SHORTS_PATTERN = re.compile(r'#shorts', re.IGNORECASE)

# Outcomes of a description update
UPDATED, UNCHANGED, NOT_FOUND = "updated", "unchanged", "not_found"

def build_youtube_service(credentials):
    return build(API_SERVICE_NAME, API_VERSION, credentials=credentials)

def extract_video_id(url):
    """Returns the 11-character video ID from a watch, share or embed URL, or None."""
    if not url:
        return None
    match = VIDEO_ID_PATTERN.search(str(url))
    return match.group(1) if match else None

def parse_tags(tags):
    if not tags:
        return []
    return [tag.strip() for tag in str(tags).split(',') if tag.strip()]

def parse_made_for_kids(value):
    return value is True or value == 'true'

def build_video_metadata(title, description, tags, category_id, privacy_status, made_for_kids):
    return {
        'title': title,
        'description': description or '',
        'tags': parse_tags(tags),
        'category_id': str(category_id),
        'privacy_status': privacy_status,
        'made_for_kids': parse_made_for_kids(made_for_kids),
    }

def as_short(metadata):
    """Copy of the metadata with the #shorts marker in the title and tags."""
    short = dict(metadata)
    title = short.get('title') or 'Untitled Short'
    if not SHORTS_PATTERN.search(title):
        title = f"{title} {SHORTS_TAG}"
    tags = list(short.get('tags', []))
    if not any(SHORTS_PATTERN.search(tag) for tag in tags):
        tags.insert(0, SHORTS_TAG)
    short.update(title=title, tags=tags)
    return short

def build_insert_body(metadata):
    return {
        'snippet': {
            'title': metadata['title'],
            'description': metadata['description'],
            'tags': metadata['tags'],
            'categoryId': metadata['category_id'],
        },
        'status': {
            'privacyStatus': metadata['privacy_status'],
            'selfDeclaredMadeForKids': metadata['made_for_kids'],
        },
    }

def upload_video(youtube, metadata, media_path, translator):
    """Uploads a video and returns the API response."""
    print(translator.get('youtube_api.uploading_video', T_INFO=T.INFO, E_ROCKET=E.ROCKET, title=metadata['title']))
    media_body = MediaFileUpload(media_path, chunksize=-1, resumable=True)
    response = youtube.videos().insert(part="snippet,status", body=build_insert_body(metadata), media_body=media_body).execute()
    increment_quota('videos.insert', translator)
    print(translator.get('youtube_api.upload_success', T_OK=T.OK, E_SUCCESS=E.SUCCESS, title=metadata['title'], video_id=response['id']))
    return response

def get_video_snippet(youtube, video_id, translator):
    """Returns the current snippet of a video, or None when the ID is unknown."""
    response = youtube.videos().list(part="snippet", id=video_id).execute()
    increment_quota('videos.list', translator)
    items = response.get('items', [])
    return items[0]['snippet'] if items else None

def update_video_description(youtube, video_id, description, translator):
    """
    Replaces a video's description. The API only accepts a full snippet on update,
    so the current one is fetched, changed and sent back whole.
    """
    snippet = get_video_snippet(youtube, video_id, translator)
    if snippet is None:
        print(translator.get('youtube_api.video_not_found', T_WARN=T.WARN, E_WARN=E.WARN, video_id=video_id))
        return NOT_FOUND

    if snippet.get('description') == description:
        print(translator.get('youtube_api.description_up_to_date', T_INFO=T.INFO, E_INFO=E.INFO, video_id=video_id))
        return UNCHANGED

    snippet['description'] = description
    youtube.videos().update(part="snippet", body={'id': video_id, 'snippet': snippet}).execute()
    increment_quota('videos.update', translator)
    print(translator.get('youtube_api.description_updated', T_OK=T.OK, E_SUCCESS=E.SUCCESS, video_id=video_id))
    return UPDATED
