import os
import sys
import json
from dataclasses import dataclass, replace
from colorama import init, Fore, Style

init(autoreset=True)

# --- Style Definitions ---
class T:
    HEADER, OK, INFO, WARN, FAIL = Fore.MAGENTA + Style.BRIGHT, Fore.GREEN + Style.BRIGHT, Fore.CYAN, Fore.YELLOW, Fore.RED + Style.BRIGHT

class E:
    SUCCESS, INFO, WARN, FAIL, KEY, ROCKET, FILE, DOWNLOAD, PROCESS, VIDEO, TRASH, REPORT, CLOCK = "✅", "ℹ️", "⚠️", "❌", "🔑", "🚀", "📄", "📥", "⚙️", "🎞️", "🗑️", "📊", "⏰"

# --- Configuration ---
SCOPES = [
    "https://www.googleapis.com/auth/youtube.upload",
    "https://www.googleapis.com/auth/youtube.force-ssl",
]
API_SERVICE_NAME, API_VERSION, CONFIG_FILE = "youtube", "v3", "config.json"

# --- Spreadsheet Columns ---
COL_TITLE = "Title"
COL_YT_TITLE = "YouTube Title"
COL_YT_DESCRIPTION = "YouTube Description"
COL_YT_TAGS = "YouTube Tags"
COL_YT_URL = "YouTube URL"
COL_CATEGORY = "categoryId"
COL_PRIVACY = "privacyStatus"
COL_MADE_FOR_KIDS = "selfDeclaredMadeForKids"
COL_MEDIA_URL = "BlobUrl"

DONE_VALUE = "Yes"
MATCH_MODES = ("key", "position")
AUTH_FLOWS = ("local_server", "console")


@dataclass(frozen=True)
class RunConfig:
    """Settings for one run, built once and handed to every component."""
    dataset_path: str
    remote_url: str = ""
    download_dir: str = "downloads"
    cleanup_downloads: bool = True
    default_category: str = "22"
    default_privacy: str = "private"
    shorts: bool = False
    shorts_max_seconds: int = 59
    publish_marker: str = "Uploaded"
    update_marker: str = "updated_description"
    update_match_by: str = "key"
    client_secrets_file: str = "client_secrets.json"
    token_file: str = "token.json"
    auth_flow: str = "local_server"
    simulate_without_credentials: bool = False
    schedule_time: str = "20:00"
    schedule_timezone: str = "Asia/Kolkata"
    dry_run: bool = False

    @classmethod
    def from_dict(cls, config):
        """Flattens a validated config.json dictionary."""
        dataset = config["dataset"]
        media = config.get("media", {})
        upload = config.get("upload", {})
        markers = config.get("markers", {})
        update = config.get("update", {})
        auth = config.get("auth", {})
        schedule = config.get("schedule", {})

        values = {
            'dataset_path': dataset["path"],
            'remote_url': dataset.get("remote_url"),
            'download_dir': media.get("download_dir"),
            'cleanup_downloads': media.get("cleanup_downloads"),
            'default_category': upload.get("default_category"),
            'default_privacy': upload.get("default_privacy"),
            'shorts': upload.get("shorts"),
            'shorts_max_seconds': upload.get("shorts_max_seconds"),
            'publish_marker': markers.get("publish"),
            'update_marker': markers.get("update"),
            'update_match_by': update.get("match_by"),
            'client_secrets_file': auth.get("client_secrets_file"),
            'token_file': auth.get("token_file"),
            'auth_flow': auth.get("flow"),
            'simulate_without_credentials': auth.get("simulate_without_credentials"),
            'schedule_time': schedule.get("time"),
            'schedule_timezone': schedule.get("timezone"),
        }
        # Unset keys keep the dataclass defaults
        return cls(**{k: v for k, v in values.items() if v is not None})

    def with_overrides(self, **overrides):
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


def _check_section(config, name, translator):
    section = config.get(name, {})
    if not isinstance(section, dict):
        raise ValueError(translator.get('config.section_must_be_dict', section=name))
    return section

def validate_config(config, translator):
    """Validates the structure of the configuration dictionary."""
    if not isinstance(config, dict):
        raise ValueError(translator.get('config.must_be_dict'))
    if "dataset" not in config:
        raise ValueError(translator.get('config.must_have_dataset'))
    dataset = _check_section(config, "dataset", translator)
    if not isinstance(dataset.get("path"), str) or not dataset["path"].strip():
        raise ValueError(translator.get('config.dataset_path_required'))

    for name in ("media", "upload", "markers", "update", "auth", "schedule"):
        _check_section(config, name, translator)

    for name, marker in config.get("markers", {}).items():
        if not isinstance(marker, str) or not marker.strip():
            raise ValueError(translator.get('config.invalid_marker', name=name))

    match_by = config.get("update", {}).get("match_by", "key")
    if match_by not in MATCH_MODES:
        raise ValueError(translator.get('config.invalid_match_by', match_by=match_by))

    flow = config.get("auth", {}).get("flow", "local_server")
    if flow not in AUTH_FLOWS:
        raise ValueError(translator.get('config.invalid_auth_flow', flow=flow))

    at_time = config.get("schedule", {}).get("time", "20:00")
    if not validate_schedule_time(at_time):
        raise ValueError(translator.get('config.invalid_schedule_time', at_time=at_time))

def validate_schedule_time(at_time):
    """Checks an HH:MM wall-clock time string."""
    if not isinstance(at_time, str):
        return False
    parts = at_time.split(':')
    if len(parts) != 2 or not all(p.isdigit() and len(p) == 2 for p in parts):
        return False
    return int(parts[0]) < 24 and int(parts[1]) < 60

def load_config(translator, config_file=CONFIG_FILE):
    if not os.path.exists(config_file):
        print(translator.get('config.file_not_found', T_FAIL=T.FAIL, E_FAIL=E.FAIL, config_file=config_file))
        sys.exit(1)

    try:
        with open(config_file, 'r', encoding='utf-8') as f:
            config = json.load(f)
        validate_config(config, translator)
        return config
    except json.JSONDecodeError as e:
        print(translator.get('config.invalid_json', T_FAIL=T.FAIL, E_FAIL=E.FAIL, e=e))
        sys.exit(1)
    except ValueError as e:
        print(translator.get('config.config_error', T_FAIL=T.FAIL, E_FAIL=E.FAIL, e=e))
        sys.exit(1)
