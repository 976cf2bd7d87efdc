import os
from tubebatch.config import T, E
from tubebatch.auth import TokenFileAuthorizer
from tubebatch.media import sanitize_title
from tubebatch.youtube_api import (
    build_youtube_service,
    upload_video,
    update_video_description,
    UPDATED,
)


class ActionExecutor:
    """The side-effecting half of a pipeline: talks to the video host, or pretends to."""

    simulated = False

    def publish(self, metadata, media_path):
        """Uploads the media with the given metadata and returns the new video ID."""
        raise NotImplementedError

    def update_description(self, video_id, description):
        """Returns one of the youtube_api outcomes: UPDATED, UNCHANGED or NOT_FOUND."""
        raise NotImplementedError


class YouTubeExecutor(ActionExecutor):
    def __init__(self, youtube, translator):
        self.youtube = youtube
        self.translator = translator

    def publish(self, metadata, media_path):
        response = upload_video(self.youtube, metadata, media_path, self.translator)
        return response['id']

    def update_description(self, video_id, description):
        return update_video_description(self.youtube, video_id, description, self.translator)


class SimulatedExecutor(ActionExecutor):
    """Reports what would be sent and succeeds without any API call."""

    simulated = True

    def __init__(self, translator):
        self.translator = translator

    def publish(self, metadata, media_path):
        video_id = f"SIMULATED_{sanitize_title(metadata['title'])}"
        print(self.translator.get('executors.simulated_publish', T_WARN=T.WARN, E_VIDEO=E.VIDEO, title=metadata['title'], media_path=media_path, video_id=video_id))
        return video_id

    def update_description(self, video_id, description):
        print(self.translator.get('executors.simulated_update', T_WARN=T.WARN, E_VIDEO=E.VIDEO, video_id=video_id, length=len(description)))
        return UPDATED


def select_executor(config, translator, dry_run=False, authorizer=None):
    """Picks the executor once at startup so the pipelines never branch on auth mode."""
    if dry_run:
        print(translator.get('executors.dry_run', T_WARN=T.WARN, E_WARN=E.WARN))
        return SimulatedExecutor(translator)

    authorizer = authorizer or TokenFileAuthorizer(
        config.client_secrets_file, config.token_file, translator, flow=config.auth_flow
    )
    if config.simulate_without_credentials and not authorizer.has_credentials():
        print(translator.get('executors.no_credentials', T_WARN=T.WARN, E_WARN=E.WARN,
                             client_secrets_file=os.path.abspath(config.client_secrets_file)))
        return SimulatedExecutor(translator)

    credentials = authorizer.obtain_credentials()
    return YouTubeExecutor(build_youtube_service(credentials), translator)
