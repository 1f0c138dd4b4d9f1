"""Options block handed to the external conferencing constructor."""
from __future__ import annotations

from typing import Any

from ..schemas.jaas import IssuedToken, UserRole

TOOLBAR_BUTTONS: tuple[str, ...] = (
    "microphone",
    "camera",
    "desktop",
    "fullscreen",
    "fodeviceselection",
    "hangup",
    "profile",
    "chat",
    "settings",
    "raisehand",
    "filmstrip",
    "tileview",
    "videobackgroundblur",
    "mute-everyone",
    "mute-video-everyone",
)


def build_meeting_options(
    token: IssuedToken,
    *,
    display_name: str,
    parent_node: Any = None,
) -> dict[str, Any]:
    """Return constructor options for a consultation session.

    Recording and transcription are always off. Patients join with audio muted.
    """

    is_patient = token.user_role is UserRole.PATIENT
    return {
        "roomName": token.room_name,
        "jwt": token.token,
        "parentNode": parent_node,
        "width": "100%",
        "height": "100%",
        "userInfo": {"displayName": display_name},
        "configOverwrite": {
            "startWithAudioMuted": is_patient,
            "startWithVideoMuted": False,
            "stereo": False,
            "enableWelcomePage": False,
            "enableClosePage": False,
            "enableNoisyMicDetection": True,
            "enableNoAudioSignal": True,
            "enableTalkWhileMuted": False,
            "defaultLocalDisplayName": display_name,
            "defaultRemoteDisplayName": "Doctor" if is_patient else "Patient",
            "disableDeepLinking": True,
            "disableInviteFunctions": True,
            "disableThirdPartyRequests": True,
            "fileRecordingsEnabled": False,
            "recordingService": {"enabled": False, "sharingEnabled": False},
            "transcribingEnabled": False,
            "transcription": {"enabled": False},
            "liveStreamingEnabled": False,
            "enableConferenceMapper": False,
            "disableRemoteControl": True,
        },
        "interfaceConfigOverwrite": {
            "TOOLBAR_BUTTONS": list(TOOLBAR_BUTTONS),
            "SHOW_JITSI_WATERMARK": False,
            "SHOW_WATERMARK_FOR_GUESTS": False,
            "SHOW_BRAND_WATERMARK": True,
            "BRAND_WATERMARK_LINK": "",
            "MOBILE_APP_PROMO": False,
            "RECENT_LIST_ENABLED": False,
            "SETTINGS_SECTIONS": ["devices", "language", "profile"],
            "HIDE_INVITE_MORE_HEADER": True,
            "DEFAULT_BACKGROUND": "#f8fafc",
            "TOOLBAR_TIMEOUT": 10000,
            "CHAT_ENABLED": True,
        },
    }
