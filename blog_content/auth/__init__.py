from blog_content.auth.secret import (
    UPLOAD_PASSWORD_HEADER,
    get_settings,
    require_upload_secret,
    verify_upload_secret,
)

__all__ = [
    "UPLOAD_PASSWORD_HEADER",
    "get_settings",
    "require_upload_secret",
    "verify_upload_secret",
]
