from blog_content.configs.settings import (
    ALLOWED_IMAGE_TYPES,
    PRIMARY_LANGUAGE,
    SUPPORTED_LANGUAGES,
    LimiterConfig,
    Settings,
    settings,
)

__all__ = [
    "ALLOWED_IMAGE_TYPES",
    "LimiterConfig",
    "PRIMARY_LANGUAGE",
    "SUPPORTED_LANGUAGES",
    "Settings",
    "settings",
]
