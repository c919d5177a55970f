from blog_content.utils.helpers import host, iso_utc, slugify, today_str, utc_now

__all__ = ["host", "iso_utc", "slugify", "today_str", "utc_now"]
