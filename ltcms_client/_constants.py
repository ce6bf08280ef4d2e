"""Common literal values used across ltcms_client.

These constants keep endpoint paths, cookie names, and retry defaults in one
place so the client, the stores, and the tests agree on the wire contract of
the tutorial CMS API. Intended for internal use within the ltcms_client
package.

Examples
--------
>>> from ltcms_client import _constants
>>> _constants.PUBLISHED_PAGE_PATH.format(slug="grundlagen")
'/public/pages/grundlagen'
>>> _constants.DEFAULT_API_BASE
'http://localhost:8489/api'
"""

DEFAULT_API_BASE = "http://localhost:8489/api"
DEFAULT_TIMEOUT = 15.0
USER_AGENT = "ltcms-client/0.1"

CSRF_COOKIE_NAME = "ltcms_csrf"
CSRF_HEADER_NAME = "x-csrf-token"
SAFE_METHODS = frozenset({"GET", "HEAD", "OPTIONS"})

AUTH_ME_PATH = "/auth/me"
AUTH_LOGIN_PATH = "/auth/login"
AUTH_LOGOUT_PATH = "/auth/logout"
TUTORIALS_PATH = "/tutorials"
TUTORIAL_PATH = "/tutorials/{tutorial_id}"
TUTORIAL_COMMENTS_PATH = "/tutorials/{tutorial_id}/comments"
COMMENT_PATH = "/comments/{comment_id}"
SITE_CONTENT_PATH = "/content"
SITE_CONTENT_SECTION_PATH = "/content/{section}"
PAGES_PATH = "/pages"
PAGE_PATH = "/pages/{page_id}"
PAGE_POSTS_PATH = "/pages/{page_id}/posts"
POST_PATH = "/posts/{post_id}"
PUBLISHED_PAGE_PATH = "/public/pages/{slug}"
PUBLISHED_POST_PATH = "/public/pages/{slug}/posts/{post_slug}"
NAVIGATION_PATH = "/public/navigation"
PUBLISHED_PAGES_PATH = "/public/published-pages"
SEARCH_TUTORIALS_PATH = "/search/tutorials"
SEARCH_TOPICS_PATH = "/search/topics"
UPLOAD_PATH = "/upload"

MAX_LOAD_ATTEMPTS = 3
RETRY_BASE_DELAY = 0.3
