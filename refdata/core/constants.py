"""常量定义：集中维护状态码、缓存前缀与分页限制。"""

HTTP_STATUS_OK = 200
HTTP_STATUS_BAD_REQUEST = 400
HTTP_STATUS_FORBIDDEN = 403
HTTP_STATUS_NOT_FOUND = 404
HTTP_STATUS_CONFLICT = 409
HTTP_STATUS_INTERNAL_SERVER_ERROR = 500

CONFIG_CACHE_PREFIX = "config:"

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 200
