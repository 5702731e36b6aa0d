"""
Library constants to avoid hardcoded values.

HAL document keys, reserved link relations and pagination defaults.
"""

# Media Type
HAL_MEDIA_TYPE = "application/hal+json"

# HAL Document Keys
LINKS_KEY = "_links"
EMBEDDED_KEY = "_embedded"
PAGE_KEY = "page"

# Link Attribute Keys
LINK_HREF = "href"
LINK_TITLE = "title"
LINK_TYPE = "type"
LINK_HREFLANG = "hreflang"
LINK_TEMPLATED = "templated"
LINK_DEPRECATED = "deprecated"

# Reserved Link Relations
REL_SELF = "self"
REL_FIRST = "first"
REL_PREV = "prev"
REL_NEXT = "next"
REL_LAST = "last"

# Page Metadata Keys
PAGE_SIZE_KEY = "size"
PAGE_TOTAL_ELEMENTS_KEY = "totalElements"
PAGE_TOTAL_PAGES_KEY = "totalPages"
PAGE_NUMBER_KEY = "number"

# Pagination Query Parameters
QUERY_PARAM_PAGE = "page"
QUERY_PARAM_SIZE = "size"
QUERY_PARAM_SORT = "sort"

# Pagination Configuration
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 1000
DEFAULT_PAGE_NUMBER = 0

# Relation Name Configuration
DEFAULT_PLURAL_SUFFIX = "s"
DEFAULT_STRIP_SUFFIXES = ("DTO", "Dto")

# URI Template Configuration
TEMPLATE_CACHE_SIZE = 512
PORT_DEFAULTS = {"http": 80, "https": 443}

# Sort Directions (as rendered in query strings)
SORT_ASCENDING = "asc"
SORT_DESCENDING = "desc"

# Logging Configuration
LOGGER_NAME = "halwrap"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
DEFAULT_LOG_LEVEL = "info"
