class EventError:
    # Generic
    UNKNOWN_ERROR = "unknown_error"

    # Processing: JavaScript
    JS_GENERIC_FETCH_ERROR = "js_generic_fetch_error"
    JS_INVALID_URL = "js_invalid_url"
    JS_MISSING_ROW_OR_COLUMN = "js_missing_row_or_column"
    JS_INVALID_ROW_OR_COLUMN = "js_invalid_row_or_column"
    JS_INVALID_SOURCEMAP = "js_invalid_sourcemap"
    JS_INVALID_SOURCEMAP_LOCATION = "js_invalid_sourcemap_location"
