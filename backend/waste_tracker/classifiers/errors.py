"""Error taxonomy for waste analysis.

Remote failures cross a process boundary, so the final classification is a
substring heuristic over the underlying error message rather than a check of
structured error codes.
"""


class WasteAnalysisError(Exception):
    """Base class for all analysis failures."""

    code = "ANALYSIS_FAILED"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationError(WasteAnalysisError):
    """Required configuration (the API key) is missing."""

    code = "CONFIGURATION_ERROR"


class ModelUnavailable(WasteAnalysisError):
    """Every candidate model in the fallback loop failed."""

    code = "MODEL_UNAVAILABLE"

    def __init__(self, attempted: list[str], last_error: BaseException | None):
        self.attempted = list(attempted)
        self.last_error = last_error
        last = str(last_error) if last_error else "Unknown error"
        super().__init__(
            f"All model attempts failed. Last error: {last}. "
            f"Tried models: {', '.join(self.attempted)}"
        )


class ResponseFormatError(WasteAnalysisError):
    """The model answered, but the answer is not recoverable JSON."""

    code = "RESPONSE_FORMAT_ERROR"

    def __init__(self, message: str, raw_text: str = ""):
        super().__init__(message)
        self.raw_text = raw_text


class InvalidCredential(WasteAnalysisError):
    code = "INVALID_CREDENTIAL"


class QuotaExceeded(WasteAnalysisError):
    code = "QUOTA_EXCEEDED"


class AccessForbidden(WasteAnalysisError):
    code = "ACCESS_FORBIDDEN"


class InvalidRequest(WasteAnalysisError):
    code = "INVALID_REQUEST"


class SourceImageNotFound(WasteAnalysisError):
    code = "IMAGE_NOT_FOUND"


class GenericAnalysisFailure(WasteAnalysisError):
    code = "ANALYSIS_FAILED"


MISSING_API_KEY_MESSAGE = (
    "GEMINI_API_KEY is not set in your .env file. Please add it."
)

INVALID_CREDENTIAL_MESSAGE = (
    "Invalid Gemini API key. Please check your .env file and ensure "
    "GEMINI_API_KEY is set correctly. Get your key at "
    "https://aistudio.google.com/app/apikey"
)
QUOTA_EXCEEDED_MESSAGE = (
    "Gemini API quota exceeded. Please check your Google Cloud billing and "
    "add credits. Visit https://console.cloud.google.com/ to manage your quota."
)
ACCESS_FORBIDDEN_MESSAGE = (
    "Gemini API access forbidden. Please check your API key permissions and "
    "enable the Generative AI API in Google Cloud Console."
)
INVALID_REQUEST_MESSAGE = (
    "Invalid request to Gemini API. Please check the image format and try again."
)
IMAGE_NOT_FOUND_MESSAGE = "Image file not found. Please try uploading again."


def classify_error(error: BaseException) -> WasteAnalysisError:
    """Map an underlying failure to a user-facing error kind.

    Call once, at the outer boundary of the analyzer. The returned error
    should be raised ``from`` the original.
    """
    if isinstance(error, ConfigurationError):
        return error
    # Checked by type first: upload filenames carry digits like "400"
    if isinstance(error, FileNotFoundError):
        return SourceImageNotFound(IMAGE_NOT_FOUND_MESSAGE)

    message = str(error) or error.__class__.__name__

    if "API_KEY" in message:
        return InvalidCredential(INVALID_CREDENTIAL_MESSAGE)
    if "quota" in message or "429" in message:
        return QuotaExceeded(QUOTA_EXCEEDED_MESSAGE)
    if "403" in message or "PERMISSION_DENIED" in message:
        return AccessForbidden(ACCESS_FORBIDDEN_MESSAGE)
    if "400" in message or "INVALID_ARGUMENT" in message:
        return InvalidRequest(INVALID_REQUEST_MESSAGE)
    if "ENOENT" in message:
        return SourceImageNotFound(IMAGE_NOT_FOUND_MESSAGE)

    # Adapter errors (ModelUnavailable, ResponseFormatError) keep their kind
    if isinstance(error, WasteAnalysisError):
        return error

    return GenericAnalysisFailure(f"AI analysis failed: {message}")
