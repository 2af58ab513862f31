ERR_BUSY = "BUSY"
ERR_IDENTIFY = "IDENTIFY_FAILED"
ERR_DISCARDED = "DISCARDED"   # call finished after a reset, outcome dropped

# User-facing text. Failures are reported generically; detail only goes to the log.
INVALID_FILE_MESSAGE = "Please upload a valid image file (JPEG, PNG, HEIC, WEBP)."
CAMERA_UNAVAILABLE_MESSAGE = "Could not access camera. Please ensure you have given permission."
CAPTURE_FAILED_MESSAGE = "Could not capture a photo from the camera. Please try again."
IDENTIFY_ERROR_MESSAGE = "Could not identify the species. Please try another image."
IDENTIFY_ERROR_TITLE = "Error Identifying Species"


class InvalidImageError(ValueError):
    """Image is not an allowed type or not a well-formed data URI."""


class CameraUnavailableError(RuntimeError):
    """No camera device, or access was denied."""


class IdentificationError(RuntimeError):
    """The remote identification call returned nothing usable."""
