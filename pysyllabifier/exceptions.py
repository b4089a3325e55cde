class AudioLoadError(Exception):
    """Raised when audio file cannot be loaded or is invalid."""


class UnknownSyllabifierError(Exception):
    """Raised when a segmentation method name is not registered."""
