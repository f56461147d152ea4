class GallerySyncError(Exception):
    """Base class for every failure that aborts a gallery sync run."""


class ConfigurationError(GallerySyncError):
    pass


class AuthError(GallerySyncError):
    pass


class ResolutionError(GallerySyncError):
    pass


class ListingError(GallerySyncError):
    pass


class DownloadError(GallerySyncError):
    pass


class CleanupError(GallerySyncError):
    pass


class WriteError(GallerySyncError):
    pass
