class TmpltError(Exception):
    # base exception for all application-specific errors.
    pass

class ConfigError(TmpltError):
    # errors related to configuration and values files.
    pass

class FileAccessError(TmpltError):
    # unrecoverable failure reading from the base directory; the render must abort.
    def __init__(self, message: str, path: str | None = None):
        super().__init__(message)
        self.path = path

class TemplateError(TmpltError):
    # errors related to template compilation or rendering.
    pass

class OutputError(TmpltError):
    # errors during output operations.
    pass
